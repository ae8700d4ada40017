from .client import RemoteClient

__all__ = ["RemoteClient"]
