from .live import DisposeBag, Relay, Subscription
from .record_store import LiveCollection, RecordStore

__all__ = ["DisposeBag", "LiveCollection", "RecordStore", "Relay", "Subscription"]
