"""Exception hierarchy for plansync."""

from __future__ import annotations

from typing import Any, Optional


class PlanSyncError(Exception):
    """
    Base exception for plansync.

    Attributes:
        details: Optional structured information (e.g. HTTP status, record ids).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause


class StoreError(PlanSyncError):
    """Raised when a local store transaction fails; nothing from it was committed."""


class ParentNotFoundError(PlanSyncError):
    """A plan's workout or exercise could not be resolved in the local store."""


class RemoteError(PlanSyncError):
    """Base class for failures talking to the remote API."""


class NetworkError(RemoteError):
    """Raised when the request never got a response (connection, DNS, timeout)."""


class RemoteStatusError(RemoteError):
    """Raised when the remote API answers with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.details.setdefault("status_code", status_code)


class PayloadError(RemoteError):
    """Raised when a response body cannot be decoded."""


class StaleContextError(PlanSyncError):
    """Raised when an async continuation outlives the component that started it."""
