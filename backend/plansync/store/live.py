"""Small publish/subscribe primitives shared by the store and the projection."""
from __future__ import annotations

import logging
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")

log = logging.getLogger("plansync")


class Subscription:
    """Handle returned by every ``subscribe``; ``dispose()`` is idempotent."""

    def __init__(self, on_dispose: Optional[Callable[[], None]] = None):
        self._on_dispose = on_dispose
        self.disposed = False

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        callback, self._on_dispose = self._on_dispose, None
        if callback is not None:
            callback()


class DisposeBag:
    """Collects subscriptions so their owner can release them in one call."""

    def __init__(self):
        self._subscriptions: list[Subscription] = []
        self.disposed = False

    def add(self, subscription: Subscription) -> Subscription:
        if self.disposed:
            subscription.dispose()
            return subscription
        self._subscriptions = [s for s in self._subscriptions if not s.disposed]
        if not subscription.disposed:
            self._subscriptions.append(subscription)
        return subscription

    def dispose(self) -> None:
        self.disposed = True
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription.dispose()

    def __len__(self) -> int:
        return sum(1 for s in self._subscriptions if not s.disposed)


class _Entry(Generic[T]):
    __slots__ = ("observer",)

    def __init__(self, observer: Callable[[T], None]):
        self.observer = observer


class Relay(Generic[T]):
    """
    Holds the latest value and pushes every new one to its observers.

    New observers get the current value straight away, never older ones.
    """

    def __init__(self, value: T):
        self._value = value
        self._entries: list[_Entry[T]] = []

    @property
    def value(self) -> T:
        return self._value

    def accept(self, value: T) -> None:
        self._value = value
        for entry in list(self._entries):
            self._deliver(entry, value)

    def subscribe(self, observer: Callable[[T], None]) -> Subscription:
        entry = _Entry(observer)
        self._entries.append(entry)
        subscription = Subscription(lambda: self._remove(entry))
        self._deliver(entry, self._value)
        return subscription

    @property
    def observer_count(self) -> int:
        return len(self._entries)

    def _remove(self, entry: _Entry[T]) -> None:
        if entry in self._entries:
            self._entries.remove(entry)

    def _deliver(self, entry: _Entry[T], value: T) -> None:
        try:
            entry.observer(value)
        except Exception:
            log.exception("Relay observer failed")
