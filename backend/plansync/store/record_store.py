"""
Transactional local store for workouts, exercises and exercise plans.

Writes go through ``RecordStore.write()``; once a write commits, every live
query whose matching set changed is re-read and pushed to its observers.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Generic, Iterable, Iterator, Optional, TypeVar

from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from plansync import models  # noqa: F401  # registers every table on Base.metadata
from plansync.db import Base, make_engine
from plansync.errors import StoreError
from plansync.settings import get_settings
from plansync.store.live import Subscription

M = TypeVar("M")

log = logging.getLogger("plansync")


def _signature(items: list[Any]) -> tuple:
    return tuple(
        tuple(getattr(obj, attr.key) for attr in inspect(obj).mapper.column_attrs)
        for obj in items
    )


class _Observer(Generic[M]):
    __slots__ = ("callback", "once", "pending", "subscription")

    def __init__(self, callback: Callable[[list[M]], None], *, once: bool):
        self.callback = callback
        self.once = once
        self.pending = False
        self.subscription: Optional[Subscription] = None


class LiveCollection(Generic[M]):
    """A filtered query that re-emits its matching set after each relevant commit."""

    def __init__(self, store: "RecordStore", model: type[M], criteria: tuple, order_by: Any = None):
        self._store = store
        self.model = model
        self._criteria = criteria
        self._order_by = order_by
        self._observers: list[_Observer[M]] = []
        self._signature: Optional[tuple] = None

    def statement(self):
        stmt = select(self.model).where(*self._criteria)
        if self._order_by is not None:
            stmt = stmt.order_by(self._order_by)
        return stmt

    def items(self) -> list[M]:
        return list(self._store.session.execute(self.statement()).scalars().all())

    def subscribe(self, observer: Callable[[list[M]], None]) -> Subscription:
        """Deliver the current matching set now, then again after every change to it."""
        return self._add(observer, once=False)

    def first(self, observer: Callable[[list[M]], None]) -> Subscription:
        """Deliver a single, committed matching set, then unsubscribe."""
        return self._add(observer, once=True)

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def _add(self, callback: Callable[[list[M]], None], *, once: bool) -> Subscription:
        observer = _Observer(callback, once=once)
        observer.subscription = Subscription(lambda: self._remove(observer))
        self._observers.append(observer)
        self._store._attach(self)

        if self._store.in_write:
            # Uncommitted state must not leak out; wait for the commit fan-out.
            observer.pending = True
        else:
            items = self.items()
            self._signature = _signature(items)
            self._deliver(observer, items)
        return observer.subscription

    def _remove(self, observer: _Observer[M]) -> None:
        if observer in self._observers:
            self._observers.remove(observer)
        if not self._observers:
            self._store._detach(self)

    def _refresh(self) -> None:
        items = self.items()
        signature = _signature(items)
        changed = signature != self._signature
        self._signature = signature
        for observer in list(self._observers):
            if changed or observer.pending:
                observer.pending = False
                self._deliver(observer, items)

    def _settle_pending(self) -> None:
        """After a rollback: one-shot observers waiting on it are dropped, others get the committed set."""
        waiting = [o for o in self._observers if o.pending]
        if not waiting:
            return
        items = None
        for observer in waiting:
            observer.pending = False
            if observer.once:
                observer.subscription.dispose()
                continue
            if items is None:
                items = self.items()
                self._signature = _signature(items)
            self._deliver(observer, items)

    def _deliver(self, observer: _Observer[M], items: list[M]) -> None:
        if observer.once:
            observer.subscription.dispose()
        try:
            observer.callback(items)
        except Exception:
            log.exception("Live query observer failed for %s", self.model.__name__)


class RecordStore:
    """Single-writer local store; all access happens on one thread."""

    def __init__(self, session_factory: sessionmaker):
        self._session: Session = session_factory()
        self._live: list[LiveCollection] = []
        self._in_write = False
        self._notifying = False
        self._dirty = False

    @classmethod
    def open(cls, url: Optional[str] = None) -> "RecordStore":
        engine = make_engine(url or get_settings().STORE_URL)
        Base.metadata.create_all(engine)
        return cls(sessionmaker(bind=engine, autoflush=False))

    @property
    def session(self) -> Session:
        return self._session

    @property
    def in_write(self) -> bool:
        return self._in_write

    # READS
    def get(self, model: type[M], pk: Any) -> Optional[M]:
        return self._session.get(model, pk)

    def query(self, model: type[M], *criteria: Any, order_by: Any = None) -> LiveCollection[M]:
        return LiveCollection(self, model, criteria, order_by)

    # WRITES
    @contextmanager
    def write(self) -> Iterator[Session]:
        """All-or-nothing transaction; observers hear about it only after commit."""
        if self._in_write:
            raise StoreError("Nested write transactions are not supported")
        session = self._session
        self._in_write = True
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            self._abort()
            raise StoreError("Local transaction failed", cause=exc) from exc
        except BaseException:
            self._abort()
            raise
        finally:
            self._in_write = False
        self._notify()

    def _abort(self) -> None:
        self._session.rollback()
        self._in_write = False
        for live in list(self._live):
            live._settle_pending()

    def add_or_update(self, records: Iterable[M]) -> list[M]:
        """Upsert by primary key; fields of an existing row are overwritten."""
        with self.write() as session:
            merged = [session.merge(record) for record in records]
        return merged

    def delete(self, model: type, pk: Any) -> bool:
        with self.write() as session:
            obj = session.get(model, pk)
            if obj is None:
                return False
            session.delete(obj)
        return True

    def close(self) -> None:
        self._live.clear()
        self._session.close()

    # NOTIFICATIONS
    def _attach(self, live: LiveCollection) -> None:
        if live not in self._live:
            self._live.append(live)

    def _detach(self, live: LiveCollection) -> None:
        if live in self._live:
            self._live.remove(live)

    @property
    def live_query_count(self) -> int:
        return len(self._live)

    def _notify(self) -> None:
        # Commits made by observers are folded into another pass, not nested.
        if self._notifying:
            self._dirty = True
            return
        self._notifying = True
        try:
            while True:
                self._dirty = False
                for live in list(self._live):
                    live._refresh()
                if not self._dirty:
                    break
        finally:
            self._notifying = False
