"""
Background push of freshly written plans to the remote API.

``push()`` never blocks the local write path: it waits for the store to
publish the committed state, then runs the request as an asyncio task. Only
records the server hands back are marked synced; everything else stays
``synced=False`` for a later ``push_unsynced()`` pass.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from plansync.errors import RemoteError, StaleContextError, StoreError
from plansync.models import ExercisePlan
from plansync.observability import ObservabilitySink, Severity
from plansync.remote import RemoteClient
from plansync.schemas import ExercisePlanPayload
from plansync.settings import get_settings
from plansync.store import DisposeBag, RecordStore
from plansync.sync.lifetime import Lifetime


@dataclass(slots=True)
class PushResult:
    requested: list[str]
    synced: list[str] = field(default_factory=list)
    unsynced: list[str] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SyncCoordinator:
    def __init__(
        self,
        store: RecordStore,
        client: RemoteClient,
        sink: ObservabilitySink,
        lifetime: Lifetime,
        *,
        collection_url: Optional[str] = None,
    ):
        self.store = store
        self.client = client
        self.sink = sink
        self.lifetime = lifetime
        self.collection_url = collection_url or get_settings().EXERCISE_PLANS_PATH
        self._bag = DisposeBag()
        self._tasks: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def push(self, plans: Sequence[ExercisePlan]) -> asyncio.Future[PushResult]:
        """
        Send ``plans`` to the server in one upsert, in the background.

        Must be called from a running event loop. The returned future resolves
        to a PushResult; callers are free to drop it.
        """
        loop = asyncio.get_running_loop()
        result: asyncio.Future[PushResult] = loop.create_future()

        # Snapshot by value now; the live objects may change before the task runs.
        payloads = [ExercisePlanPayload.model_validate(plan) for plan in plans]
        if not payloads:
            result.set_result(PushResult(requested=[]))
            return result

        def launch(_committed: list[ExercisePlan]) -> None:
            task = loop.create_task(self._upsert(payloads))
            self._tasks.add(task)
            task.add_done_callback(partial(self._finish, result))

        self._bag.add(self.store.query(ExercisePlan).first(launch))
        return result

    def push_unsynced(self, workout_id: Optional[str] = None) -> asyncio.Future[PushResult]:
        """Re-drive every plan still waiting for server confirmation."""
        criteria = [ExercisePlan.synced.is_(False)]
        if workout_id is not None:
            criteria.append(ExercisePlan.workout_id == workout_id)
        pending = self.store.query(ExercisePlan, *criteria, order_by=ExercisePlan.order).items()
        return self.push(pending)

    def close(self) -> None:
        # Requests already sent are left to finish; they will find the lifetime over.
        self._bag.dispose()

    def parse_canonical(self, body: Any) -> list[ExercisePlanPayload]:
        if not isinstance(body, list):
            self.sink.log_warning("Could not parse array from exercise plans response")
            return []
        canonical = []
        for item in body:
            try:
                canonical.append(ExercisePlanPayload.model_validate(item))
            except ValidationError as exc:
                self.sink.log_warning(f"Skipping unparsable exercise plan in response: {exc.error_count()} error(s)")
        return canonical

    async def _upsert(self, payloads: list[ExercisePlanPayload]) -> PushResult:
        requested = [p.id for p in payloads]
        try:
            self.lifetime.ensure_alive()
            body = await self.client.upsert(payloads, self.collection_url)
            self.lifetime.ensure_alive()
        except (RemoteError, StaleContextError) as exc:
            self.sink.log_error(exc, Severity.info)
            return PushResult(requested=requested, unsynced=requested, error=exc)

        canonical = self.parse_canonical(body)
        try:
            self._reconcile(canonical)
        except StoreError as exc:
            self.sink.log_error(exc, Severity.error)
            return PushResult(requested=requested, unsynced=requested, error=exc)

        synced = [c.id for c in canonical]
        confirmed = set(synced)
        return PushResult(
            requested=requested,
            synced=synced,
            unsynced=[i for i in requested if i not in confirmed],
        )

    def _finish(self, result: asyncio.Future, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if result.done():
            return
        if task.cancelled():
            result.cancel()
        elif task.exception() is not None:
            result.set_exception(task.exception())
        else:
            result.set_result(task.result())

    def _reconcile(self, canonical: list[ExercisePlanPayload]) -> None:
        with self.store.write() as session:
            # Orders may be permuted within a batch; park moving rows at negative
            # slots before the merge so (workout_id, order) stays unique at each flush.
            parked = False
            for slot, payload in enumerate(canonical, start=1):
                local = session.get(ExercisePlan, payload.id)
                if local is not None and local.order != payload.order:
                    local.order = -slot
                    parked = True
            if parked:
                session.flush()
            for payload in canonical:
                session.merge(payload.to_record(synced=True))
