from __future__ import annotations

from collections import OrderedDict
from enum import Enum
from typing import Optional

from plansync.models import ExercisePlan
from plansync.remote import RemoteClient
from plansync.settings import get_settings
from plansync.store import RecordStore
from plansync.sync.lifetime import Lifetime


class DeletionState(str, Enum):
    PENDING_REMOTE = "pending_remote"
    LOCALLY_ABSENT = "locally_absent"


class DeletionWorkflow:
    """Remote delete first, local delete only after the server said yes."""

    # Completed deletions remembered for state(); oldest fall off first.
    HISTORY = 128

    def __init__(
        self,
        store: RecordStore,
        client: RemoteClient,
        lifetime: Lifetime,
        *,
        collection_url: Optional[str] = None,
    ):
        self.store = store
        self.client = client
        self.lifetime = lifetime
        self.collection_url = collection_url or get_settings().EXERCISE_PLANS_PATH
        self._pending: set[str] = set()
        self._done: OrderedDict[str, None] = OrderedDict()

    def state(self, plan_id: str) -> Optional[DeletionState]:
        if plan_id in self._pending:
            return DeletionState.PENDING_REMOTE
        if plan_id in self._done:
            return DeletionState.LOCALLY_ABSENT
        return None

    async def delete(self, plan_id: str) -> None:
        """
        Raises:
            RemoteError: the server refused or could not be reached; the local
                record is untouched.
            StaleContextError: the owner went away before or during the call.
        """
        self.lifetime.ensure_alive()
        self._done.pop(plan_id, None)
        self._pending.add(plan_id)
        try:
            await self.client.delete(plan_id, self.collection_url)
            self.lifetime.ensure_alive()
            self.store.delete(ExercisePlan, plan_id)
        finally:
            self._pending.discard(plan_id)
        self._done[plan_id] = None
        while len(self._done) > self.HISTORY:
            self._done.popitem(last=False)
