"""Everything the workout detail screen needs, wired around one workout."""
from __future__ import annotations

import asyncio
from typing import Optional, Sequence

from plansync.models import Workout
from plansync.observability import ObservabilitySink
from plansync.remote import RemoteClient
from plansync.schemas import WorkoutValue
from plansync.store import Relay, RecordStore
from plansync.sync import (
    DeletionWorkflow,
    Lifetime,
    LivePlanProjection,
    PlanOrderingEngine,
    PushResult,
    SyncCoordinator,
)
from plansync.sync.ordering import SelectedExercise
from plansync.sync.projection import Snapshot


class WorkoutDetailModel:
    def __init__(
        self,
        workout: Workout | WorkoutValue,
        store: RecordStore,
        client: RemoteClient,
        *,
        sink: Optional[ObservabilitySink] = None,
        collection_url: Optional[str] = None,
    ):
        # Detached copy; the live row may change or vanish under us
        self.workout = WorkoutValue.model_validate(workout)
        self.sink = sink or ObservabilitySink()
        self.lifetime = Lifetime(f"workout detail {self.workout.id}")

        self.projection = LivePlanProjection(store, self.workout.id)
        self.ordering = PlanOrderingEngine(store, self.sink)
        self.sync = SyncCoordinator(store, client, self.sink, self.lifetime, collection_url=collection_url)
        self.deletion = DeletionWorkflow(store, client, self.lifetime, collection_url=collection_url)

    @property
    def output(self) -> Relay[Snapshot]:
        return self.projection.output

    def configure(self) -> None:
        self.projection.start()

    def on_exercises_selected(self, exercises: Sequence[SelectedExercise]) -> Optional[asyncio.Future[PushResult]]:
        """
        Add the picked exercises to the end of the workout and sync them in the background.

        Must be called from a running event loop; RuntimeError otherwise, with
        nothing written.
        """
        self.lifetime.ensure_alive()
        # The push needs a loop; fail before anything is written, not after.
        asyncio.get_running_loop()
        plans = self.ordering.add_exercises(self.workout.id, exercises)
        if not plans:
            return None
        return self.sync.push(plans)

    async def delete_plan_at(self, section: int, row: int) -> None:
        self.lifetime.ensure_alive()
        item = self.projection.row_at(section, row)
        await self.deletion.delete(item.plan.id)

    async def delete_plan(self, plan_id: str) -> None:
        await self.deletion.delete(plan_id)

    def close(self) -> None:
        self.lifetime.end()
        self.projection.close()
        self.sync.close()
