from __future__ import annotations

from typing import Optional, Sequence

from plansync.models import ExercisePlan
from plansync.schemas import ProjectionRow, ProjectionSection
from plansync.store import RecordStore, Relay, Subscription

SECTION_KEY = "1"

Snapshot = tuple[ProjectionSection, ...]


class LivePlanProjection:
    """
    Keeps ``output`` equal to the detached, order-sorted plans of one workout.

    Each store change yields one complete snapshot; observers never see a
    partially rebuilt one.
    """

    def __init__(self, store: RecordStore, workout_id: str):
        self.workout_id = workout_id
        self.output: Relay[Snapshot] = Relay(())
        self._query = store.query(
            ExercisePlan,
            ExercisePlan.workout_id == workout_id,
            order_by=ExercisePlan.order,
        )
        self._subscription: Optional[Subscription] = None

    @property
    def active(self) -> bool:
        return self._subscription is not None and not self._subscription.disposed

    def start(self) -> None:
        if self.active:
            return
        self._subscription = self._query.subscribe(self._on_change)

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.dispose()

    def recompute(self) -> Snapshot:
        return self.derive(self._query.items())

    def row_at(self, section: int, row: int) -> ProjectionRow:
        return self.output.value[section].rows[row]

    @staticmethod
    def derive(plans: Sequence[ExercisePlan]) -> Snapshot:
        rows = tuple(ProjectionRow.from_record(p) for p in sorted(plans, key=lambda p: p.order))
        return (ProjectionSection(key=SECTION_KEY, rows=rows),)

    def _on_change(self, plans: list[ExercisePlan]) -> None:
        self.output.accept(self.derive(plans))
