from __future__ import annotations

from typing import Protocol, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from plansync.errors import ParentNotFoundError
from plansync.models import Exercise, ExercisePlan, Workout
from plansync.observability import ObservabilitySink
from plansync.store import RecordStore


class SelectedExercise(Protocol):
    id: str
    name: str


class PlanOrderingEngine:
    """Turns a selection of exercises into ordered plans at the end of a workout."""

    def __init__(self, store: RecordStore, sink: ObservabilitySink):
        self.store = store
        self.sink = sink

    def max_order(self, workout_id: str, *, session: Session | None = None) -> int:
        db = session or self.store.session
        max_order = db.execute(
            select(func.max(ExercisePlan.order)).where(ExercisePlan.workout_id == workout_id)
        ).scalar_one()
        return max_order or 0

    def add_exercises(self, workout_id: str, exercises: Sequence[SelectedExercise]) -> list[ExercisePlan]:
        """
        Append one plan per exercise, in name order, after the workout's last plan.

        All plans and their parent links commit in one transaction. A plan whose
        workout or exercise cannot be found is skipped (its order number is still
        used up); the rest of the batch commits.
        """
        if not exercises:
            return []

        # Sorting by name keeps the relative order stable across runs
        ordered = sorted(exercises, key=lambda e: e.name)
        created: list[ExercisePlan] = []

        with self.store.write() as db:
            order = self.max_order(workout_id, session=db) + 1
            for exercise in ordered:
                plan = ExercisePlan(order=order, synced=False)
                order += 1
                try:
                    self._attach(db, plan, workout_id, exercise.id)
                except ParentNotFoundError as exc:
                    self.sink.log_warning(f"Could not save new exercise plan to parent objects: {exc}")
                    continue
                created.append(plan)
        return created

    def _attach(self, db: Session, plan: ExercisePlan, workout_id: str, exercise_id: str) -> None:
        workout = db.get(Workout, workout_id)
        exercise = db.get(Exercise, exercise_id)
        if workout is None or exercise is None:
            raise ParentNotFoundError(
                f"workout={workout_id} exercise={exercise_id}",
                details={
                    "workout_id": workout_id,
                    "exercise_id": exercise_id,
                    "missing": "workout" if workout is None else "exercise",
                },
            )
        workout.plans.append(plan)
        exercise.plans.append(plan)
