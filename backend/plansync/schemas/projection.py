"""Detached value objects handed to the presentation layer.

Everything here is frozen and compares structurally, so two snapshots built
from the same store state are equal and nothing downstream can write back
into live storage.
"""
from datetime import datetime
from pydantic import BaseModel
from plansync.models import ExercisePlan, ExerciseType

class _Value(BaseModel):
    model_config = {"from_attributes": True, "frozen": True}

class WorkoutValue(_Value):
    id: str
    name: str
    created_at: datetime | None = None
    session_count: int = 0

class ExerciseValue(_Value):
    id: str
    name: str
    type: ExerciseType

    @property
    def display_type(self) -> str:
        return self.type.display

class PlanValue(_Value):
    id: str
    workout_id: str
    exercise_id: str
    order: int
    synced: bool
    updated_at: datetime | None = None

class ProjectionRow(_Value):
    plan: PlanValue
    workout: WorkoutValue | None = None
    exercise: ExerciseValue | None = None

    @property
    def identity(self) -> str:
        return self.plan.id

    @classmethod
    def from_record(cls, plan: ExercisePlan) -> "ProjectionRow":
        workout = plan.workout
        exercise = plan.exercise
        return cls(
            plan=PlanValue.model_validate(plan),
            workout=WorkoutValue.model_validate(workout) if workout is not None else None,
            exercise=ExerciseValue.model_validate(exercise) if exercise is not None else None,
        )

class ProjectionSection(_Value):
    key: str
    rows: tuple[ProjectionRow, ...] = ()

    @property
    def identity(self) -> str:
        return self.key
