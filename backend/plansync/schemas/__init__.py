from .exercise_plan import ExercisePlanPayload
from .projection import (
    ExerciseValue,
    PlanValue,
    ProjectionRow,
    ProjectionSection,
    WorkoutValue,
)

__all__ = [
    "ExercisePlanPayload",
    "ExerciseValue",
    "PlanValue",
    "ProjectionRow",
    "ProjectionSection",
    "WorkoutValue",
]
