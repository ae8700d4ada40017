from .workout import Workout
from .session import WorkoutSession
from .exercise import Exercise, ExerciseType
from .exercise_plan import ExercisePlan
from .plan_record import PlanRecord

__all__ = ["Workout", "WorkoutSession", "Exercise", "ExerciseType", "ExercisePlan", "PlanRecord"]
