import pytest
from pydantic import ValidationError

from plansync.models import ExercisePlan, ExerciseType, Workout, WorkoutSession
from plansync.sync import SECTION_KEY, LivePlanProjection, PlanOrderingEngine

@pytest.fixture
def projection(store, workout):
    p = LivePlanProjection(store, workout.id)
    yield p
    p.close()

def collect(projection):
    seen = []
    projection.output.subscribe(seen.append)
    return seen

def test_start_publishes_current_sorted_snapshot(store, workout, add_plans, projection):
    add_plans(workout, [2, 1, 3])
    projection.start()
    (section,) = projection.output.value
    assert section.key == SECTION_KEY
    assert section.identity == "1"
    assert [r.plan.order for r in section.rows] == [1, 2, 3]

def test_new_plan_appears_once_in_order(store, sink, workout, add_plans, make_exercises, projection):
    add_plans(workout, [1])
    projection.start()
    seen = collect(projection)
    (plan,) = PlanOrderingEngine(store, sink).add_exercises(workout.id, make_exercises("Row"))
    assert len(seen) == 2
    rows = seen[-1][0].rows
    assert [r.identity for r in rows].count(plan.id) == 1
    assert [r.plan.order for r in rows] == [1, 2]

def test_rows_resolve_exercise_and_workout(store, sink, workout, make_exercises, projection):
    with store.write() as db:
        db.add(WorkoutSession(workout_id=workout.id, notes="monday"))
    projection.start()
    PlanOrderingEngine(store, sink).add_exercises(workout.id, make_exercises("Run", type=ExerciseType.cardio))
    row = projection.row_at(0, 0)
    assert row.exercise.name == "Run"
    assert row.exercise.display_type == "Cardio"
    assert row.workout.name == "Leg Day"
    assert row.workout.session_count == 1

def test_zero_selection_emits_nothing(store, sink, workout, projection):
    projection.start()
    seen = collect(projection)
    PlanOrderingEngine(store, sink).add_exercises(workout.id, [])
    assert len(seen) == 1

def test_other_workouts_do_not_trigger_emissions(store, add_plans, workout, projection):
    with store.write() as db:
        other = Workout(name="Arms")
        db.add(other)
    projection.start()
    seen = collect(projection)
    add_plans(other, [1])
    assert len(seen) == 1

def test_recompute_without_changes_is_identical(store, workout, add_plans, projection):
    add_plans(workout, [1, 2])
    projection.start()
    assert projection.recompute() == projection.output.value
    assert projection.recompute() == projection.recompute()

def test_snapshots_are_detached_from_the_store(store, workout, add_plans, projection):
    (plan,) = add_plans(workout, [1])
    projection.start()
    before = projection.output.value
    with store.write():
        plan.synced = True
    assert before[0].rows[0].plan.synced is False
    assert projection.output.value[0].rows[0].plan.synced is True
    with pytest.raises(ValidationError):
        before[0].rows[0].plan.synced = True

def test_late_observer_gets_latest_snapshot_only(store, workout, add_plans, projection):
    projection.start()
    add_plans(workout, [1])
    add_plans(workout, [2])
    seen = collect(projection)
    assert len(seen) == 1
    assert len(seen[0][0].rows) == 2

def test_close_releases_store_subscription(store, workout, add_plans, projection):
    projection.start()
    assert store.live_query_count == 1
    projection.close()
    assert store.live_query_count == 0
    assert not projection.active
    seen = collect(projection)
    add_plans(workout, [1])
    assert len(seen) == 1

def test_delete_removes_row(store, workout, add_plans, projection):
    plans = add_plans(workout, [1, 2])
    projection.start()
    store.delete(ExercisePlan, plans[0].id)
    assert [r.plan.order for r in projection.output.value[0].rows] == [2]
