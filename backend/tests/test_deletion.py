import asyncio

import pytest

from plansync.errors import NetworkError, RemoteStatusError, StaleContextError
from plansync.models import ExercisePlan
from plansync.sync import DeletionState, DeletionWorkflow, Lifetime

URL = "/exercise-plans"

@pytest.fixture
def lifetime():
    return Lifetime("test owner")

@pytest.fixture
def deletion(store, remote, lifetime):
    return DeletionWorkflow(store, remote, lifetime, collection_url=URL)

@pytest.mark.asyncio
async def test_remote_success_then_local_delete(store, remote, deletion, workout, add_plans):
    (plan,) = add_plans(workout, [1])
    plan_id = plan.id
    await deletion.delete(plan_id)
    assert remote.deletes == [(plan_id, URL)]
    assert store.get(ExercisePlan, plan_id) is None
    assert deletion.state(plan_id) is DeletionState.LOCALLY_ABSENT

@pytest.mark.asyncio
async def test_local_record_stays_until_remote_confirms(store, remote, deletion, workout, add_plans):
    remote.gate = asyncio.Event()
    (plan,) = add_plans(workout, [1])
    task = asyncio.ensure_future(deletion.delete(plan.id))
    await asyncio.sleep(0)
    assert deletion.state(plan.id) is DeletionState.PENDING_REMOTE
    assert store.get(ExercisePlan, plan.id) is not None
    remote.gate.set()
    await task
    assert store.get(ExercisePlan, plan.id) is None

@pytest.mark.asyncio
async def test_remote_failure_surfaces_the_same_error(store, remote, deletion, workout, add_plans):
    (plan,) = add_plans(workout, [1])
    plan_id = plan.id
    remote.error = NetworkError("network unreachable")
    with pytest.raises(NetworkError, match="network unreachable") as exc:
        await deletion.delete(plan_id)
    assert exc.value is remote.error
    local = store.get(ExercisePlan, plan_id)
    assert local is plan
    assert local.order == 1
    assert deletion.state(plan_id) is None

@pytest.mark.asyncio
async def test_server_rejection_leaves_local_record(store, remote, deletion, workout, add_plans):
    (plan,) = add_plans(workout, [1])
    remote.error = RemoteStatusError("gone", status_code=404)
    with pytest.raises(RemoteStatusError):
        await deletion.delete(plan.id)
    assert store.get(ExercisePlan, plan.id) is not None

@pytest.mark.asyncio
async def test_discarded_owner_fails_before_calling_remote(remote, deletion, lifetime, workout, add_plans):
    (plan,) = add_plans(workout, [1])
    lifetime.end()
    with pytest.raises(StaleContextError, match="no longer available"):
        await deletion.delete(plan.id)
    assert remote.deletes == []

@pytest.mark.asyncio
async def test_owner_discarded_mid_flight_keeps_local_record(store, remote, deletion, lifetime, workout, add_plans):
    remote.gate = asyncio.Event()
    (plan,) = add_plans(workout, [1])
    task = asyncio.ensure_future(deletion.delete(plan.id))
    await asyncio.sleep(0)
    lifetime.end()
    remote.gate.set()
    with pytest.raises(StaleContextError):
        await task
    assert store.get(ExercisePlan, plan.id) is not None

@pytest.mark.asyncio
async def test_completed_deletions_are_remembered_up_to_a_limit(deletion, workout, add_plans):
    deletion.HISTORY = 2
    plans = add_plans(workout, [1, 2, 3])
    ids = [p.id for p in plans]
    for plan_id in ids:
        await deletion.delete(plan_id)
    assert [deletion.state(i) for i in ids] == [None, DeletionState.LOCALLY_ABSENT, DeletionState.LOCALLY_ABSENT]
