"""
Point the server database and the local store at in-memory SQLite before any
plansync module reads its settings, and provide the shared fixtures.
"""
import os

os.environ["DB_URL"] = "sqlite://"
os.environ["STORE_URL"] = "sqlite://"
os.environ.pop("API_TOKEN", None)

import pytest

from plansync.db import Base, engine
from plansync.models import Exercise, ExercisePlan, ExerciseType, Workout
from plansync.observability import ObservabilitySink, Severity
from plansync.store import RecordStore

# Server-side tables live in the module-level engine shared by all API tests
Base.metadata.create_all(engine)


class RecordingSink(ObservabilitySink):
    def __init__(self):
        super().__init__()
        self.warnings: list[str] = []
        self.errors: list[tuple[BaseException, Severity]] = []

    def log_warning(self, message):
        self.warnings.append(message)
        super().log_warning(message)

    def log_error(self, error, severity=Severity.error):
        self.errors.append((error, severity))
        super().log_error(error, severity)


class FakeRemote:
    """Stands in for RemoteClient; echoes upserts back as canonical records by default."""

    CANONICAL_STAMP = "2026-01-02T03:04:05+00:00"

    def __init__(self):
        self.upserts = []
        self.deletes = []
        self.error = None
        self.respond = None
        self.gate = None

    async def upsert(self, records, collection_url):
        self.upserts.append(([r.id for r in records], collection_url))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        if self.respond is not None:
            return self.respond(records)
        return [dict(r.to_json(), updatedAt=self.CANONICAL_STAMP) for r in records]

    async def delete(self, object_id, collection_url):
        self.deletes.append((object_id, collection_url))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error


@pytest.fixture
def store():
    s = RecordStore.open("sqlite://")
    yield s
    s.close()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def remote():
    return FakeRemote()


@pytest.fixture
def workout(store):
    with store.write() as db:
        w = Workout(name="Leg Day")
        db.add(w)
    return w


@pytest.fixture
def make_exercises(store):
    def make(*names, type=ExerciseType.strength):
        with store.write() as db:
            items = [Exercise(name=n, type=type) for n in names]
            db.add_all(items)
        return items
    return make


@pytest.fixture
def add_plans(store, make_exercises):
    """Seed plans with explicit orders, bypassing the ordering engine."""
    def add(workout, orders, *, synced=False):
        exercises = make_exercises(*[f"Seed {o}" for o in orders])
        with store.write() as db:
            plans = [
                ExercisePlan(workout_id=workout.id, exercise_id=e.id, order=o, synced=synced)
                for e, o in zip(exercises, orders)
            ]
            db.add_all(plans)
        return plans
    return add

