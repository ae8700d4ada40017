"""Reference exercise-plans service the sync engine pushes to."""
import logging

from fastapi import FastAPI
from sqlalchemy import func, select

from plansync.db import SessionLocal
from plansync.models import PlanRecord
from plansync.observability import configure_logging
from plansync.routers.exercise_plans import router as exercise_plans_router
from plansync.settings import get_settings

settings = get_settings()
configure_logging(settings.LOG_LEVEL)
log = logging.getLogger("plansync")

app = FastAPI(
    title="PlanSync API",
    openapi_tags=[
        {"name": "exercise-plans", "description": "Canonical exercise plans per workout"},
    ],
)
app.include_router(exercise_plans_router)


@app.get("/healthz")
def healthz():
    """Reports whether the plan table is reachable and how many plans it holds."""
    try:
        with SessionLocal() as db:
            stored = db.scalar(select(func.count()).select_from(PlanRecord))
    except Exception as e:
        log.warning("Health check could not reach the plan store: %s", e)
        return {"status": "degraded", "env": settings.ENV, "error": str(e)}
    return {"status": "ok", "env": settings.ENV, "planRecords": stored}
