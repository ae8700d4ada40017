# plansync/repositories/plan_record_repo.py
from __future__ import annotations
from typing import Iterable

from sqlalchemy import select

from plansync.db import utcnow
from plansync.models import PlanRecord
from plansync.repositories.base import BaseRepository, Page
from plansync.schemas import ExercisePlanPayload

class PlanRecordRepository(BaseRepository[PlanRecord]):
    model = PlanRecord

    # READS
    def list_by_workout(self, workout_id: str, *, limit: int = 50, offset: int = 0) -> Page[PlanRecord]:
        stmt = select(PlanRecord).where(PlanRecord.workout_id == workout_id)\
                                 .order_by(PlanRecord.order.asc(), PlanRecord.id.asc())
        return self.page_from_stmt(stmt, limit=limit, offset=offset)

    # WRITES
    def upsert_many(self, plans: Iterable[ExercisePlanPayload]) -> list[PlanRecord]:
        """Create or overwrite each plan; a repeated id in one batch keeps its last values."""
        latest = {p.id: p for p in plans}
        now = utcnow()
        records = []
        for plan_id, p in latest.items():
            rec = self.get(plan_id)
            if rec is None:
                rec = PlanRecord(id=plan_id, created_at=now)
                self.db.add(rec)
            rec.workout_id = p.workout_id
            rec.exercise_id = p.exercise_id
            rec.order = p.order
            rec.updated_at = now
            records.append(rec)
        self.db.commit()
        for rec in records:
            self.db.refresh(rec)
        return records

    def delete(self, plan_id: str) -> bool:
        rec = self.get(plan_id)
        if not rec:
            return False
        self.db.delete(rec)
        self.db.commit()
        return True
