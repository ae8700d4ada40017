from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session
from plansync.db import get_db
from plansync.repositories.plan_record_repo import PlanRecordRepository
from plansync.schemas import ExercisePlanPayload

router = APIRouter(prefix="/exercise-plans", tags=["exercise-plans"])

@router.put("", response_model=list[ExercisePlanPayload])
def upsert_plans(payload: list[ExercisePlanPayload], db: Session = Depends(get_db)):
    # Canonical copies, server-stamped updatedAt included
    return PlanRecordRepository(db).upsert_many(payload)

@router.get("", response_model=list[ExercisePlanPayload])
def list_plans(
    workout_id: str = Query(..., alias="workoutId", min_length=1),
    db: Session = Depends(get_db),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    page = PlanRecordRepository(db).list_by_workout(workout_id, limit=limit, offset=offset)
    return page.items

@router.get("/{plan_id}", response_model=ExercisePlanPayload)
def get_plan(plan_id: str, db: Session = Depends(get_db)):
    rec = PlanRecordRepository(db).get(plan_id)
    if not rec:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exercise plan not found")
    return rec

@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_plan(plan_id: str, db: Session = Depends(get_db)):
    if not PlanRecordRepository(db).delete(plan_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exercise plan not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
