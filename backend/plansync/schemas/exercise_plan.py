from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from plansync.models import ExercisePlan

RecordId = Annotated[str, Field(min_length=1, max_length=64)]
Order = Annotated[int, Field(ge=0)]

class ExercisePlanPayload(BaseModel):
    """Wire form of an exercise plan, as understood by the exercise-plans API."""
    id: RecordId
    workout_id: RecordId = Field(alias="workoutId")
    exercise_id: RecordId = Field(alias="exerciseId")
    order: Order
    # Stamped by the server; ignored on the way in
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    model_config = {"from_attributes": True, "populate_by_name": True}

    @field_validator("id", "workout_id", "exercise_id")
    @classmethod
    def id_non_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("id cannot be blank")
        return v2

    def to_record(self, *, synced: bool) -> ExercisePlan:
        """Unattached ExercisePlan carrying these values, ready for a merge."""
        return ExercisePlan(
            id=self.id,
            workout_id=self.workout_id,
            exercise_id=self.exercise_id,
            order=self.order,
            updated_at=self.updated_at,
            synced=synced,
        )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
