from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Enum as SAEnum
from plansync.db import Base, new_id

class ExerciseType(str, Enum):
    strength = "strength"
    cardio = "cardio"
    mobility = "mobility"
    bodyweight = "bodyweight"

    @property
    def display(self) -> str:
        return self.value.title()

class Exercise(Base):
    __tablename__ = "exercises"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    type: Mapped[ExerciseType] = mapped_column(
        SAEnum(ExerciseType, name="exercise_type"),
        nullable=False,
        default=ExerciseType.strength,
    )

    plans = relationship("ExercisePlan", back_populates="exercise")

    @property
    def display_type(self) -> str:
        return self.type.display
