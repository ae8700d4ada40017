from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, Boolean, ForeignKey, String, DateTime, UniqueConstraint
from plansync.db import Base, new_id

class ExercisePlan(Base):
    """One exercise assigned to a workout, positioned by ``order``."""
    __tablename__ = "exercise_plans"
    __table_args__ = (
        UniqueConstraint("workout_id", "order", name="uq_exercise_plans_workout_order"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    workout_id: Mapped[str] = mapped_column(ForeignKey("workouts.id", ondelete="CASCADE"), index=True)
    exercise_id: Mapped[str] = mapped_column(ForeignKey("exercises.id", ondelete="CASCADE"), index=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    # False until the server has confirmed this exact record
    synced: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    workout = relationship("Workout", back_populates="plans")
    exercise = relationship("Exercise", back_populates="plans")
