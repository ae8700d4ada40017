from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, DateTime
from plansync.db import Base, new_id, utcnow

class Workout(Base):
    __tablename__ = "workouts"
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    plans = relationship("ExercisePlan", back_populates="workout", order_by="ExercisePlan.order")
    sessions = relationship("WorkoutSession", back_populates="workout", cascade="all, delete-orphan")

    @property
    def session_count(self) -> int:
        return len(self.sessions)
