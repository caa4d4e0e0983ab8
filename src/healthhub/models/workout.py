from datetime import datetime

from sqlalchemy import Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from healthhub.database import Base


class Workout(Base):
    __tablename__ = "workouts"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"))
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text, default=None)
    date: Mapped[str] = mapped_column(String(10))  # YYYY-MM-DD
    start_time: Mapped[str | None] = mapped_column(String(5), default=None)  # HH:MM
    end_time: Mapped[str | None] = mapped_column(String(5), default=None)
    activity_type: Mapped[str] = mapped_column(String(50))  # run, ride, swim, strength, ...

    # Plan vs. actual
    planned_distance: Mapped[float | None] = mapped_column(Float, default=None)  # km
    actual_distance: Mapped[float | None] = mapped_column(Float, default=None)
    planned_duration: Mapped[int | None] = mapped_column(default=None)  # minutes
    actual_duration: Mapped[int | None] = mapped_column(default=None)
    intensity: Mapped[str | None] = mapped_column(String(20), default=None)  # easy, moderate, hard
    feeling_score: Mapped[int | None] = mapped_column(default=None)  # 1-10
    notes: Mapped[str | None] = mapped_column(Text, default=None)
    is_completed: Mapped[bool] = mapped_column(default=False)

    # Recurrence
    is_recurring: Mapped[bool] = mapped_column(default=False)
    recurring_pattern: Mapped[str | None] = mapped_column(String(20), default=None)  # daily, weekly
    recurring_days: Mapped[str | None] = mapped_column(String(50), default=None)  # e.g. "mon,wed,fri"

    # Load
    tss_score: Mapped[int | None] = mapped_column(default=None)
    calories_burned: Mapped[int | None] = mapped_column(default=None)
    average_heart_rate: Mapped[int | None] = mapped_column(default=None)
    max_heart_rate: Mapped[int | None] = mapped_column(default=None)

    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)


class WorkoutSet(Base):
    __tablename__ = "workout_sets"

    id: Mapped[int] = mapped_column(primary_key=True)
    workout_id: Mapped[int] = mapped_column(ForeignKey("workouts.id"))
    exercise_name: Mapped[str] = mapped_column(String(200))
    set_number: Mapped[int]
    weight: Mapped[float | None] = mapped_column(Float, default=None)
    reps: Mapped[int | None] = mapped_column(default=None)
    duration: Mapped[int | None] = mapped_column(default=None)  # seconds
    rest_time: Mapped[int | None] = mapped_column(default=None)  # seconds
    notes: Mapped[str | None] = mapped_column(Text, default=None)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)
