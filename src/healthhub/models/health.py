from datetime import datetime

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from healthhub.database import Base


class HealthMetric(Base):
    __tablename__ = "health_metrics"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_health_metrics_user_date"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"))
    # YYYY-MM-DD, kept as text so it round-trips exactly as validated
    date: Mapped[str] = mapped_column(String(10))

    # Activity
    steps: Mapped[int | None] = mapped_column(default=None)
    active_minutes: Mapped[int | None] = mapped_column(default=None)
    calories_burned: Mapped[int | None] = mapped_column(default=None)

    # Heart rate
    resting_heart_rate: Mapped[int | None] = mapped_column(default=None)

    # Sleep (minutes)
    sleep_duration: Mapped[int | None] = mapped_column(default=None)
    deep_sleep_duration: Mapped[int | None] = mapped_column(default=None)
    light_sleep_duration: Mapped[int | None] = mapped_column(default=None)

    # Body mass, decimal string in pounds
    weight: Mapped[str | None] = mapped_column(String(32), default=None)

    # Nutrition (grams)
    protein: Mapped[int | None] = mapped_column(default=None)
    carbs: Mapped[int | None] = mapped_column(default=None)
    fats: Mapped[int | None] = mapped_column(default=None)

    source: Mapped[str] = mapped_column(String(50), default="manual")  # manual, apple_health
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
