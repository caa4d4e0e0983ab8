from datetime import datetime

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from healthhub.database import Base


class HealthEvent(Base):
    """A dated entry on the user's health calendar (appointment, lab draw, etc.)."""

    __tablename__ = "health_events"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"))
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text, default=None)
    date: Mapped[str] = mapped_column(String(10))  # YYYY-MM-DD
    time: Mapped[str | None] = mapped_column(String(5), default=None)  # HH:MM
    location: Mapped[str | None] = mapped_column(String(200), default=None)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
