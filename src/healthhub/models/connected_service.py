from datetime import datetime
from typing import Any

from sqlalchemy import JSON, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from healthhub.database import Base


class ConnectedService(Base):
    __tablename__ = "connected_services"
    __table_args__ = (
        UniqueConstraint("user_id", "service_name", name="uq_connected_services_user_service"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"))
    service_name: Mapped[str] = mapped_column(String(50))  # apple_health, lab_partner, etc.
    is_connected: Mapped[bool] = mapped_column(default=False)
    last_synced: Mapped[datetime | None] = mapped_column(default=None)
    # Opaque per-service blob; the auto-sync job reads "auto_sync" and "last_sync_data"
    auth_data: Mapped[dict[str, Any] | None] = mapped_column(JSON, default=None)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)
