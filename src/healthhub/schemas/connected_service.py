from datetime import datetime
from typing import Any

from pydantic import BaseModel


class ConnectedServiceRead(BaseModel):
    id: int
    user_id: str
    service_name: str
    is_connected: bool
    last_synced: datetime | None = None
    auth_data: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ConnectServiceRequest(BaseModel):
    auth_data: dict[str, Any] | None = None


class AppleHealthSyncRequest(BaseModel):
    # Left untyped: the Apple Health validator owns the payload's shape
    data: Any = None


class AppleHealthSyncResponse(BaseModel):
    metrics_added: int
    days_processed: int
    summary: str


class MessageResponse(BaseModel):
    message: str
