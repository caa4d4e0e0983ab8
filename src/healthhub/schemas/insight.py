from datetime import datetime

from pydantic import BaseModel


class InsightRead(BaseModel):
    id: int
    user_id: str
    content: str
    category: str
    severity: str
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}
