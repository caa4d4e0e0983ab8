from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from healthhub.schemas.health import DATE_PATTERN, TIME_PATTERN


class HealthEventBase(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    date: str = Field(pattern=DATE_PATTERN)
    time: str | None = Field(default=None, pattern=TIME_PATTERN)
    location: str | None = Field(default=None, max_length=200)


class HealthEventCreate(HealthEventBase):
    pass


class HealthEventUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    date: str | None = Field(default=None, pattern=DATE_PATTERN)
    time: str | None = Field(default=None, pattern=TIME_PATTERN)
    location: str | None = Field(default=None, max_length=200)

    @field_validator("title", "date")
    @classmethod
    def _required_columns_not_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class HealthEventRead(HealthEventBase):
    id: int
    user_id: str
    created_at: datetime

    model_config = {"from_attributes": True}
