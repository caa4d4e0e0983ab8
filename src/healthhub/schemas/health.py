from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, Field

# ASCII digits only; pydantic's regex engine treats \d as any Unicode digit
DATE_PATTERN = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$"
TIME_PATTERN = r"^[0-9]{2}:[0-9]{2}$"

# Fits a signed 64-bit integer column
MetricInt = Annotated[int, Field(ge=0, le=2**63 - 1)]


class HealthMetricBase(BaseModel):
    date: str

    # Activity
    steps: int | None = None
    active_minutes: int | None = None
    calories_burned: int | None = None

    # Heart rate
    resting_heart_rate: int | None = None

    # Sleep
    sleep_duration: int | None = None
    deep_sleep_duration: int | None = None
    light_sleep_duration: int | None = None

    weight: str | None = None

    # Nutrition
    protein: int | None = None
    carbs: int | None = None
    fats: int | None = None

    source: str = "manual"


class HealthMetricCreate(HealthMetricBase):
    """A manually entered day; replaces whatever is stored for that date."""

    date: str = Field(pattern=DATE_PATTERN)

    steps: MetricInt | None = None
    active_minutes: MetricInt | None = None
    calories_burned: MetricInt | None = None
    resting_heart_rate: MetricInt | None = None
    sleep_duration: MetricInt | None = None
    deep_sleep_duration: MetricInt | None = None
    light_sleep_duration: MetricInt | None = None
    weight: str | None = Field(default=None, pattern=r"^[0-9]+(\.[0-9]+)?$", max_length=32)
    protein: MetricInt | None = None
    carbs: MetricInt | None = None
    fats: MetricInt | None = None

    source: str = Field(default="manual", max_length=50)


class HealthMetricBatchRequest(BaseModel):
    # Checked in the route so a non-array gets a 400 rather than a 422
    metrics: Any = None


class HealthMetricRead(HealthMetricBase):
    id: int
    user_id: str
    created_at: datetime

    model_config = {"from_attributes": True}
