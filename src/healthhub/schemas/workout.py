from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from healthhub.schemas.health import DATE_PATTERN, TIME_PATTERN, MetricInt


class WorkoutBase(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    date: str = Field(pattern=DATE_PATTERN)
    start_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    end_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    activity_type: str = Field(min_length=1, max_length=50)

    planned_distance: float | None = Field(default=None, ge=0)
    actual_distance: float | None = Field(default=None, ge=0)
    planned_duration: MetricInt | None = None
    actual_duration: MetricInt | None = None
    intensity: str | None = Field(default=None, max_length=20)
    feeling_score: int | None = Field(default=None, ge=1, le=10)
    notes: str | None = None
    is_completed: bool = False

    is_recurring: bool = False
    recurring_pattern: str | None = Field(default=None, max_length=20)
    recurring_days: str | None = Field(default=None, max_length=50)

    tss_score: MetricInt | None = None
    calories_burned: MetricInt | None = None
    average_heart_rate: MetricInt | None = None
    max_heart_rate: MetricInt | None = None


class WorkoutCreate(WorkoutBase):
    pass


class WorkoutUpdate(BaseModel):
    """Partial update; only the fields sent are changed."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    date: str | None = Field(default=None, pattern=DATE_PATTERN)
    start_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    end_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    activity_type: str | None = Field(default=None, min_length=1, max_length=50)

    planned_distance: float | None = Field(default=None, ge=0)
    actual_distance: float | None = Field(default=None, ge=0)
    planned_duration: MetricInt | None = None
    actual_duration: MetricInt | None = None
    intensity: str | None = Field(default=None, max_length=20)
    feeling_score: int | None = Field(default=None, ge=1, le=10)
    notes: str | None = None
    is_completed: bool | None = None

    is_recurring: bool | None = None
    recurring_pattern: str | None = Field(default=None, max_length=20)
    recurring_days: str | None = Field(default=None, max_length=50)

    tss_score: MetricInt | None = None
    calories_burned: MetricInt | None = None
    average_heart_rate: MetricInt | None = None
    max_heart_rate: MetricInt | None = None

    @field_validator("title", "date", "activity_type", "is_completed", "is_recurring")
    @classmethod
    def _required_columns_not_null(cls, value: object) -> object:
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class WorkoutRead(WorkoutBase):
    id: int
    user_id: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class WorkoutSetBase(BaseModel):
    exercise_name: str = Field(min_length=1, max_length=200)
    set_number: int = Field(ge=1)
    weight: float | None = Field(default=None, ge=0)
    reps: MetricInt | None = None
    duration: MetricInt | None = None  # seconds
    rest_time: MetricInt | None = None
    notes: str | None = None


class WorkoutSetCreate(WorkoutSetBase):
    pass


class WorkoutSetUpdate(BaseModel):
    exercise_name: str | None = Field(default=None, min_length=1, max_length=200)
    set_number: int | None = Field(default=None, ge=1)
    weight: float | None = Field(default=None, ge=0)
    reps: MetricInt | None = None
    duration: MetricInt | None = None
    rest_time: MetricInt | None = None
    notes: str | None = None

    @field_validator("exercise_name", "set_number")
    @classmethod
    def _required_columns_not_null(cls, value: object) -> object:
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class WorkoutSetRead(WorkoutSetBase):
    id: int
    workout_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
