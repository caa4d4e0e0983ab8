from healthhub.sources.apple_health.errors import (
    InvalidFormatError,
    PersistenceError,
    TypeMismatchError,
)
from healthhub.sources.apple_health.models import AppleHealthData, DailyMetricRecord
from healthhub.sources.apple_health.pipeline import SyncResult, process_apple_health_data
from healthhub.sources.apple_health.reducer import CATEGORY_ORDER, reduce_daily_metrics
from healthhub.sources.apple_health.validation import (
    validate_apple_health_data,
    validate_date,
    validate_number,
)

__all__ = [
    "CATEGORY_ORDER",
    "AppleHealthData",
    "DailyMetricRecord",
    "InvalidFormatError",
    "PersistenceError",
    "SyncResult",
    "TypeMismatchError",
    "process_apple_health_data",
    "reduce_daily_metrics",
    "validate_apple_health_data",
    "validate_date",
    "validate_number",
]
