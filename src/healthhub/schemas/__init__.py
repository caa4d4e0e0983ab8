from healthhub.schemas.connected_service import (
    AppleHealthSyncRequest,
    AppleHealthSyncResponse,
    ConnectedServiceRead,
    ConnectServiceRequest,
    MessageResponse,
)
from healthhub.schemas.health import (
    HealthMetricBase,
    HealthMetricBatchRequest,
    HealthMetricCreate,
    HealthMetricRead,
)
from healthhub.schemas.health_event import HealthEventCreate, HealthEventRead, HealthEventUpdate
from healthhub.schemas.insight import InsightRead
from healthhub.schemas.workout import (
    WorkoutCreate,
    WorkoutRead,
    WorkoutSetCreate,
    WorkoutSetRead,
    WorkoutSetUpdate,
    WorkoutUpdate,
)

__all__ = [
    "AppleHealthSyncRequest",
    "AppleHealthSyncResponse",
    "ConnectServiceRequest",
    "ConnectedServiceRead",
    "HealthEventCreate",
    "HealthEventRead",
    "HealthEventUpdate",
    "HealthMetricBase",
    "HealthMetricBatchRequest",
    "HealthMetricCreate",
    "HealthMetricRead",
    "InsightRead",
    "MessageResponse",
    "WorkoutCreate",
    "WorkoutRead",
    "WorkoutSetCreate",
    "WorkoutSetRead",
    "WorkoutSetUpdate",
    "WorkoutUpdate",
]
