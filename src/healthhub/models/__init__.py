from healthhub.models.connected_service import ConnectedService
from healthhub.models.health import HealthMetric
from healthhub.models.health_event import HealthEvent
from healthhub.models.insight import Insight
from healthhub.models.user import User
from healthhub.models.workout import Workout, WorkoutSet

__all__ = [
    "ConnectedService",
    "HealthEvent",
    "HealthMetric",
    "Insight",
    "User",
    "Workout",
    "WorkoutSet",
]
