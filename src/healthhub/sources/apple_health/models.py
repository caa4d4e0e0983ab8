"""Typed shapes for validated Apple Health payloads and reduced daily records."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ActivityEntry:
    date: str
    steps: int | float = 0
    active_energy_burned: int | float = 0
    active_minutes: int | float = 0


@dataclass(frozen=True)
class SleepEntry:
    date: str
    total_sleep_duration: int | float = 0
    deep_sleep_duration: int | float = 0
    light_sleep_duration: int | float = 0


@dataclass(frozen=True)
class BodyMassEntry:
    date: str
    weight: int | float = 0  # pounds


@dataclass(frozen=True)
class HeartRateEntry:
    date: str
    resting_heart_rate: int | float = 0


@dataclass(frozen=True)
class NutritionEntry:
    date: str
    protein: int | float = 0  # grams
    carbs: int | float = 0
    fats: int | float = 0


@dataclass
class AppleHealthData:
    """A validated Apple Health payload.

    A category is None when the raw payload did not carry it at all, and an
    empty list when it was present but empty.
    """

    activities: list[ActivityEntry] | None = None
    sleep_analysis: list[SleepEntry] | None = None
    body_mass: list[BodyMassEntry] | None = None
    heart_rate: list[HeartRateEntry] | None = None
    nutrition: list[NutritionEntry] | None = None


@dataclass
class DailyMetricRecord:
    """One merged day of metrics for a user, ready for batch upsert."""

    user_id: str
    date: str
    source: str = "apple_health"
    steps: int | None = None
    active_minutes: int | None = None
    calories_burned: int | None = None
    resting_heart_rate: int | None = None
    sleep_duration: int | None = None
    deep_sleep_duration: int | None = None
    light_sleep_duration: int | None = None
    weight: str | None = None
    protein: int | None = None
    carbs: int | None = None
    fats: int | None = None
