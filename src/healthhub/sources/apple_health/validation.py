"""Validate raw Apple Health payloads into typed category entries.

Dates fail loudly: one malformed date rejects the whole payload. Numbers
never fail: anything that cannot be read as a number becomes 0.
"""

import math
import re
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from healthhub.sources.apple_health.errors import InvalidFormatError, TypeMismatchError
from healthhub.sources.apple_health.models import (
    ActivityEntry,
    AppleHealthData,
    BodyMassEntry,
    HeartRateEntry,
    NutritionEntry,
    SleepEntry,
)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)

T = TypeVar("T")


def validate_date(value: Any) -> str:
    """Return value unchanged if it is a YYYY-MM-DD string.

    Only the shape is checked; "2024-02-30" is accepted.

    Raises:
        InvalidFormatError: value is not a string of that exact shape.
    """
    if not isinstance(value, str) or not DATE_PATTERN.fullmatch(value):
        raise InvalidFormatError("date", value, "YYYY-MM-DD")
    return value


def validate_number(value: Any) -> int | float:
    """Best-effort numeric coercion, returning 0 for anything unreadable."""
    if value is None or isinstance(value, bool):
        return 0
    # float() accepts digit-group underscores ("1_000"); JSON numbers never have them
    if isinstance(value, str) and (not value.strip() or "_" in value):
        return 0
    try:
        num = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(num):
        return 0
    return int(num) if num.is_integer() else num


def _entries(payload: Mapping[str, Any], key: str, category: str) -> list[Any] | None:
    raw = payload.get(key)
    if raw is None:
        return None
    if not isinstance(raw, list):
        raise TypeMismatchError(category)
    return raw


def _map_entries(
    payload: Mapping[str, Any],
    key: str,
    category: str,
    build: Callable[[Mapping[str, Any]], T],
) -> list[T] | None:
    raw = _entries(payload, key, category)
    if raw is None:
        return None
    return [build(entry if isinstance(entry, Mapping) else {}) for entry in raw]


def validate_activities(payload: Mapping[str, Any]) -> list[ActivityEntry] | None:
    return _map_entries(
        payload,
        "activities",
        "activities",
        lambda e: ActivityEntry(
            date=validate_date(e.get("date")),
            steps=validate_number(e.get("steps")),
            active_energy_burned=validate_number(e.get("activeEnergyBurned")),
            active_minutes=validate_number(e.get("activeMinutes")),
        ),
    )


def validate_sleep_analysis(payload: Mapping[str, Any]) -> list[SleepEntry] | None:
    return _map_entries(
        payload,
        "sleepAnalysis",
        "sleep",
        lambda e: SleepEntry(
            date=validate_date(e.get("date")),
            total_sleep_duration=validate_number(e.get("totalSleepDuration")),
            deep_sleep_duration=validate_number(e.get("deepSleepDuration")),
            light_sleep_duration=validate_number(e.get("lightSleepDuration")),
        ),
    )


def validate_body_mass(payload: Mapping[str, Any]) -> list[BodyMassEntry] | None:
    return _map_entries(
        payload,
        "bodyMass",
        "body mass",
        lambda e: BodyMassEntry(
            date=validate_date(e.get("date")),
            weight=validate_number(e.get("weight")),
        ),
    )


def validate_heart_rate(payload: Mapping[str, Any]) -> list[HeartRateEntry] | None:
    return _map_entries(
        payload,
        "heartRate",
        "heart rate",
        lambda e: HeartRateEntry(
            date=validate_date(e.get("date")),
            resting_heart_rate=validate_number(e.get("restingHeartRate")),
        ),
    )


def validate_nutrition(payload: Mapping[str, Any]) -> list[NutritionEntry] | None:
    return _map_entries(
        payload,
        "nutrition",
        "nutrition",
        lambda e: NutritionEntry(
            date=validate_date(e.get("date")),
            protein=validate_number(e.get("protein")),
            carbs=validate_number(e.get("carbs")),
            fats=validate_number(e.get("fats")),
        ),
    )


def validate_apple_health_data(payload: Any) -> AppleHealthData:
    """Validate a raw Apple Health export payload.

    The payload keys follow the HealthKit export (camelCase): ``activities``,
    ``sleepAnalysis``, ``bodyMass``, ``heartRate`` and ``nutrition``. Unknown
    keys are ignored.

    Raises:
        TypeMismatchError: payload is not a mapping, or a category is not a list.
        InvalidFormatError: any entry has a malformed date.
    """
    if not isinstance(payload, Mapping):
        raise TypeMismatchError("Apple Health", expected="an object")

    return AppleHealthData(
        activities=validate_activities(payload),
        sleep_analysis=validate_sleep_analysis(payload),
        body_mass=validate_body_mass(payload),
        heart_rate=validate_heart_rate(payload),
        nutrition=validate_nutrition(payload),
    )
