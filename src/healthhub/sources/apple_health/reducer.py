"""Fold Apple Health category streams into one record per calendar day.

Each category owns a disjoint set of DailyMetricRecord fields, so the order
in which categories are applied never changes the result. Within a
category, the later entry for a date wins.
"""

from collections.abc import Callable, Sequence
from decimal import Decimal
from typing import Any

from healthhub.sources.apple_health.models import (
    ActivityEntry,
    AppleHealthData,
    BodyMassEntry,
    DailyMetricRecord,
    HeartRateEntry,
    NutritionEntry,
    SleepEntry,
)

APPLE_HEALTH_SOURCE = "apple_health"

# Integer columns are signed 64-bit in the database
INT_MIN = -(2**63)
INT_MAX = 2**63 - 1


def _as_int(value: int | float) -> int:
    """Round to an integer; values a metric column cannot hold become 0."""
    num = int(round(value))
    if not INT_MIN <= num <= INT_MAX:
        return 0
    return num


def _as_decimal_string(value: int | float) -> str:
    """Plain decimal text, never exponent notation: 1e-05 -> "0.00001"."""
    return format(Decimal(str(value)), "f")


def _apply_activity(record: DailyMetricRecord, entry: ActivityEntry) -> None:
    record.steps = _as_int(entry.steps)
    record.active_minutes = _as_int(entry.active_minutes)
    record.calories_burned = _as_int(entry.active_energy_burned)


def _apply_sleep(record: DailyMetricRecord, entry: SleepEntry) -> None:
    record.sleep_duration = _as_int(entry.total_sleep_duration)
    record.deep_sleep_duration = _as_int(entry.deep_sleep_duration)
    record.light_sleep_duration = _as_int(entry.light_sleep_duration)


def _apply_body_mass(record: DailyMetricRecord, entry: BodyMassEntry) -> None:
    record.weight = _as_decimal_string(entry.weight)


def _apply_heart_rate(record: DailyMetricRecord, entry: HeartRateEntry) -> None:
    record.resting_heart_rate = _as_int(entry.resting_heart_rate)


def _apply_nutrition(record: DailyMetricRecord, entry: NutritionEntry) -> None:
    record.protein = _as_int(entry.protein)
    record.carbs = _as_int(entry.carbs)
    record.fats = _as_int(entry.fats)


# category name -> (AppleHealthData attribute, field writer)
CATEGORY_APPLIERS: dict[str, tuple[str, Callable[[DailyMetricRecord, Any], None]]] = {
    "activity": ("activities", _apply_activity),
    "sleep": ("sleep_analysis", _apply_sleep),
    "body_mass": ("body_mass", _apply_body_mass),
    "heart_rate": ("heart_rate", _apply_heart_rate),
    "nutrition": ("nutrition", _apply_nutrition),
}

CATEGORY_ORDER: tuple[str, ...] = tuple(CATEGORY_APPLIERS)


def reduce_daily_metrics(
    user_id: str,
    data: AppleHealthData,
    *,
    source: str = APPLE_HEALTH_SOURCE,
    categories: Sequence[str] = CATEGORY_ORDER,
) -> list[DailyMetricRecord]:
    """Merge validated category streams into per-day records.

    Args:
        user_id: Owner of the records.
        data: Validated payload.
        source: Provenance tag stored on every record.
        categories: Processing order of the categories. Any permutation of
            CATEGORY_ORDER yields the same records.

    Returns:
        One DailyMetricRecord per distinct date. Order is not significant.
    """
    daily: dict[str, DailyMetricRecord] = {}

    for category in categories:
        attr, apply = CATEGORY_APPLIERS[category]
        for entry in getattr(data, attr) or []:
            record = daily.get(entry.date)
            if record is None:
                record = DailyMetricRecord(user_id=user_id, date=entry.date, source=source)
                daily[entry.date] = record
            apply(record, entry)

    return list(daily.values())
