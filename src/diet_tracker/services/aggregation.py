"""Meal aggregation over in-memory entry lists.

"Today" is a local calendar day in the timezone of the reference instant,
while the weekly figure uses a rolling window ending at that instant. The
two definitions differ and are kept separate.

Naive timestamps are read as UTC.
"""

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta, tzinfo

from diet_tracker.domain.meals import (
    DayBucket,
    DayReport,
    DayStatus,
    MacroTotals,
    MealEntry,
)

WEEK_DAYS = 7
UNDER_TARGET_MARGIN_KCAL = 100


def is_same_local_day(timestamp: datetime, reference_now: datetime) -> bool:
    """Return True when both instants fall on the same local calendar date."""
    tz = reference_now.tzinfo or UTC
    return _to_zone(timestamp, tz).date() == _to_zone(reference_now, tz).date()


def is_within_trailing_window(
    timestamp: datetime, reference_now: datetime, days: int = WEEK_DAYS
) -> bool:
    """Return True when the timestamp is at most ``days`` x 24h old."""
    start = _to_zone(reference_now, UTC) - timedelta(days=days)
    return _to_zone(timestamp, UTC) >= start


def entries_for_day(
    entries: Iterable[MealEntry], reference_now: datetime
) -> list[MealEntry]:
    """Return entries logged on the reference instant's local day."""
    return [
        entry
        for entry in entries
        if is_same_local_day(entry.created_at, reference_now)
    ]


def entries_within_window(
    entries: Iterable[MealEntry], reference_now: datetime, days: int = WEEK_DAYS
) -> list[MealEntry]:
    """Return entries inside the trailing window."""
    return [
        entry
        for entry in entries
        if is_within_trailing_window(entry.created_at, reference_now, days)
    ]


def daily_totals(entries: Iterable[MealEntry], reference_now: datetime) -> MacroTotals:
    """Sum calories and macros for today's entries."""
    total = MacroTotals()
    for entry in entries_for_day(entries, reference_now):
        total = MacroTotals(
            calories=total.calories + entry.calories,
            protein=total.protein + entry.macros.protein,
            carbs=total.carbs + entry.macros.carbs,
            fat=total.fat + entry.macros.fat,
        )
    return total


def weekly_totals(entries: Iterable[MealEntry], reference_now: datetime) -> int:
    """Sum calories over the trailing seven days."""
    return sum(
        entry.calories for entry in entries_within_window(entries, reference_now)
    )


def date_key(timestamp: datetime, tz: tzinfo = UTC) -> str:
    """Return the ``YYYY-MM-DD`` key of the local date of a timestamp."""
    return _to_zone(timestamp, tz).date().isoformat()


def group_by_calendar_day(
    entries: Iterable[MealEntry], tz: tzinfo = UTC
) -> list[DayBucket]:
    """Bucket entries by local date, most recent day first.

    Only dates that have entries get a bucket.
    """
    totals: dict[str, int] = {}
    for entry in entries:
        key = date_key(entry.created_at, tz)
        totals[key] = totals.get(key, 0) + entry.calories
    return [
        DayBucket(date_key=key, total_calories=totals[key])
        for key in sorted(totals, reverse=True)
    ]


def average_excluding_today(day_buckets: Iterable[DayBucket], today: str) -> float:
    """Return the mean daily calories of all buckets except today's."""
    past = [bucket.total_calories for bucket in day_buckets if bucket.date_key != today]
    if not past:
        return 0.0
    return sum(past) / len(past)


def remaining_calories(target: int, consumed: int) -> int:
    """Return calories left for the target, negative when exceeded."""
    return target - consumed


def progress_percentage(current: float, target: float) -> float:
    """Return progress towards a target as a 0-100 percentage."""
    if target <= 0:
        return 0.0
    return min(100.0, max(0.0, current * 100 / target))


def classify_day(
    bucket: DayBucket, daily_target: int, today: str | None = None
) -> DayReport:
    """Compare a day's total with the daily target."""
    difference = bucket.total_calories - daily_target
    if difference > 0:
        status = DayStatus.OVER
    elif difference < -UNDER_TARGET_MARGIN_KCAL:
        status = DayStatus.UNDER
    else:
        status = DayStatus.ON_TARGET
    return DayReport(
        date_key=bucket.date_key,
        total_calories=bucket.total_calories,
        difference=difference,
        status=status,
        is_today=bucket.date_key == today,
    )


def _to_zone(timestamp: datetime, tz: tzinfo) -> datetime:
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    return timestamp.astimezone(tz)
