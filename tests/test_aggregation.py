"""Tests for meal aggregation."""

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from diet_tracker.domain.meals import DayBucket, DayStatus, MacroTotals
from diet_tracker.services.aggregation import (
    average_excluding_today,
    classify_day,
    daily_totals,
    date_key,
    entries_for_day,
    group_by_calendar_day,
    is_same_local_day,
    is_within_trailing_window,
    progress_percentage,
    remaining_calories,
    weekly_totals,
)
from tests.conftest import make_meal

NOW = datetime(2026, 10, 19, 14, 30, tzinfo=UTC)
BERLIN = ZoneInfo("Europe/Berlin")


def test_same_local_day_is_reflexive_and_ignores_time_of_day() -> None:
    start_of_day = NOW.replace(hour=0, minute=0, second=0)
    end_of_day = NOW.replace(hour=23, minute=59, second=59)

    assert is_same_local_day(NOW, NOW)
    assert is_same_local_day(start_of_day, NOW)
    assert is_same_local_day(end_of_day, NOW)
    assert not is_same_local_day(start_of_day - timedelta(seconds=1), NOW)


def test_same_local_day_uses_reference_timezone() -> None:
    now = datetime(2026, 10, 19, 0, 30, tzinfo=BERLIN)

    assert is_same_local_day(datetime(2026, 10, 18, 23, 0, tzinfo=UTC), now)
    assert not is_same_local_day(datetime(2026, 10, 18, 21, 0, tzinfo=UTC), now)


def test_same_local_day_is_not_a_rolling_window() -> None:
    yesterday_evening = NOW.replace(hour=0) - timedelta(hours=1)

    assert NOW - yesterday_evening < timedelta(hours=24)
    assert not is_same_local_day(yesterday_evening, NOW)


def test_trailing_window_boundary_is_inclusive() -> None:
    boundary = NOW - timedelta(days=7)

    assert is_within_trailing_window(boundary, NOW)
    assert not is_within_trailing_window(boundary - timedelta(milliseconds=1), NOW)
    assert is_within_trailing_window(NOW - timedelta(days=2), NOW, days=3)


def test_naive_timestamps_are_read_as_utc() -> None:
    naive = datetime(2026, 10, 19, 1, 0)

    assert is_same_local_day(naive, NOW)
    assert date_key(naive) == "2026-10-19"


def test_daily_totals_of_nothing_are_zero() -> None:
    assert daily_totals([], NOW) == MacroTotals(calories=0, protein=0, carbs=0, fat=0)


def test_today_and_week_totals() -> None:
    meals = [
        make_meal(NOW - timedelta(hours=1), 0, name="Cola Zero"),
        make_meal(NOW - timedelta(hours=3), 250, protein=10, carbs=30, fat=8),
        make_meal(NOW - timedelta(hours=5), 400, protein=25, carbs=40, fat=12),
        make_meal(NOW - timedelta(days=10), 500, protein=20, carbs=50, fat=20),
    ]

    totals = daily_totals(meals, NOW)

    assert len(entries_for_day(meals, NOW)) == 3
    assert totals == MacroTotals(calories=650, protein=35, carbs=70, fat=20)
    assert weekly_totals(meals, NOW) == 650


def test_weekly_totals_include_earlier_days_in_window() -> None:
    meals = [
        make_meal(NOW, 300),
        make_meal(NOW - timedelta(days=3), 1200),
        make_meal(NOW - timedelta(days=6, hours=23), 800),
        make_meal(NOW - timedelta(days=7, minutes=1), 900),
    ]

    assert weekly_totals(meals, NOW) == 2300
    assert daily_totals(meals, NOW).calories == 300


def test_group_by_calendar_day_sorts_descending_without_gaps() -> None:
    meals = [
        make_meal(datetime(2026, 10, 15, 8, 0, tzinfo=UTC), 300),
        make_meal(datetime(2026, 10, 19, 9, 0, tzinfo=UTC), 450),
        make_meal(datetime(2026, 10, 15, 19, 0, tzinfo=UTC), 700),
        make_meal(datetime(2026, 10, 12, 12, 0, tzinfo=UTC), 1800),
        make_meal(datetime(2026, 10, 19, 13, 0, tzinfo=UTC), 0),
    ]

    buckets = group_by_calendar_day(meals)

    assert buckets == [
        DayBucket(date_key="2026-10-19", total_calories=450),
        DayBucket(date_key="2026-10-15", total_calories=1000),
        DayBucket(date_key="2026-10-12", total_calories=1800),
    ]
    keys = [bucket.date_key for bucket in buckets]
    assert len(keys) == len(set(keys))


def test_group_by_calendar_day_uses_local_dates() -> None:
    meals = [make_meal(datetime(2026, 10, 18, 23, 30, tzinfo=UTC), 200)]

    assert group_by_calendar_day(meals, BERLIN)[0].date_key == "2026-10-19"
    assert group_by_calendar_day(meals)[0].date_key == "2026-10-18"


def test_group_by_calendar_day_empty() -> None:
    assert group_by_calendar_day([]) == []


def test_average_excludes_today() -> None:
    buckets = [
        DayBucket(date_key="2026-10-19", total_calories=650),
        DayBucket(date_key="2026-10-18", total_calories=2000),
        DayBucket(date_key="2026-10-17", total_calories=1000),
    ]

    assert average_excluding_today(buckets, "2026-10-19") == 1500
    assert average_excluding_today(buckets[:1], "2026-10-19") == 0
    assert average_excluding_today([], "2026-10-19") == 0


def test_remaining_and_progress() -> None:
    assert remaining_calories(2000, 650) == 1350
    assert remaining_calories(2000, 2300) == -300
    assert progress_percentage(500, 2000) == 25
    assert progress_percentage(3000, 2000) == 100
    assert progress_percentage(500, 0) == 0


@pytest.mark.parametrize(
    ("calories", "status", "difference"),
    [
        (2100, DayStatus.OVER, 100),
        (1850, DayStatus.UNDER, -150),
        (1950, DayStatus.ON_TARGET, -50),
        (1900, DayStatus.ON_TARGET, -100),
        (2000, DayStatus.ON_TARGET, 0),
    ],
)
def test_classify_day(calories: int, status: DayStatus, difference: int) -> None:
    report = classify_day(
        DayBucket(date_key="2026-10-18", total_calories=calories),
        daily_target=2000,
        today="2026-10-19",
    )

    assert report.status == status
    assert report.difference == difference
    assert not report.is_today


def test_aggregation_does_not_mutate_input() -> None:
    meals = [make_meal(NOW, 100), make_meal(NOW - timedelta(days=1), 200)]
    snapshot = list(meals)

    daily_totals(meals, NOW)
    weekly_totals(meals, NOW)
    group_by_calendar_day(meals)

    assert meals == snapshot
