"""Meal logging service and progress views."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from diet_tracker.domain.analysis import AnalysisResult
from diet_tracker.domain.meals import Dashboard, History, MealEntry
from diet_tracker.services.aggregation import (
    average_excluding_today,
    classify_day,
    daily_totals,
    date_key,
    entries_for_day,
    group_by_calendar_day,
    progress_percentage,
    remaining_calories,
    weekly_totals,
)

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_DAYS = 30


class MealRepository(Protocol):
    """Persistence interface for meal entries."""

    def list_meals(self, user_id: UUID, since: datetime) -> list[MealEntry]:
        """Return meals created at or after ``since``, newest first."""

    def create_meal(
        self,
        *,
        user_id: UUID,
        analysis: AnalysisResult,
        image_reference: str | None,
        notes: str | None,
    ) -> MealEntry:
        """Insert a meal and return the stored entry."""

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a user's meal and return True when a row was removed."""


@dataclass
class MealService:
    """Service that stores meals and summarizes intake."""

    repository: MealRepository
    history_days: int = DEFAULT_HISTORY_DAYS

    def list_recent(
        self, user_id: UUID, now: datetime | None = None
    ) -> list[MealEntry]:
        """Return meals from the configured history window."""
        reference = now or datetime.now(tz=UTC)
        since = reference - timedelta(days=self.history_days)
        return self.repository.list_meals(user_id, since)

    def add_meal(
        self,
        user_id: UUID,
        analysis: AnalysisResult,
        image_reference: str | None = None,
        notes: str | None = None,
    ) -> MealEntry:
        """Persist an analyzed meal."""
        entry = self.repository.create_meal(
            user_id=user_id,
            analysis=analysis,
            image_reference=image_reference,
            notes=notes or None,
        )
        logger.info(
            "Logged %s '%s' (%s kcal) for user %s",
            entry.kind.value,
            entry.name,
            entry.calories,
            user_id,
        )
        return entry

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal owned by the user."""
        deleted = self.repository.delete_meal(user_id, meal_id)
        if not deleted:
            logger.warning("Meal %s not found for user %s", meal_id, user_id)
        return deleted

    def dashboard(
        self,
        user_id: UUID,
        daily_target: int,
        weekly_target: int,
        now: datetime | None = None,
    ) -> Dashboard:
        """Return today's intake against the user's targets."""
        reference = now or datetime.now(tz=UTC)
        meals = self.list_recent(user_id, reference)
        return build_dashboard(meals, daily_target, weekly_target, reference)

    def history(
        self, user_id: UUID, daily_target: int, now: datetime | None = None
    ) -> History:
        """Return per-day intake for the history window."""
        reference = now or datetime.now(tz=UTC)
        meals = self.list_recent(user_id, reference)
        return build_history(meals, daily_target, reference)


def build_dashboard(
    meals: list[MealEntry],
    daily_target: int,
    weekly_target: int,
    now: datetime,
) -> Dashboard:
    """Summarize meals for the dashboard."""
    daily = daily_totals(meals, now)
    weekly = weekly_totals(meals, now)
    return Dashboard(
        todays_meals=entries_for_day(meals, now),
        daily=daily,
        weekly_calories=weekly,
        daily_target=daily_target,
        weekly_target=weekly_target,
        remaining_daily=remaining_calories(daily_target, daily.calories),
        daily_progress=progress_percentage(daily.calories, daily_target),
        weekly_progress=progress_percentage(weekly, weekly_target),
    )


def build_history(meals: list[MealEntry], daily_target: int, now: datetime) -> History:
    """Group meals by day and compare each day with the target."""
    tz = now.tzinfo or UTC
    today = date_key(now, tz)
    buckets = group_by_calendar_day(meals, tz)
    return History(
        days=[classify_day(bucket, daily_target, today) for bucket in buckets],
        average_calories=average_excluding_today(buckets, today),
        daily_target=daily_target,
    )
