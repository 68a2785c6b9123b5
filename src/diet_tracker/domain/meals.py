"""Domain models for meal entries and their aggregates."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID


class MealKind(str, Enum):
    """Whether an entry was eaten or drunk."""

    FOOD = "food"
    DRINK = "drink"


@dataclass(frozen=True)
class Macros:
    """Macronutrients in grams."""

    protein: int = 0
    carbs: int = 0
    fat: int = 0


@dataclass(frozen=True)
class MealEntry:
    """A recorded meal or drink."""

    id: UUID
    created_at: datetime
    calories: int
    macros: Macros = field(default_factory=Macros)
    kind: MealKind = MealKind.FOOD
    name: str = ""
    user_id: UUID | None = None
    image_reference: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class MacroTotals:
    """Summed calories and macros for a set of entries."""

    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fat: int = 0


@dataclass(frozen=True)
class DayBucket:
    """Total calories for one local calendar day."""

    date_key: str
    total_calories: int


class DayStatus(str, Enum):
    """How a day's intake compares with the daily target."""

    OVER = "over"
    UNDER = "under"
    ON_TARGET = "on_target"


@dataclass(frozen=True)
class DayReport:
    """A day bucket compared with the daily target."""

    date_key: str
    total_calories: int
    difference: int
    status: DayStatus
    is_today: bool


@dataclass(frozen=True)
class Dashboard:
    """Today's intake against the daily and weekly targets."""

    todays_meals: list[MealEntry]
    daily: MacroTotals
    weekly_calories: int
    daily_target: int
    weekly_target: int
    remaining_daily: int
    daily_progress: float
    weekly_progress: float


@dataclass(frozen=True)
class History:
    """Per-day intake with the historical average."""

    days: list[DayReport]
    average_calories: float
    daily_target: int
