"""Domain models for user profiles and calorie targets."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class Gender(str, Enum):
    """Biological sex used by the BMR formula."""

    MALE = "male"
    FEMALE = "female"


@dataclass(frozen=True)
class ActivityLevel:
    """Activity multiplier with a display label."""

    value: float
    label: str


ACTIVITY_LEVELS: tuple[ActivityLevel, ...] = (
    ActivityLevel(1.2, "Sedentary (desk job, no exercise)"),
    ActivityLevel(1.375, "Lightly active (exercise 1-3x per week)"),
    ActivityLevel(1.55, "Moderately active (exercise 3-5x per week)"),
    ActivityLevel(1.725, "Very active (exercise 6-7x per week)"),
    ActivityLevel(1.9, "Extremely active (physical job plus training)"),
)


@dataclass(frozen=True)
class Profile:
    """Biometric questionnaire answers.

    Numeric fields may be missing; the target calculator substitutes
    defaults for them. ``goal_weight_kg`` is stored only.
    """

    gender: Gender
    age: int | None
    weight_kg: float | None
    height_cm: float | None
    activity_factor: float | None
    goal_weight_kg: float | None = None


DEFAULT_PROFILE = Profile(
    gender=Gender.MALE,
    age=30,
    weight_kg=80,
    height_cm=180,
    activity_factor=1.2,
    goal_weight_kg=75,
)


@dataclass(frozen=True)
class TargetResult:
    """Daily and weekly calorie budgets derived from a profile."""

    daily_target: int
    weekly_target: int


@dataclass(frozen=True)
class StoredProfile:
    """Profile row with its persisted targets."""

    id: UUID
    user_id: UUID
    profile: Profile
    daily_target: int
    weekly_target: int
    created_at: datetime | None
    updated_at: datetime | None
