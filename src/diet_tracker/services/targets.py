"""Daily calorie target calculation (Mifflin-St Jeor)."""

import math

from diet_tracker.domain.profiles import Gender, Profile, TargetResult

DEFAULT_AGE = 30
DEFAULT_WEIGHT_KG = 80.0
DEFAULT_HEIGHT_CM = 180.0
DEFAULT_ACTIVITY_FACTOR = 1.2

AGE_RANGE = (1, 120)
WEIGHT_RANGE_KG = (30.0, 300.0)
HEIGHT_RANGE_CM = (100.0, 250.0)

DAILY_DEFICIT_KCAL = 500
MIN_CALORIES_MALE = 1500
MIN_CALORIES_FEMALE = 1200
DAYS_PER_WEEK = 7


def compute_bmr(profile: Profile) -> float:
    """Return the basal metabolic rate for the clamped profile values."""
    age = _clamp(_or_default(profile.age, DEFAULT_AGE), *AGE_RANGE)
    weight = _clamp(_or_default(profile.weight_kg, DEFAULT_WEIGHT_KG), *WEIGHT_RANGE_KG)
    height = _clamp(
        _or_default(profile.height_cm, DEFAULT_HEIGHT_CM), *HEIGHT_RANGE_CM
    )
    bmr = 10 * weight + 6.25 * height - 5 * age
    if profile.gender == Gender.MALE:
        return bmr + 5
    return bmr - 161


def compute_tdee(profile: Profile) -> float:
    """Return total daily energy expenditure."""
    activity_factor = _or_default(profile.activity_factor, DEFAULT_ACTIVITY_FACTOR)
    bmr = compute_bmr(profile)
    tdee = bmr * activity_factor
    if not math.isfinite(tdee):
        # overflowing multipliers are treated as missing
        return bmr * DEFAULT_ACTIVITY_FACTOR
    return tdee


def target_before_floor(profile: Profile) -> int:
    """Return the rounded deficit target without the safety floor."""
    return _round_half_up(compute_tdee(profile) - DAILY_DEFICIT_KCAL)


def compute_daily_target(profile: Profile) -> int:
    """Return the daily calorie budget for a profile.

    Out of range or missing numbers are clamped or defaulted, so every
    profile produces a usable budget. The gender specific minimum is
    applied after the deficit and rounding.
    """
    minimum = (
        MIN_CALORIES_MALE if profile.gender == Gender.MALE else MIN_CALORIES_FEMALE
    )
    return max(target_before_floor(profile), minimum)


def compute_weekly_target(daily_target: int) -> int:
    """Return the weekly budget derived from a daily budget."""
    return daily_target * DAYS_PER_WEEK


def compute_targets(profile: Profile) -> TargetResult:
    """Return daily and weekly targets for a profile."""
    daily = compute_daily_target(profile)
    return TargetResult(daily_target=daily, weekly_target=compute_weekly_target(daily))


def _or_default(value: float | None, default: float) -> float:
    # zero counts as missing
    if value is None or isinstance(value, bool):
        return default
    number = float(value)
    if not math.isfinite(number) or number == 0:
        return default
    return number


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
