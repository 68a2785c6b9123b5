"""Pydantic models for API payloads."""

from pydantic import BaseModel, Field

from diet_tracker.domain.meals import MealKind
from diet_tracker.domain.profiles import Gender, Profile


class ProfilePayload(BaseModel):
    """Questionnaire answers sent during onboarding or from settings."""

    gender: Gender
    age: int | None = None
    weight: float | None = None
    height: float | None = None
    activity_level: float | None = None
    goal_weight: float | None = None

    def to_profile(self) -> Profile:
        """Return the domain profile."""
        return Profile(
            gender=self.gender,
            age=self.age,
            weight_kg=self.weight,
            height_cm=self.height,
            activity_factor=self.activity_level,
            goal_weight_kg=self.goal_weight,
        )


class MacroPayload(BaseModel):
    """Macronutrients in grams."""

    protein: int = Field(default=0, ge=0)
    carbs: int = Field(default=0, ge=0)
    fat: int = Field(default=0, ge=0)


class MealPayload(BaseModel):
    """A confirmed estimate to store as a meal."""

    name: str = Field(min_length=1)
    calories: int = Field(ge=0)
    macros: MacroPayload = Field(default_factory=MacroPayload)
    type: MealKind = MealKind.FOOD
    reasoning: str = ""
    image_url: str | None = None
    notes: str | None = None


class TextAnalysisPayload(BaseModel):
    """Free-text meal description for quick add."""

    description: str = Field(min_length=1)
