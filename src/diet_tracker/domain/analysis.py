"""Models for meal estimation results."""

from pydantic import BaseModel, Field

from diet_tracker.domain.meals import MealKind


class MacroEstimate(BaseModel):
    """Estimated macronutrients in grams."""

    protein: int = Field(default=0, ge=0)
    carbs: int = Field(default=0, ge=0)
    fat: int = Field(default=0, ge=0)


class AnalysisResult(BaseModel):
    """Normalized calorie estimate for a photo or description."""

    name: str
    calories: int = Field(ge=0)
    macros: MacroEstimate = Field(default_factory=MacroEstimate)
    kind: MealKind = MealKind.FOOD
    reasoning: str = ""
