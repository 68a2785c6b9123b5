"""Calorie estimation for meal photos and descriptions using LLMs."""

import base64
import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from diet_tracker.domain.analysis import AnalysisResult, MacroEstimate
from diet_tracker.domain.meals import MealKind

logger = logging.getLogger(__name__)

ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "calories": {"type": "number", "minimum": 0},
        "macros": {
            "type": "object",
            "properties": {
                "protein": {"type": "number", "minimum": 0},
                "carbs": {"type": "number", "minimum": 0},
                "fat": {"type": "number", "minimum": 0},
            },
            "required": ["protein", "carbs", "fat"],
            "additionalProperties": False,
        },
        "type": {"type": "string", "enum": ["food", "drink"]},
        "reasoning": {"type": "string"},
    },
    "required": ["name", "calories", "macros", "type", "reasoning"],
    "additionalProperties": False,
}

IMAGE_PROMPT = (
    "You are a precise nutrition tracker. Estimate calories factually and "
    "accurately. Analyze this photo (food OR drink).\n\n"
    'Additional notes from the user: "{notes}"\n'
    "(Use these notes for portion size and hidden calories such as oil or "
    "sugar in drinks.)\n\n"
    "Instructions:\n"
    "1. Identify the dish or drink exactly.\n"
    "2. Estimate calories realistically. Be strict with drinks (alcohol, "
    "latte macchiato and similar) and sauces.\n"
    "3. Give macros in grams.\n"
    '4. Decide the type: "food" or "drink".\n\n'
    "Respond ONLY with JSON in this format:\n"
    '{{"name": "Item name", "calories": 0, '
    '"macros": {{"protein": 0, "carbs": 0, "fat": 0}}, '
    '"type": "food", "reasoning": "Factual reasoning for the estimate."}}'
)

TEXT_PROMPT = (
    "You are a precise nutrition tracker. Estimate the calories for the "
    'following:\n\n"{description}"\n\n'
    "Instructions:\n"
    "1. Estimate realistically based on typical portion sizes.\n"
    "2. For drinks, account for sugar, milk, alcohol and similar.\n"
    '3. For "zero" or "light" products, use correspondingly low calories.\n'
    "4. Give macros in grams.\n"
    '5. Decide whether it is "food" or "drink".\n\n'
    "Respond ONLY with JSON:\n"
    '{{"name": "Short name", "calories": 0, '
    '"macros": {{"protein": 0, "carbs": 0, "fat": 0}}, '
    '"type": "food", "reasoning": "Short reasoning"}}'
)

_CODE_FENCE = re.compile(r"```(?:json)?")


class AnalysisError(Exception):
    """Raised when a meal could not be estimated."""


class EstimationClient(Protocol):
    """Interface for LLM calorie estimation."""

    async def estimate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> str:
        """Return the raw text answer of the model."""


@dataclass
class AnalysisService:
    """Service that prompts the estimation model and validates its answer."""

    client: EstimationClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def analyze_image(
        self, image_bytes: bytes, notes: str = ""
    ) -> AnalysisResult:
        """Estimate calories for a meal photo."""
        if not image_bytes:
            raise AnalysisError("No image provided")
        prompt = IMAGE_PROMPT.format(notes=notes.strip())
        return await self._estimate(prompt, to_data_url(image_bytes))

    async def analyze_text(self, description: str) -> AnalysisResult:
        """Estimate calories for a free-text description."""
        cleaned = description.strip()
        if not cleaned:
            raise AnalysisError("Description is empty")
        return await self._estimate(TEXT_PROMPT.format(description=cleaned), None)

    async def _estimate(
        self, prompt: str, image_data_url: str | None
    ) -> AnalysisResult:
        try:
            raw = await self.client.estimate(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=prompt,
                schema=ANALYSIS_SCHEMA,
                image_data_url=image_data_url,
            )
        except Exception as exc:
            logger.exception("Estimation request failed")
            raise AnalysisError("Estimation request failed") from exc
        return parse_analysis(raw)


def parse_analysis(raw: str) -> AnalysisResult:
    """Normalize a model answer into an analysis result.

    Markdown code fences are stripped, calories and macros are rounded and
    clamped at zero, and anything other than "drink" counts as food.
    """
    cleaned = _CODE_FENCE.sub("", raw or "").strip()
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.warning("Unparsable estimation response: %s", raw)
        raise AnalysisError("Estimation response is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise AnalysisError("Estimation response is not an object")

    name = payload.get("name")
    calories = payload.get("calories")
    macros = payload.get("macros")
    if (
        not isinstance(name, str)
        or not _is_number(calories)
        or not isinstance(macros, dict)
    ):
        logger.warning("Incomplete estimation response: %s", payload)
        raise AnalysisError("Incomplete analysis data")

    try:
        return AnalysisResult(
            name=name,
            calories=_non_negative_int(calories),
            macros=MacroEstimate(
                protein=_non_negative_int(macros.get("protein")),
                carbs=_non_negative_int(macros.get("carbs")),
                fat=_non_negative_int(macros.get("fat")),
            ),
            kind=MealKind.DRINK if payload.get("type") == "drink" else MealKind.FOOD,
            reasoning=str(payload.get("reasoning") or ""),
        )
    except (ValidationError, OverflowError, ValueError) as exc:
        raise AnalysisError("Analysis could not be processed") from exc


def to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _non_negative_int(value: object) -> int:
    if not _is_number(value):
        return 0
    return max(0, math.floor(value + 0.5))
