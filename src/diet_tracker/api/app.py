"""FastAPI application factory."""

import logging
import math
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime
from uuid import UUID

from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi import status as http_status

from diet_tracker.api.dependencies import get_container, local_now, require_user
from diet_tracker.api.schemas import MealPayload, ProfilePayload, TextAnalysisPayload
from diet_tracker.app_logging import configure_logging
from diet_tracker.containers import AppContainer
from diet_tracker.domain.analysis import AnalysisResult, MacroEstimate
from diet_tracker.domain.auth import AuthUser
from diet_tracker.domain.meals import Dashboard, History, MealEntry
from diet_tracker.domain.profiles import ACTIVITY_LEVELS, StoredProfile
from diet_tracker.services.analysis import AnalysisError, to_data_url

ANALYSIS_FAILED = "The meal could not be analyzed. Please try again."


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/activity-levels")
    async def activity_levels() -> dict[str, object]:
        """Return the selectable activity multipliers."""
        return {"activity_levels": [asdict(level) for level in ACTIVITY_LEVELS]}

    @app.post("/targets/preview")
    async def preview_targets(
        payload: ProfilePayload, request: Request
    ) -> dict[str, int]:
        """Return live targets for unsaved questionnaire answers."""
        state_container = get_container(request)
        targets = state_container.profile_service.preview(payload.to_profile())
        return asdict(targets)

    @app.get("/profile")
    async def get_profile(
        request: Request, user: AuthUser = Depends(require_user)
    ) -> dict[str, object]:
        """Return the current user's profile."""
        stored = _require_profile(get_container(request), user)
        return {"profile": _serialize_profile(stored)}

    @app.put("/profile")
    async def save_profile(
        payload: ProfilePayload,
        request: Request,
        user: AuthUser = Depends(require_user),
    ) -> dict[str, object]:
        """Save questionnaire answers and recompute targets."""
        state_container = get_container(request)
        stored = state_container.profile_service.save_profile(
            user.id, payload.to_profile()
        )
        return {"profile": _serialize_profile(stored)}

    @app.get("/dashboard")
    async def dashboard(
        request: Request,
        user: AuthUser = Depends(require_user),
        now: datetime = Depends(local_now),
    ) -> dict[str, object]:
        """Return today's intake against the user's targets."""
        state_container = get_container(request)
        stored = _require_profile(state_container, user)
        summary = state_container.meal_service.dashboard(
            user.id, stored.daily_target, stored.weekly_target, now
        )
        return _serialize_dashboard(summary)

    @app.get("/history")
    async def history(
        request: Request,
        user: AuthUser = Depends(require_user),
        now: datetime = Depends(local_now),
    ) -> dict[str, object]:
        """Return per-day intake with the average of past days."""
        state_container = get_container(request)
        stored = _require_profile(state_container, user)
        summary = state_container.meal_service.history(
            user.id, stored.daily_target, now
        )
        return _serialize_history(summary)

    @app.get("/meals")
    async def list_meals(
        request: Request,
        user: AuthUser = Depends(require_user),
        now: datetime = Depends(local_now),
    ) -> dict[str, object]:
        """Return meals from the history window, newest first."""
        meals = get_container(request).meal_service.list_recent(user.id, now)
        return {"meals": [_serialize_meal(meal) for meal in meals]}

    @app.post("/meals", status_code=http_status.HTTP_201_CREATED)
    async def create_meal(
        payload: MealPayload,
        request: Request,
        user: AuthUser = Depends(require_user),
    ) -> dict[str, object]:
        """Store a confirmed estimate."""
        analysis = AnalysisResult(
            name=payload.name,
            calories=payload.calories,
            macros=MacroEstimate(**payload.macros.model_dump()),
            kind=payload.type,
            reasoning=payload.reasoning,
        )
        entry = get_container(request).meal_service.add_meal(
            user.id,
            analysis,
            image_reference=payload.image_url,
            notes=payload.notes,
        )
        return {"meal": _serialize_meal(entry)}

    @app.delete("/meals/{meal_id}")
    async def delete_meal(
        meal_id: UUID,
        request: Request,
        user: AuthUser = Depends(require_user),
    ) -> dict[str, str]:
        """Delete one of the user's meals."""
        if not get_container(request).meal_service.delete_meal(user.id, meal_id):
            raise HTTPException(
                status_code=http_status.HTTP_404_NOT_FOUND, detail="Meal not found"
            )
        return {"status": "deleted"}

    @app.post("/analysis/image")
    async def analyze_image(
        request: Request,
        photo: UploadFile = File(...),
        notes: str = Form(default=""),
        user: AuthUser = Depends(require_user),
    ) -> dict[str, object]:
        """Estimate calories for a meal photo."""
        state_container = get_container(request)
        image_bytes = await photo.read()
        try:
            result = await state_container.analysis_service.analyze_image(
                image_bytes, notes
            )
        except AnalysisError as exc:
            logger.warning("Image analysis failed for user %s: %s", user.id, exc)
            raise HTTPException(
                status_code=http_status.HTTP_502_BAD_GATEWAY,
                detail=_format_analysis_error(state_container, exc),
            ) from exc
        return {
            "analysis": _serialize_analysis(result),
            "image_url": to_data_url(image_bytes),
        }

    @app.post("/analysis/text")
    async def analyze_text(
        payload: TextAnalysisPayload,
        request: Request,
        user: AuthUser = Depends(require_user),
    ) -> dict[str, object]:
        """Estimate calories for a free-text description."""
        state_container = get_container(request)
        try:
            result = await state_container.analysis_service.analyze_text(
                payload.description
            )
        except AnalysisError as exc:
            logger.warning("Text analysis failed for user %s: %s", user.id, exc)
            raise HTTPException(
                status_code=http_status.HTTP_502_BAD_GATEWAY,
                detail=_format_analysis_error(state_container, exc),
            ) from exc
        return {"analysis": _serialize_analysis(result)}

    return app


def _require_profile(container: AppContainer, user: AuthUser) -> StoredProfile:
    stored = container.profile_service.get_profile(user.id)
    if stored is None:
        raise HTTPException(
            status_code=http_status.HTTP_404_NOT_FOUND, detail="Profile not found"
        )
    return stored


def _format_analysis_error(container: AppContainer, exc: Exception) -> str:
    """Return a user-facing analysis error with local debug info."""
    if container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{ANALYSIS_FAILED} (debug: {detail})"
    return ANALYSIS_FAILED


def _serialize_profile(stored: StoredProfile) -> dict[str, object]:
    profile = stored.profile
    return {
        "id": str(stored.id),
        "user_id": str(stored.user_id),
        "gender": profile.gender.value,
        "age": profile.age,
        "weight": profile.weight_kg,
        "height": profile.height_cm,
        "activity_level": profile.activity_factor,
        "goal_weight": profile.goal_weight_kg,
        "daily_target": stored.daily_target,
        "weekly_target": stored.weekly_target,
        "created_at": stored.created_at.isoformat() if stored.created_at else None,
        "updated_at": stored.updated_at.isoformat() if stored.updated_at else None,
    }


def _serialize_meal(meal: MealEntry) -> dict[str, object]:
    return {
        "id": str(meal.id),
        "name": meal.name,
        "calories": meal.calories,
        "macros": asdict(meal.macros),
        "type": meal.kind.value,
        "created_at": meal.created_at.isoformat(),
        "image_url": meal.image_reference,
        "notes": meal.notes,
    }


def _serialize_analysis(result: AnalysisResult) -> dict[str, object]:
    return {
        "name": result.name,
        "calories": result.calories,
        "macros": result.macros.model_dump(),
        "type": result.kind.value,
        "reasoning": result.reasoning,
    }


def _serialize_dashboard(summary: Dashboard) -> dict[str, object]:
    return {
        "daily_target": summary.daily_target,
        "weekly_target": summary.weekly_target,
        "daily_calories": summary.daily.calories,
        "weekly_calories": summary.weekly_calories,
        "remaining_daily": summary.remaining_daily,
        "daily_progress": round(summary.daily_progress, 1),
        "weekly_progress": round(summary.weekly_progress, 1),
        "daily_macros": {
            "protein": summary.daily.protein,
            "carbs": summary.daily.carbs,
            "fat": summary.daily.fat,
        },
        "todays_meals": [_serialize_meal(meal) for meal in summary.todays_meals],
    }


def _serialize_history(summary: History) -> dict[str, object]:
    return {
        "daily_target": summary.daily_target,
        "average_calories": math.floor(summary.average_calories + 0.5),
        "days": [
            {
                "date": day.date_key,
                "calories": day.total_calories,
                "difference": day.difference,
                "status": day.status.value,
                "is_today": day.is_today,
            }
            for day in summary.days
        ],
    }
