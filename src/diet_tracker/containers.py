"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from diet_tracker.adapters.openai_estimation_client import OpenAIEstimationClient
from diet_tracker.adapters.supabase_auth_gateway import SupabaseAuthGateway
from diet_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from diet_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from diet_tracker.config import Settings
from diet_tracker.services.analysis import AnalysisService
from diet_tracker.services.auth import AuthService
from diet_tracker.services.meals import MealService
from diet_tracker.services.profiles import ProfileService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    profile_service: ProfileService
    meal_service: MealService
    analysis_service: AnalysisService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    estimation_client = OpenAIEstimationClient.create(resolved_settings.openai_api_key)
    analysis_service = AnalysisService(
        client=estimation_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )

    async def close_resources() -> None:
        await estimation_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=AuthService(SupabaseAuthGateway(supabase_client)),
        profile_service=ProfileService(SupabaseProfileRepository(supabase_client)),
        meal_service=MealService(
            repository=SupabaseMealRepository(supabase_client),
            history_days=resolved_settings.history_days,
        ),
        analysis_service=analysis_service,
        close_resources=close_resources,
    )
