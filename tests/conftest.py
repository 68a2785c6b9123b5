"""Shared test fixtures."""

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from diet_tracker.config import Settings
from diet_tracker.containers import AppContainer
from diet_tracker.domain.analysis import AnalysisResult
from diet_tracker.domain.auth import AuthUser
from diet_tracker.domain.meals import Macros, MealEntry, MealKind
from diet_tracker.domain.profiles import Profile, StoredProfile, TargetResult
from diet_tracker.services.analysis import AnalysisService, EstimationClient
from diet_tracker.services.auth import AuthGateway, AuthService
from diet_tracker.services.meals import MealRepository, MealService
from diet_tracker.services.profiles import ProfileRepository, ProfileService

TEST_TOKEN = "valid-token"


def make_meal(  # noqa: PLR0913
    created_at: datetime,
    calories: int,
    protein: int = 0,
    carbs: int = 0,
    fat: int = 0,
    name: str = "meal",
    kind: MealKind = MealKind.FOOD,
) -> MealEntry:
    """Build a meal entry for aggregation tests."""
    return MealEntry(
        id=uuid4(),
        created_at=created_at,
        calories=calories,
        macros=Macros(protein=protein, carbs=carbs, fat=fat),
        kind=kind,
        name=name,
    )


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, StoredProfile] = field(default_factory=dict)

    def get_profile(self, user_id: UUID) -> StoredProfile | None:
        return self.profiles.get(user_id)

    def upsert_profile(
        self,
        user_id: UUID,
        profile: Profile,
        targets: TargetResult,
        updated_at: datetime,
    ) -> StoredProfile:
        existing = self.profiles.get(user_id)
        stored = StoredProfile(
            id=existing.id if existing else uuid4(),
            user_id=user_id,
            profile=profile,
            daily_target=targets.daily_target,
            weekly_target=targets.weekly_target,
            created_at=existing.created_at if existing else updated_at,
            updated_at=updated_at,
        )
        self.profiles[user_id] = stored
        return stored


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: dict[UUID, MealEntry] = field(default_factory=dict)

    def list_meals(self, user_id: UUID, since: datetime) -> list[MealEntry]:
        matches = [
            meal
            for meal in self.meals.values()
            if meal.user_id == user_id and meal.created_at >= since
        ]
        return sorted(matches, key=lambda meal: meal.created_at, reverse=True)

    def create_meal(
        self,
        *,
        user_id: UUID,
        analysis: AnalysisResult,
        image_reference: str | None,
        notes: str | None,
    ) -> MealEntry:
        entry = MealEntry(
            id=uuid4(),
            created_at=datetime.now(tz=UTC),
            calories=analysis.calories,
            macros=Macros(**analysis.macros.model_dump()),
            kind=analysis.kind,
            name=analysis.name,
            user_id=user_id,
            image_reference=image_reference,
            notes=notes,
        )
        self.meals[entry.id] = entry
        return entry

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        meal = self.meals.get(meal_id)
        if meal is None or meal.user_id != user_id:
            return False
        del self.meals[meal_id]
        return True

    def add(self, meal: MealEntry, user_id: UUID) -> MealEntry:
        stored = MealEntry(
            id=meal.id,
            created_at=meal.created_at,
            calories=meal.calories,
            macros=meal.macros,
            kind=meal.kind,
            name=meal.name,
            user_id=user_id,
        )
        self.meals[stored.id] = stored
        return stored


@dataclass
class FakeEstimationClient(EstimationClient):
    """Fake estimation client returning a fixed answer."""

    answer: str = field(
        default_factory=lambda: json.dumps(
            {
                "name": "Cappuccino",
                "calories": 120.4,
                "macros": {"protein": 6.5, "carbs": 9.2, "fat": 5.8},
                "type": "drink",
                "reasoning": "Typical 250 ml cappuccino with whole milk.",
            }
        )
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

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
        self.calls.append({"prompt": prompt, "image_data_url": image_data_url})
        if self.error is not None:
            raise self.error
        return self.answer


@dataclass
class FakeAuthGateway(AuthGateway):
    """Fake identity provider accepting a single token."""

    user: AuthUser = field(
        default_factory=lambda: AuthUser(id=uuid4(), email="user@example.com")
    )
    token: str = TEST_TOKEN

    def get_user(self, access_token: str) -> AuthUser | None:
        if access_token != self.token:
            return None
        return self.user


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        openai_api_key="openai-key",
        environment="test",
    )


@pytest.fixture
def auth_gateway() -> FakeAuthGateway:
    return FakeAuthGateway()


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def estimation_client() -> FakeEstimationClient:
    return FakeEstimationClient()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    auth_gateway: FakeAuthGateway,
    meal_repository: InMemoryMealRepository,
    profile_repository: InMemoryProfileRepository,
    estimation_client: FakeEstimationClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        auth_service=AuthService(auth_gateway),
        profile_service=ProfileService(profile_repository),
        meal_service=MealService(meal_repository),
        analysis_service=AnalysisService(
            client=estimation_client,
            model=settings.openai_model,
            reasoning_effort=settings.openai_reasoning_effort,
            store=settings.openai_store,
        ),
        close_resources=close_resources,
    )


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {TEST_TOKEN}"}
