"""Profile service that keeps calorie targets in sync with the profile."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from diet_tracker.domain.profiles import Profile, StoredProfile, TargetResult
from diet_tracker.services.targets import compute_targets

logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> StoredProfile | None:
        """Return the user's profile if one exists."""

    def upsert_profile(
        self,
        user_id: UUID,
        profile: Profile,
        targets: TargetResult,
        updated_at: datetime,
    ) -> StoredProfile:
        """Create or replace the user's profile."""


@dataclass
class ProfileService:
    """Service for loading and saving profiles."""

    repository: ProfileRepository

    def get_profile(self, user_id: UUID) -> StoredProfile | None:
        """Return the stored profile for a user."""
        return self.repository.get_profile(user_id)

    def has_profile(self, user_id: UUID) -> bool:
        """Return True once onboarding has been completed."""
        return self.repository.get_profile(user_id) is not None

    def save_profile(self, user_id: UUID, profile: Profile) -> StoredProfile:
        """Recompute targets and persist the profile."""
        targets = compute_targets(profile)
        stored = self.repository.upsert_profile(
            user_id=user_id,
            profile=profile,
            targets=targets,
            updated_at=datetime.now(tz=UTC),
        )
        logger.info(
            "Saved profile for user %s with daily target %s",
            user_id,
            targets.daily_target,
        )
        return stored

    def preview(self, profile: Profile) -> TargetResult:
        """Return targets for an unsaved profile."""
        return compute_targets(profile)
