"""Supabase repository for user profiles."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from diet_tracker.domain.profiles import (
    Gender,
    Profile,
    StoredProfile,
    TargetResult,
)
from diet_tracker.parsing import parse_float, parse_int
from diet_tracker.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profiles."""

    client: Client

    def get_profile(self, user_id: UUID) -> StoredProfile | None:
        """Return the profile row for a user."""
        response = (
            self.client.table("profiles")
            .select("*")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def upsert_profile(
        self,
        user_id: UUID,
        profile: Profile,
        targets: TargetResult,
        updated_at: datetime,
    ) -> StoredProfile:
        """Insert or update the profile keyed by user id."""
        response = (
            self.client.table("profiles")
            .upsert(
                {
                    "user_id": str(user_id),
                    "gender": profile.gender.value,
                    "age": profile.age,
                    "weight": profile.weight_kg,
                    "height": profile.height_cm,
                    "activity_level": profile.activity_factor,
                    "goal_weight": profile.goal_weight_kg,
                    "daily_target": targets.daily_target,
                    "weekly_target": targets.weekly_target,
                    "updated_at": updated_at.isoformat(),
                },
                on_conflict="user_id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save profile")
        return _parse_row(response.data[0])


def _parse_row(row: dict[str, object]) -> StoredProfile:
    gender_raw = row.get("gender")
    gender = Gender.FEMALE if gender_raw == Gender.FEMALE.value else Gender.MALE
    return StoredProfile(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        profile=Profile(
            gender=gender,
            age=_optional_int(row.get("age")),
            weight_kg=_optional_float(row.get("weight")),
            height_cm=_optional_float(row.get("height")),
            activity_factor=_optional_float(row.get("activity_level")),
            goal_weight_kg=_optional_float(row.get("goal_weight")),
        ),
        daily_target=parse_int(row.get("daily_target"), 0),
        weekly_target=parse_int(row.get("weekly_target"), 0),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    return parse_int(value, 0) or None


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return parse_float(value, 0.0) or None


def _parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None
