"""Supabase repository for meal entries."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from diet_tracker.domain.analysis import AnalysisResult
from diet_tracker.domain.meals import Macros, MealEntry, MealKind
from diet_tracker.parsing import parse_int
from diet_tracker.services.meals import MealRepository


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals."""

    client: Client

    def list_meals(self, user_id: UUID, since: datetime) -> list[MealEntry]:
        """Return meals created since the given instant, newest first."""
        response = (
            self.client.table("meals")
            .select("*")
            .eq("user_id", str(user_id))
            .gte("created_at", since.isoformat())
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def create_meal(
        self,
        *,
        user_id: UUID,
        analysis: AnalysisResult,
        image_reference: str | None,
        notes: str | None,
    ) -> MealEntry:
        """Insert a meal row and return it."""
        response = (
            self.client.table("meals")
            .insert(
                {
                    "user_id": str(user_id),
                    "name": analysis.name,
                    "calories": analysis.calories,
                    "macros": analysis.macros.model_dump(),
                    "type": analysis.kind.value,
                    "image_url": image_reference,
                    "notes": notes,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return _parse_row(response.data[0])

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal scoped to its owner."""
        response = (
            self.client.table("meals")
            .delete()
            .eq("id", str(meal_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_row(row: dict[str, object]) -> MealEntry:
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else datetime.now(tz=UTC)
    )
    macros_raw = row.get("macros")
    macros = macros_raw if isinstance(macros_raw, dict) else {}
    user_id = row.get("user_id")
    return MealEntry(
        id=UUID(str(row["id"])),
        created_at=created_at,
        calories=max(0, parse_int(row.get("calories"), 0)),
        macros=Macros(
            protein=max(0, parse_int(macros.get("protein"), 0)),
            carbs=max(0, parse_int(macros.get("carbs"), 0)),
            fat=max(0, parse_int(macros.get("fat"), 0)),
        ),
        kind=MealKind.DRINK if row.get("type") == "drink" else MealKind.FOOD,
        name=str(row.get("name") or ""),
        user_id=UUID(str(user_id)) if user_id else None,
        image_reference=row.get("image_url") or None,
        notes=row.get("notes") or None,
    )
