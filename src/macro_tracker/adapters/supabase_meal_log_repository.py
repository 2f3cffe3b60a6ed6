"""Supabase repository for meal logs."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from macro_tracker.domain.meals import MealLogEntry
from macro_tracker.services.meals import MealLogRepository
from macro_tracker.services.nutrients import (
    nutrient_vector_to_dict,
    parse_nutrient_vector,
)

_COLUMNS = "id, user_id, recipe_id, recipe_name, mass, nutrients, date, created_at"


@dataclass
class SupabaseMealLogRepository(MealLogRepository):
    """Supabase implementation for meal logs."""

    client: Client

    def create_meal(self, meal: MealLogEntry) -> MealLogEntry:
        """Insert a meal log row and return the stored entry."""
        response = (
            self.client.table("meal_logs")
            .insert(
                {
                    "user_id": str(meal.owner_id),
                    "recipe_id": str(meal.recipe_id) if meal.recipe_id else None,
                    "recipe_name": meal.label,
                    "mass": meal.mass_g,
                    "nutrients": nutrient_vector_to_dict(meal.nutrients),
                    "date": meal.logged_on.isoformat(),
                    "created_at": meal.created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal log")
        return _parse_row(response.data[0])

    def get_meal(self, meal_id: UUID) -> MealLogEntry | None:
        """Return a meal log by id."""
        response = (
            self.client.table("meal_logs")
            .select(_COLUMNS)
            .eq("id", str(meal_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_meals(self, owner_id: UUID, start: date, end: date) -> list[MealLogEntry]:
        """Return meal logs dated between start and end, inclusive."""
        response = (
            self.client.table("meal_logs")
            .select(_COLUMNS)
            .eq("user_id", str(owner_id))
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .order("date", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal log row."""
        self.client.table("meal_logs").delete().eq("id", str(meal_id)).execute()


def _parse_row(row: dict[str, object]) -> MealLogEntry:
    recipe_id = row.get("recipe_id")
    return MealLogEntry(
        id=UUID(str(row["id"])),
        owner_id=UUID(str(row["user_id"])),
        recipe_id=UUID(str(recipe_id)) if recipe_id else None,
        label=str(row.get("recipe_name", "")),
        mass_g=float(row.get("mass", 0.0)),
        nutrients=parse_nutrient_vector(row.get("nutrients") or {}),
        logged_on=date.fromisoformat(str(row["date"])),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
