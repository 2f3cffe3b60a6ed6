"""Supabase repository for recipes."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from macro_tracker.domain.nutrition import IngredientRecord
from macro_tracker.domain.recipes import Recipe, RecipeIngredientEntry
from macro_tracker.services.nutrients import (
    nutrient_vector_to_dict,
    parse_nutrient_vector,
)
from macro_tracker.services.recipes import RecipeRepository, build_recipe

_COLUMNS = (
    "id, user_id, name, ingredients, total_mass, total_nutrients, "
    "nutrients_per_100g, created_at, updated_at"
)


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase implementation for recipes.

    Aggregates are written for querying convenience but recomputed from the
    ingredient entries whenever a row is read.
    """

    client: Client

    def create_recipe(self, recipe: Recipe) -> Recipe:
        """Insert a recipe row and return the stored recipe."""
        response = self.client.table("recipes").insert(_to_row(recipe)).execute()
        if not response.data:
            raise RuntimeError("Failed to create recipe")
        return _parse_row(response.data[0])

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe by id."""
        response = (
            self.client.table("recipes")
            .select(_COLUMNS)
            .eq("id", str(recipe_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_recipes(self, owner_id: UUID) -> list[Recipe]:
        """Return all recipes for a user."""
        response = (
            self.client.table("recipes")
            .select(_COLUMNS)
            .eq("user_id", str(owner_id))
            .order("name", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def update_recipe(self, recipe: Recipe) -> Recipe:
        """Replace the entries, name and aggregates of a recipe."""
        row = _to_row(recipe)
        row.pop("created_at", None)
        self.client.table("recipes").update(row).eq("id", str(recipe.id)).execute()
        return recipe

    def delete_recipe(self, recipe_id: UUID) -> None:
        """Delete a recipe row."""
        self.client.table("recipes").delete().eq("id", str(recipe_id)).execute()


def _to_row(recipe: Recipe) -> dict[str, object]:
    row: dict[str, object] = {
        "user_id": str(recipe.owner_id),
        "name": recipe.name,
        "ingredients": [_entry_to_json(entry) for entry in recipe.entries],
        "total_mass": recipe.total_mass_g,
        "total_nutrients": nutrient_vector_to_dict(recipe.total_nutrients),
        "nutrients_per_100g": nutrient_vector_to_dict(recipe.nutrients_per_100g),
    }
    if recipe.created_at:
        row["created_at"] = recipe.created_at.isoformat()
    if recipe.updated_at:
        row["updated_at"] = recipe.updated_at.isoformat()
    return row


def _entry_to_json(entry: RecipeIngredientEntry) -> dict[str, object]:
    ingredient = entry.ingredient
    return {
        "ingredient": {
            "id": ingredient.id,
            "description": ingredient.description,
            "nutrients": nutrient_vector_to_dict(ingredient.nutrients_per_100g),
            "serving_size": ingredient.serving_size_g,
            "serving_unit": ingredient.serving_unit,
            "has_natural_unit": ingredient.has_natural_unit,
        },
        "mass": entry.mass_g,
    }


def _entry_from_json(data: dict[str, object]) -> RecipeIngredientEntry:
    raw = data.get("ingredient") or {}
    serving_size = raw.get("serving_size")
    serving_unit = raw.get("serving_unit")
    if not serving_size or not serving_unit:
        serving_size, serving_unit = None, None
    ingredient = IngredientRecord(
        id=int(raw.get("id", 0)),
        description=str(raw.get("description", "")),
        nutrients_per_100g=parse_nutrient_vector(raw.get("nutrients") or {}),
        serving_size_g=float(serving_size) if serving_size else None,
        serving_unit=str(serving_unit) if serving_unit else None,
        has_natural_unit=bool(raw.get("has_natural_unit", False)),
    )
    return RecipeIngredientEntry(ingredient=ingredient, mass_g=float(data["mass"]))


def _parse_row(row: dict[str, object]) -> Recipe:
    return build_recipe(
        owner_id=UUID(str(row["user_id"])),
        name=str(row.get("name", "")),
        entries=[_entry_from_json(item) for item in row.get("ingredients") or []],
        recipe_id=UUID(str(row["id"])),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )


def _parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None
