"""Recipe aggregation and the recipe service."""

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from macro_tracker.domain.errors import InvalidUnitConversion
from macro_tracker.domain.nutrition import NutrientVector
from macro_tracker.domain.recipes import Recipe, RecipeIngredientEntry, RecipeTotals
from macro_tracker.services.nutrients import ZERO, scale, sum_vectors

_logger = logging.getLogger(__name__)


def aggregate(entries: Iterable[RecipeIngredientEntry]) -> RecipeTotals:
    """Compute total mass, total nutrients and per-100g nutrients."""
    entries = tuple(entries)
    total_mass = sum((entry.mass_g for entry in entries), 0.0)
    if not math.isfinite(total_mass):
        raise InvalidUnitConversion("Recipe mass is out of range")
    total = sum_vectors(
        scale(entry.ingredient.nutrients_per_100g, entry.mass_g) for entry in entries
    )
    return RecipeTotals(
        total_mass_g=total_mass,
        total_nutrients=total,
        nutrients_per_100g=_per_100g(total, total_mass),
    )


def _per_100g(total: NutrientVector, total_mass_g: float) -> NutrientVector:
    if total_mass_g <= 0:
        return ZERO
    return NutrientVector(
        calories=total.calories * 100.0 / total_mass_g,
        protein=total.protein * 100.0 / total_mass_g,
        fats=total.fats * 100.0 / total_mass_g,
        carbohydrates=total.carbohydrates * 100.0 / total_mass_g,
    )


def build_recipe(  # noqa: PLR0913
    owner_id: UUID,
    name: str,
    entries: Iterable[RecipeIngredientEntry],
    *,
    recipe_id: UUID | None = None,
    created_at: datetime | None = None,
    updated_at: datetime | None = None,
) -> Recipe:
    """Create a recipe whose totals are computed from its entries."""
    entries = tuple(entries)
    return Recipe(
        id=recipe_id,
        owner_id=owner_id,
        name=name,
        entries=entries,
        totals=aggregate(entries),
        created_at=created_at,
        updated_at=updated_at,
    )


def with_entries(recipe: Recipe, entries: Iterable[RecipeIngredientEntry]) -> Recipe:
    """Return a copy of the recipe with new entries and freshly computed totals."""
    entries = tuple(entries)
    return replace(recipe, entries=entries, totals=aggregate(entries))


def add_entry(recipe: Recipe, entry: RecipeIngredientEntry) -> Recipe:
    """Append an entry."""
    return with_entries(recipe, (*recipe.entries, entry))


def remove_entry(recipe: Recipe, index: int) -> Recipe:
    """Remove the entry at index."""
    _check_index(recipe, index)
    return with_entries(
        recipe, recipe.entries[:index] + recipe.entries[index + 1 :]
    )


def resize_entry(recipe: Recipe, index: int, mass_g: float) -> Recipe:
    """Change the mass of the entry at index."""
    _check_index(recipe, index)
    entries = list(recipe.entries)
    entries[index] = replace(entries[index], mass_g=mass_g)
    return with_entries(recipe, entries)


def _check_index(recipe: Recipe, index: int) -> None:
    if not 0 <= index < len(recipe.entries):
        raise IndexError(f"Recipe has no entry at index {index}")


class RecipeRepository(Protocol):
    """Persistence interface for recipes."""

    def create_recipe(self, recipe: Recipe) -> Recipe:
        """Persist a new recipe and return it with its id."""

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe by id, if present."""

    def list_recipes(self, owner_id: UUID) -> list[Recipe]:
        """Return a user's recipes."""

    def update_recipe(self, recipe: Recipe) -> Recipe:
        """Replace a stored recipe and return it."""

    def delete_recipe(self, recipe_id: UUID) -> None:
        """Delete a recipe."""


@dataclass
class RecipeService:
    """Application service for building and editing recipes."""

    repository: RecipeRepository

    def preview(self, entries: Sequence[RecipeIngredientEntry]) -> RecipeTotals:
        """Compute recipe totals without saving anything."""
        return aggregate(entries)

    def create(
        self, owner_id: UUID, name: str, entries: Sequence[RecipeIngredientEntry]
    ) -> Recipe:
        """Build and persist a new recipe."""
        now = datetime.now(tz=UTC)
        recipe = build_recipe(
            owner_id, name, entries, created_at=now, updated_at=now
        )
        created = self.repository.create_recipe(recipe)
        _logger.info(
            "Recipe created: id=%s entries=%s total_mass_g=%.1f",
            created.id,
            len(created.entries),
            created.total_mass_g,
        )
        return created

    def get(self, owner_id: UUID, recipe_id: UUID) -> Recipe | None:
        """Return a recipe owned by the user."""
        recipe = self.repository.get_recipe(recipe_id)
        if recipe is None or recipe.owner_id != owner_id:
            return None
        return recipe

    def list_recipes(self, owner_id: UUID) -> list[Recipe]:
        """Return the user's recipes sorted by name."""
        return sorted(
            self.repository.list_recipes(owner_id), key=lambda r: r.name.lower()
        )

    def add_entry(
        self, owner_id: UUID, recipe_id: UUID, entry: RecipeIngredientEntry
    ) -> Recipe | None:
        """Add an ingredient entry to a recipe."""
        recipe = self.get(owner_id, recipe_id)
        if recipe is None:
            return None
        return self._save(add_entry(recipe, entry))

    def remove_entry(
        self, owner_id: UUID, recipe_id: UUID, index: int
    ) -> Recipe | None:
        """Remove an ingredient entry from a recipe."""
        recipe = self.get(owner_id, recipe_id)
        if recipe is None:
            return None
        return self._save(remove_entry(recipe, index))

    def resize_entry(
        self, owner_id: UUID, recipe_id: UUID, index: int, mass_g: float
    ) -> Recipe | None:
        """Change the grams of an ingredient entry."""
        recipe = self.get(owner_id, recipe_id)
        if recipe is None:
            return None
        return self._save(resize_entry(recipe, index, mass_g))

    def rename(self, owner_id: UUID, recipe_id: UUID, name: str) -> Recipe | None:
        """Rename a recipe."""
        recipe = self.get(owner_id, recipe_id)
        if recipe is None:
            return None
        return self._save(replace(recipe, name=name))

    def delete(self, owner_id: UUID, recipe_id: UUID) -> bool:
        """Delete a recipe. Meals logged from it keep their snapshots."""
        recipe = self.get(owner_id, recipe_id)
        if recipe is None:
            return False
        self.repository.delete_recipe(recipe_id)
        _logger.info("Recipe deleted: id=%s", recipe_id)
        return True

    def _save(self, recipe: Recipe) -> Recipe:
        updated = self.repository.update_recipe(
            replace(recipe, updated_at=datetime.now(tz=UTC))
        )
        _logger.info(
            "Recipe updated: id=%s entries=%s total_mass_g=%.1f",
            updated.id,
            len(updated.entries),
            updated.total_mass_g,
        )
        return updated
