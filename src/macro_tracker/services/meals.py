"""Meal logging service."""

import logging
import math
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from macro_tracker.domain.errors import InvalidUnitConversion, MacroTrackerError
from macro_tracker.domain.meals import MealLogEntry
from macro_tracker.domain.nutrition import NutrientVector
from macro_tracker.domain.recipes import Recipe
from macro_tracker.services.nutrients import ensure_finite, scale
from macro_tracker.services.recipes import RecipeRepository
from macro_tracker.services.units import Unit, to_grams

_logger = logging.getLogger(__name__)


class MealLogRepository(Protocol):
    """Persistence interface for meal logs."""

    def create_meal(self, meal: MealLogEntry) -> MealLogEntry:
        """Persist a meal log and return it with its id."""

    def get_meal(self, meal_id: UUID) -> MealLogEntry | None:
        """Return a meal log by id."""

    def list_meals(self, owner_id: UUID, start: date, end: date) -> list[MealLogEntry]:
        """Return meal logs with logged_on between start and end, inclusive."""

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal log."""


def recipe_serving_size(recipe: Recipe) -> float | None:
    """Serving size used when a recipe is logged in natural units."""
    if not recipe.entries:
        return None
    return recipe.entries[0].ingredient.serving_size_g


def resolve_meal_mass(recipe: Recipe, amount: float | None, unit: Unit = "g") -> float:
    """Return the grams eaten; no amount means the whole recipe."""
    if amount is None:
        return recipe.total_mass_g
    if unit == "natural":
        serving_size = recipe_serving_size(recipe)
        if serving_size is None:
            raise InvalidUnitConversion(
                f"Recipe {recipe.name!r} has no natural serving size"
            )
        return to_grams(amount, unit, serving_size)
    return to_grams(amount, unit)


def build_recipe_meal(
    owner_id: UUID,
    recipe: Recipe,
    mass_g: float,
    created_at: datetime,
    logged_on: date,
) -> MealLogEntry:
    """Snapshot the nutrients of mass_g grams of a recipe."""
    _check_mass(mass_g)
    return MealLogEntry(
        id=None,
        owner_id=owner_id,
        recipe_id=recipe.id,
        label=recipe.name,
        mass_g=mass_g,
        nutrients=scale(recipe.nutrients_per_100g, mass_g),
        logged_on=logged_on,
        created_at=created_at,
    )


def build_manual_meal(  # noqa: PLR0913
    owner_id: UUID,
    label: str,
    mass_g: float,
    nutrients: NutrientVector,
    created_at: datetime,
    logged_on: date,
) -> MealLogEntry:
    """Create an ad-hoc meal from an already absolute nutrient vector."""
    _check_mass(mass_g)
    return MealLogEntry(
        id=None,
        owner_id=owner_id,
        recipe_id=None,
        label=label,
        mass_g=mass_g,
        nutrients=ensure_finite(nutrients),
        logged_on=logged_on,
        created_at=created_at,
    )


def _check_mass(mass_g: float) -> None:
    if not math.isfinite(mass_g) or mass_g <= 0:
        raise MacroTrackerError("Meal mass must be a positive finite number")


@dataclass
class MealLogService:
    """Service that snapshots nutrients and persists meal logs."""

    recipe_repository: RecipeRepository
    repository: MealLogRepository

    def log_recipe_meal(  # noqa: PLR0913
        self,
        owner_id: UUID,
        recipe_id: UUID,
        amount: float | None = None,
        unit: Unit = "g",
        timezone_name: str = "UTC",
        logged_on: date | None = None,
    ) -> MealLogEntry | None:
        """Log a portion of a recipe. Returns None when the recipe is unknown."""
        recipe = self.recipe_repository.get_recipe(recipe_id)
        if recipe is None or recipe.owner_id != owner_id:
            return None
        created_at = datetime.now(tz=UTC)
        meal = build_recipe_meal(
            owner_id,
            recipe,
            resolve_meal_mass(recipe, amount, unit),
            created_at,
            logged_on or _local_day(created_at, timezone_name),
        )
        return self._save(meal)

    def log_manual_meal(  # noqa: PLR0913
        self,
        owner_id: UUID,
        label: str,
        mass_g: float,
        nutrients: NutrientVector,
        timezone_name: str = "UTC",
        logged_on: date | None = None,
    ) -> MealLogEntry:
        """Log an ad-hoc meal, e.g. one estimated from a text description."""
        created_at = datetime.now(tz=UTC)
        meal = build_manual_meal(
            owner_id,
            label,
            mass_g,
            nutrients,
            created_at,
            logged_on or _local_day(created_at, timezone_name),
        )
        return self._save(meal)

    def get_meal(self, owner_id: UUID, meal_id: UUID) -> MealLogEntry | None:
        """Return a meal owned by the user."""
        meal = self.repository.get_meal(meal_id)
        if meal is None or meal.owner_id != owner_id:
            return None
        return meal

    def delete_meal(self, owner_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal owned by the user."""
        if self.get_meal(owner_id, meal_id) is None:
            return False
        self.repository.delete_meal(meal_id)
        _logger.info("Meal deleted: id=%s", meal_id)
        return True

    def _save(self, meal: MealLogEntry) -> MealLogEntry:
        saved = self.repository.create_meal(meal)
        _logger.info(
            "Meal logged: id=%s recipe_id=%s mass_g=%.1f calories=%.1f",
            saved.id,
            saved.recipe_id,
            saved.mass_g,
            saved.nutrients.calories,
        )
        return saved


def _local_day(moment: datetime, timezone_name: str) -> date:
    return moment.astimezone(ZoneInfo(timezone_name)).date()
