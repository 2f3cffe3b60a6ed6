"""Domain models for recipes."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from macro_tracker.domain.nutrition import IngredientRecord, NutrientVector


@dataclass(frozen=True)
class RecipeIngredientEntry:
    """An ingredient and the grams of it used in a recipe."""

    ingredient: IngredientRecord
    mass_g: float

    @property
    def quantity(self) -> float | None:
        """Amount in the ingredient's natural unit, when it has one."""
        serving_size = self.ingredient.serving_size_g
        if not self.ingredient.has_natural_unit or not serving_size:
            return None
        return self.mass_g / serving_size


@dataclass(frozen=True)
class RecipeTotals:
    """Derived aggregates of a recipe's entries."""

    total_mass_g: float
    total_nutrients: NutrientVector
    nutrients_per_100g: NutrientVector


@dataclass(frozen=True)
class Recipe:
    """A saved recipe. Totals are always recomputed from entries."""

    id: UUID | None
    owner_id: UUID
    name: str
    entries: tuple[RecipeIngredientEntry, ...]
    totals: RecipeTotals
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def total_mass_g(self) -> float:
        return self.totals.total_mass_g

    @property
    def total_nutrients(self) -> NutrientVector:
        return self.totals.total_nutrients

    @property
    def nutrients_per_100g(self) -> NutrientVector:
        return self.totals.nutrients_per_100g
