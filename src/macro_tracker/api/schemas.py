"""Request models and response serializers for the HTTP API."""

from dataclasses import asdict
from datetime import date
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from macro_tracker.domain.errors import InvalidUnitConversion
from macro_tracker.domain.meals import MealLogEntry
from macro_tracker.domain.nutrition import IngredientRecord, NutrientVector
from macro_tracker.domain.profiles import DayProgress, UserProfile
from macro_tracker.domain.recipes import Recipe, RecipeIngredientEntry, RecipeTotals
from macro_tracker.domain.stats import DailyStats, PeriodSummary
from macro_tracker.services.units import (
    COUNTABLE_UNITS,
    is_countable_unit,
    sanitize_serving_unit_label,
    to_grams,
)


class NutrientPayload(BaseModel):
    """Calories and macros; all four fields are required."""

    model_config = ConfigDict(allow_inf_nan=False)

    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    fats: float = Field(ge=0)
    carbohydrates: float = Field(ge=0)

    def to_domain(self) -> NutrientVector:
        return NutrientVector(
            calories=self.calories,
            protein=self.protein,
            fats=self.fats,
            carbohydrates=self.carbohydrates,
        )


class IngredientPayload(BaseModel):
    """Ingredient as previously returned by the ingredient endpoints."""

    model_config = ConfigDict(allow_inf_nan=False)

    id: int
    description: str
    nutrients_per_100g: NutrientPayload
    serving_size_g: float | None = Field(default=None, gt=0)
    serving_unit: str | None = None

    def to_domain(
        self, vocabulary: frozenset[str] = COUNTABLE_UNITS
    ) -> IngredientRecord:
        serving_size = self.serving_size_g
        serving_unit = sanitize_serving_unit_label(self.serving_unit)
        if serving_size is None or not serving_unit:
            serving_size, serving_unit = None, None
        return IngredientRecord(
            id=self.id,
            description=self.description,
            nutrients_per_100g=self.nutrients_per_100g.to_domain(),
            serving_size_g=serving_size,
            serving_unit=serving_unit,
            has_natural_unit=is_countable_unit(serving_unit, vocabulary),
        )


class AmountPayload(BaseModel):
    """An amount in grams, tablespoons or the ingredient's natural unit."""

    model_config = ConfigDict(allow_inf_nan=False)

    amount: float = Field(gt=0)
    unit: Literal["g", "tbsp", "natural"] = "g"


class RecipeEntryPayload(AmountPayload):
    """One ingredient line of a recipe."""

    ingredient: IngredientPayload

    def to_domain(
        self, vocabulary: frozenset[str] = COUNTABLE_UNITS
    ) -> RecipeIngredientEntry:
        ingredient = self.ingredient.to_domain(vocabulary)
        if self.unit == "natural" and not ingredient.has_natural_unit:
            raise InvalidUnitConversion(
                f"{ingredient.description!r} has no countable serving unit"
            )
        return RecipeIngredientEntry(
            ingredient=ingredient,
            mass_g=to_grams(self.amount, self.unit, ingredient.serving_size_g),
        )


class RecipePreviewPayload(BaseModel):
    """Entries to aggregate without saving."""

    entries: list[RecipeEntryPayload] = Field(default_factory=list)


class RecipeCreatePayload(RecipePreviewPayload):
    """A new recipe."""

    name: str = Field(min_length=1, max_length=200)


class RecipeRenamePayload(BaseModel):
    """New name for a recipe."""

    name: str = Field(min_length=1, max_length=200)


class MealCreatePayload(BaseModel):
    """A meal logged from a recipe, or an ad-hoc meal with explicit nutrients."""

    model_config = ConfigDict(allow_inf_nan=False)

    recipe_id: UUID | None = None
    amount: float | None = Field(default=None, gt=0)
    unit: Literal["g", "tbsp", "natural"] = "g"
    label: str | None = Field(default=None, min_length=1, max_length=200)
    mass_g: float | None = Field(default=None, gt=0)
    nutrients: NutrientPayload | None = None
    logged_on: date | None = None

    @model_validator(mode="after")
    def _check_source(self) -> "MealCreatePayload":
        if self.recipe_id is not None:
            return self
        if self.label is None or self.mass_g is None or self.nutrients is None:
            raise ValueError(
                "Ad-hoc meals require label, mass_g and nutrients "
                "when no recipe_id is given"
            )
        return self


class ProfilePayload(BaseModel):
    """Goals and preferences."""

    model_config = ConfigDict(allow_inf_nan=False)

    daily_calorie_goal: float = Field(gt=0)
    daily_protein_goal: float | None = Field(default=None, gt=0)
    timezone: str | None = None
    preferred_unit: Literal["grams", "tablespoons"] | None = None
    body_weight_kg: float | None = Field(default=None, gt=0)
    target_monthly_weight_change_kg: float | None = None


def serialize_totals(totals: RecipeTotals) -> dict[str, object]:
    return asdict(totals)


def serialize_ingredient(ingredient: IngredientRecord) -> dict[str, object]:
    return asdict(ingredient)


def serialize_recipe(recipe: Recipe) -> dict[str, object]:
    return {
        "id": recipe.id,
        "owner_id": recipe.owner_id,
        "name": recipe.name,
        "entries": [
            {
                "ingredient": asdict(entry.ingredient),
                "mass_g": entry.mass_g,
                "quantity": entry.quantity,
            }
            for entry in recipe.entries
        ],
        **asdict(recipe.totals),
        "created_at": recipe.created_at,
        "updated_at": recipe.updated_at,
    }


def serialize_meal(meal: MealLogEntry) -> dict[str, object]:
    return asdict(meal)


def serialize_day_progress(progress: DayProgress) -> dict[str, object]:
    return asdict(progress)


def serialize_daily_stats(stats: DailyStats) -> dict[str, object]:
    return asdict(stats)


def serialize_period(summary: PeriodSummary) -> dict[str, object]:
    return asdict(summary)


def serialize_profile(profile: UserProfile) -> dict[str, object]:
    return asdict(profile)
