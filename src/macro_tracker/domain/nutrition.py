"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class NutrientVector:
    """Calories and macronutrients for an absolute or per-100g quantity."""

    calories: float
    protein: float
    fats: float
    carbohydrates: float


@dataclass(frozen=True)
class IngredientRecord:
    """Ingredient facts as supplied by FoodData Central."""

    id: int
    description: str
    nutrients_per_100g: NutrientVector
    serving_size_g: float | None = None
    serving_unit: str | None = None
    has_natural_unit: bool = False
