"""Nutrient vector scaling and summation."""

import math
from collections.abc import Iterable, Mapping

from macro_tracker.domain.errors import MalformedNutrientVector
from macro_tracker.domain.nutrition import NutrientVector

NUTRIENT_FIELDS = ("calories", "protein", "fats", "carbohydrates")

ZERO = NutrientVector(calories=0.0, protein=0.0, fats=0.0, carbohydrates=0.0)


def scale(per_100g: NutrientVector, mass_g: float) -> NutrientVector:
    """Scale a per-100g vector to an absolute quantity for mass_g grams.

    This is the only scaling primitive; recipe building and meal logging both
    go through it so the same mass always yields identical numbers.
    """
    factor = mass_g / 100.0
    return ensure_finite(
        NutrientVector(
            calories=per_100g.calories * factor,
            protein=per_100g.protein * factor,
            fats=per_100g.fats * factor,
            carbohydrates=per_100g.carbohydrates * factor,
        )
    )


def add(left: NutrientVector, right: NutrientVector) -> NutrientVector:
    """Add two vectors field by field."""
    return ensure_finite(
        NutrientVector(
            calories=left.calories + right.calories,
            protein=left.protein + right.protein,
            fats=left.fats + right.fats,
            carbohydrates=left.carbohydrates + right.carbohydrates,
        )
    )


def ensure_finite(vector: NutrientVector) -> NutrientVector:
    """Return the vector unchanged, rejecting NaN or infinite fields."""
    for name in NUTRIENT_FIELDS:
        if not math.isfinite(getattr(vector, name)):
            raise MalformedNutrientVector(f"Nutrient value out of range: {name}")
    return vector


def sum_vectors(vectors: Iterable[NutrientVector]) -> NutrientVector:
    """Sum vectors; an empty iterable yields the zero vector."""
    total = ZERO
    for vector in vectors:
        total = add(total, vector)
    return total


def parse_nutrient_vector(payload: Mapping[str, object]) -> NutrientVector:
    """Build a vector from a mapping, rejecting missing or non-numeric fields."""
    values: dict[str, float] = {}
    for name in NUTRIENT_FIELDS:
        if name not in payload or payload[name] is None:
            raise MalformedNutrientVector(f"Missing nutrient field: {name}")
        value = payload[name]
        if isinstance(value, bool) or not isinstance(value, int | float | str):
            raise MalformedNutrientVector(f"Invalid value for {name}: {value!r}")
        try:
            values[name] = float(value)
        except ValueError as exc:
            raise MalformedNutrientVector(
                f"Invalid value for {name}: {value!r}"
            ) from exc
    return ensure_finite(NutrientVector(**values))


def nutrient_vector_to_dict(vector: NutrientVector) -> dict[str, float]:
    """Serialize a vector to a plain mapping."""
    return {
        "calories": vector.calories,
        "protein": vector.protein,
        "fats": vector.fats,
        "carbohydrates": vector.carbohydrates,
    }
