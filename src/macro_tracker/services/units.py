"""Unit conversion between grams, tablespoons and natural serving units."""

import math
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from macro_tracker.domain.errors import InvalidUnitConversion
from macro_tracker.domain.nutrition import IngredientRecord
from macro_tracker.domain.profiles import PreferredUnit

Unit = Literal["g", "tbsp", "natural"]

# Approximation independent of ingredient density.
GRAMS_PER_TABLESPOON = 15.0

COUNTABLE_UNITS: frozenset[str] = frozenset(
    {
        "egg",
        "eggs",
        "piece",
        "pieces",
        "slice",
        "slices",
        "whole",
        "entire",
        "unit",
        "units",
        "item",
        "items",
    }
)

_SINGULAR_COUNTABLES = {"egg", "slice", "piece", "item", "unit"}
_PLACEHOLDER_WORDS = {"undetermined", "unknown", "misc", "serving", "sample", "other"}
_LEADING_PLACEHOLDER = re.compile(
    r"^(undetermined|unknown|misc|serving|sample|other)(\s|$)"
)

_ABBREVIATIONS = {
    "egg": "egg",
    "slice": "sl",
    "piece": "pc",
    "unit": "un",
    "item": "it",
    "cup": "cup",
    "ounce": "oz",
    "pound": "lb",
}


@dataclass(frozen=True)
class DisplayAmount:
    """An amount expressed in the unit shown to the user."""

    value: float
    unit: str


def is_countable_unit(
    serving_unit: str | None, vocabulary: Iterable[str] = COUNTABLE_UNITS
) -> bool:
    """Return True when the unit names a countable item like "egg"."""
    if not serving_unit:
        return False
    unit = serving_unit.lower()
    return any(item.lower() in unit for item in vocabulary)


def to_grams(amount: float, unit: Unit, serving_size_g: float | None = None) -> float:
    """Convert an amount in the given unit to grams."""
    if unit == "g":
        grams = amount
    elif unit == "tbsp":
        grams = amount * GRAMS_PER_TABLESPOON
    elif unit == "natural":
        grams = amount * _require_serving_size(serving_size_g)
    else:
        raise InvalidUnitConversion(f"Unsupported unit: {unit!r}")
    if not math.isfinite(grams):
        raise InvalidUnitConversion(f"Amount {amount!r} {unit} is out of range")
    return grams


def from_grams(grams: float, unit: Unit, serving_size_g: float | None = None) -> float:
    """Convert grams to an amount in the given unit."""
    if unit == "g":
        return grams
    if unit == "tbsp":
        return grams / GRAMS_PER_TABLESPOON
    if unit == "natural":
        return grams / _require_serving_size(serving_size_g)
    raise InvalidUnitConversion(f"Unsupported unit: {unit!r}")


def _require_serving_size(serving_size_g: float | None) -> float:
    if serving_size_g is None or serving_size_g <= 0:
        raise InvalidUnitConversion(
            "Natural unit conversion requires a positive serving size"
        )
    return serving_size_g


def sanitize_serving_unit_label(raw: str | None) -> str | None:
    """Normalize a free-text serving unit from the ingredient database.

    Labels that start with a placeholder ("undetermined", "serving", ...) carry
    no meaning and yield None. Otherwise placeholder words and trailing numeric
    codes are dropped, plural countable nouns are singularized and the first
    letter is capitalized, e.g. "cheese undetermined 2423" -> "Cheese" and
    "eggs" -> "Egg".
    """
    if not raw:
        return None
    cleaned = " ".join(raw.strip().lower().split())
    if not cleaned or _LEADING_PLACEHOLDER.match(cleaned):
        return None
    words = [word for word in cleaned.split() if word not in _PLACEHOLDER_WORDS]
    while words and words[-1].isdigit():
        words.pop()
    if not words:
        return None
    last = words[-1]
    if last.endswith("s") and last[:-1] in _SINGULAR_COUNTABLES:
        words[-1] = last[:-1]
    label = " ".join(words)
    return label[0].upper() + label[1:]


def uses_natural_unit(
    ingredient: IngredientRecord, vocabulary: Iterable[str] = COUNTABLE_UNITS
) -> bool:
    """Return True when the ingredient should be entered in natural units."""
    return bool(ingredient.serving_size_g) and is_countable_unit(
        ingredient.serving_unit, vocabulary
    )


def entry_input_unit(
    ingredient: IngredientRecord,
    preferred_unit: PreferredUnit,
    vocabulary: Iterable[str] = COUNTABLE_UNITS,
) -> Unit:
    """Pick the unit an ingredient amount is entered and shown in."""
    if uses_natural_unit(ingredient, vocabulary):
        return "natural"
    return "tbsp" if preferred_unit == "tablespoons" else "g"


def display_amount(
    grams: float,
    ingredient: IngredientRecord,
    preferred_unit: PreferredUnit,
    vocabulary: Iterable[str] = COUNTABLE_UNITS,
) -> DisplayAmount:
    """Express grams of an ingredient in its display unit, to one decimal."""
    unit = entry_input_unit(ingredient, preferred_unit, vocabulary)
    value = round(from_grams(grams, unit, ingredient.serving_size_g), 1)
    if unit == "natural":
        return DisplayAmount(value=value, unit=str(ingredient.serving_unit))
    return DisplayAmount(value=value, unit=unit)


def format_ingredient_amount(
    grams: float,
    ingredient: IngredientRecord,
    preferred_unit: PreferredUnit,
    vocabulary: Iterable[str] = COUNTABLE_UNITS,
) -> str:
    """Format an ingredient amount like "2.0 Egg" or "150.0 g"."""
    amount = display_amount(grams, ingredient, preferred_unit, vocabulary)
    return f"{amount.value} {amount.unit}"


def abbreviate_unit(unit: str | None) -> str | None:
    """Return a short form of a unit label for compact display."""
    if not unit:
        return None
    lower = unit.lower().strip()
    if lower in _ABBREVIATIONS:
        return _ABBREVIATIONS[lower]
    for key, abbreviation in _ABBREVIATIONS.items():
        if lower.startswith(key):
            return abbreviation
    if len(unit) > 5:  # noqa: PLR2004
        return unit[:3] + "."
    return unit
