"""Ingredient lookup service integrating USDA FDC."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

from macro_tracker.adapters.fdc_client import FdcClient
from macro_tracker.domain.nutrition import IngredientRecord, NutrientVector
from macro_tracker.services.cache import Cache
from macro_tracker.services.units import (
    COUNTABLE_UNITS,
    is_countable_unit,
    sanitize_serving_unit_label,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

# FDC nutrient ids and legacy nutrient numbers.
_NUTRIENT_IDS = {
    1008: "calories",
    1003: "protein",
    1004: "fats",
    1005: "carbohydrates",
}
_NUTRIENT_NUMBERS = {
    "208": "calories",
    "203": "protein",
    "204": "fats",
    "205": "carbohydrates",
}
_NATURAL_PORTION_NAMES = {"egg", "piece", "slice", "unit"}
_NON_RETRYABLE_STATUS = {404, 429}

_logger = logging.getLogger(__name__)


@dataclass
class IngredientService:
    """Service for ingredient lookups with caching."""

    fdc_client: FdcClient
    cache: Cache
    countable_units: frozenset[str] = field(default=COUNTABLE_UNITS)
    search_ttl_seconds: int = 3600
    food_ttl_seconds: int = 86400
    debug: bool = False
    retry_attempts: int = 2
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 15) -> list[IngredientRecord]:
        """Search FDC ingredients with caching."""
        cleaned = query.strip()
        if not cleaned:
            return []
        cache_key = f"fdc:search:{cleaned.lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(cleaned, page_size=limit),
            action="search",
        )
        ingredients = [
            IngredientRecord(
                id=int(food["fdcId"]),
                description=str(food.get("description", "")),
                nutrients_per_100g=extract_nutrients(food.get("foodNutrients") or []),
            )
            for food in payload.get("foods") or []
        ]
        self.cache.set(cache_key, ingredients, ttl_seconds=self.search_ttl_seconds)
        if self.debug:
            _logger.info(
                "Ingredient search: query=%s results=%s", cleaned, len(ingredients)
            )
        return ingredients

    async def get_ingredient(self, fdc_id: int) -> IngredientRecord | None:
        """Return full ingredient details, or None when FDC does not know it."""
        cache_key = f"fdc:food:{fdc_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, IngredientRecord):
            return cached

        try:
            payload = await self._call_with_retry(
                lambda: self.fdc_client.get_food(fdc_id),
                action=f"get_food:{fdc_id}",
            )
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:  # noqa: PLR2004
                return None
            raise

        serving_size, serving_unit = extract_serving(payload)
        ingredient = IngredientRecord(
            id=int(payload.get("fdcId", fdc_id)),
            description=str(payload.get("description", "")),
            nutrients_per_100g=extract_nutrients(payload.get("foodNutrients") or []),
            serving_size_g=serving_size,
            serving_unit=serving_unit,
            has_natural_unit=is_countable_unit(serving_unit, self.countable_units),
        )
        self.cache.set(cache_key, ingredient, ttl_seconds=self.food_ttl_seconds)
        if self.debug:
            _logger.info("Ingredient details: fdc_id=%s unit=%s", fdc_id, serving_unit)
        return ingredient

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function, retrying transient failures with backoff."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                status_code = _status_code_from_exception(exc)
                if self.debug:
                    _logger.warning(
                        "Ingredient %s failed (attempt %s/%s, status=%s): %s",
                        action,
                        attempt,
                        self.retry_attempts + 1,
                        status_code,
                        exc,
                    )
                if (
                    attempt > self.retry_attempts
                    or status_code in _NON_RETRYABLE_STATUS
                ):
                    raise
                await asyncio.sleep(self.retry_delay_seconds * 2 ** (attempt - 1))


def _status_code_from_exception(exc: Exception) -> int | None:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    return None


def extract_nutrients(food_nutrients: list[dict[str, object]]) -> NutrientVector:
    """Extract per-100g calories and macros from FDC search or detail nutrients."""
    values = {"calories": 0.0, "protein": 0.0, "fats": 0.0, "carbohydrates": 0.0}
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient.get("nutrientId") or nutrient_info.get("id")
        number = nutrient.get("nutrientNumber") or nutrient_info.get("number")
        key = _NUTRIENT_IDS.get(nutrient_id) or _NUTRIENT_NUMBERS.get(str(number))
        amount = nutrient.get("value")
        if amount is None:
            amount = nutrient.get("amount")
        if key and isinstance(amount, int | float):
            values[key] = float(amount)
    return NutrientVector(**values)


def extract_serving(payload: dict[str, object]) -> tuple[float | None, str | None]:
    """Return a sanitized (serving size in grams, unit) pair, or (None, None)."""
    size = payload.get("servingSize")
    unit = payload.get("servingSizeUnit")
    if isinstance(size, int | float) and size > 0 and unit:
        return _complete_serving(float(size), str(unit))

    portion = _best_portion(payload.get("foodPortions") or [])
    if portion is None:
        return None, None
    measure = portion.get("measureUnit") or {}
    measure_name = str(measure.get("name") or "").lower()
    modifier = str(portion.get("modifier") or "").lower()
    label = " ".join(part for part in (measure_name, modifier) if part).strip()
    return _complete_serving(float(portion["gramWeight"]), label or "serving")


def _complete_serving(size: float, raw_unit: str) -> tuple[float | None, str | None]:
    unit = sanitize_serving_unit_label(raw_unit)
    if unit is None:
        return None, None
    return size, unit


def _best_portion(portions: list[dict[str, object]]) -> dict[str, object] | None:
    """Prefer a single natural-unit portion, then any single portion."""
    weighted = [p for p in portions if isinstance(p.get("gramWeight"), int | float)]
    weighted = [p for p in weighted if p["gramWeight"] > 0]
    if not weighted:
        return None
    singles = [
        p
        for p in weighted
        if p.get("amount") == 1 and (p.get("measureUnit") or {}).get("name")
    ]
    for portion in singles:
        name = str(portion["measureUnit"]["name"]).lower()
        if name in _NATURAL_PORTION_NAMES:
            return portion
    if singles:
        return singles[0]
    return weighted[0]
