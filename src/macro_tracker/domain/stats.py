"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date

from macro_tracker.domain.meals import MealLogEntry
from macro_tracker.domain.nutrition import NutrientVector


@dataclass(frozen=True)
class MacroEnergySplit:
    """Calories contributed by each macronutrient and their shares in percent."""

    protein_kcal: float
    fats_kcal: float
    carbohydrates_kcal: float
    protein_pct: float
    fats_pct: float
    carbohydrates_pct: float


@dataclass(frozen=True)
class DailyStats:
    """Totals for a calendar day."""

    day: date
    total_nutrients: NutrientVector
    meals: tuple[MealLogEntry, ...]
    energy_split: MacroEnergySplit


@dataclass(frozen=True)
class PeriodSummary:
    """Per-day totals and averages across a date range."""

    start: date
    end: date
    daily: tuple[DailyStats, ...]
    average_nutrients: NutrientVector
