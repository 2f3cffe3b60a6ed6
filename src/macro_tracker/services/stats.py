"""Statistics service for meal logs."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from uuid import UUID

from macro_tracker.domain.meals import MealLogEntry
from macro_tracker.domain.nutrition import NutrientVector
from macro_tracker.domain.stats import DailyStats, MacroEnergySplit, PeriodSummary
from macro_tracker.services.meals import MealLogRepository
from macro_tracker.services.nutrients import sum_vectors

TREND_DAYS = 7

# Atwater factors, kcal per gram.
KCAL_PER_GRAM_PROTEIN = 4.0
KCAL_PER_GRAM_FAT = 9.0
KCAL_PER_GRAM_CARBOHYDRATE = 4.0


def macro_energy_split(nutrients: NutrientVector) -> MacroEnergySplit:
    """Split energy between the macros; shares are 0 when there is no energy."""
    protein = nutrients.protein * KCAL_PER_GRAM_PROTEIN
    fats = nutrients.fats * KCAL_PER_GRAM_FAT
    carbohydrates = nutrients.carbohydrates * KCAL_PER_GRAM_CARBOHYDRATE
    total = protein + fats + carbohydrates

    def share(kcal: float) -> float:
        return round(kcal * 100.0 / total, 1) if total > 0 else 0.0

    return MacroEnergySplit(
        protein_kcal=protein,
        fats_kcal=fats,
        carbohydrates_kcal=carbohydrates,
        protein_pct=share(protein),
        fats_pct=share(fats),
        carbohydrates_pct=share(carbohydrates),
    )


def compute_daily_stats(day: date, meals: Iterable[MealLogEntry]) -> DailyStats:
    """Sum the snapshotted nutrients of the meals logged on day."""
    day_meals = [meal for meal in meals if meal.logged_on == day]
    day_meals.sort(key=lambda meal: meal.created_at, reverse=True)
    total = sum_vectors(meal.nutrients for meal in day_meals)
    return DailyStats(
        day=day,
        total_nutrients=total,
        meals=tuple(day_meals),
        energy_split=macro_energy_split(total),
    )


def compute_period_stats(
    start: date, days: int, meals: Iterable[MealLogEntry]
) -> PeriodSummary:
    """Build per-day totals and averages for days starting at start."""
    meals = list(meals)
    daily = tuple(
        compute_daily_stats(start + timedelta(days=offset), meals)
        for offset in range(days)
    )
    total = sum_vectors(day.total_nutrients for day in daily)
    total_days = max(len(daily), 1)
    return PeriodSummary(
        start=start,
        end=start + timedelta(days=max(days, 1) - 1),
        daily=daily,
        average_nutrients=NutrientVector(
            calories=total.calories / total_days,
            protein=total.protein / total_days,
            fats=total.fats / total_days,
            carbohydrates=total.carbohydrates / total_days,
        ),
    )


@dataclass
class StatsService:
    """Service for reading day and trend statistics."""

    repository: MealLogRepository

    def get_day(self, owner_id: UUID, day: date) -> DailyStats:
        """Return the totals of a single day."""
        meals = self.repository.list_meals(owner_id, day, day)
        return compute_daily_stats(day, meals)

    def get_trend(
        self, owner_id: UUID, end: date, days: int = TREND_DAYS
    ) -> PeriodSummary:
        """Return the days ending at end (inclusive), oldest first."""
        start = end - timedelta(days=days - 1)
        meals = self.repository.list_meals(owner_id, start, end)
        return compute_period_stats(start, days, meals)
