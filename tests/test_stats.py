"""Tests for daily and trend statistics."""

from datetime import date, timedelta
from uuid import uuid4

import pytest

from macro_tracker.domain.nutrition import NutrientVector
from macro_tracker.services.nutrients import ZERO
from macro_tracker.services.stats import (
    StatsService,
    compute_daily_stats,
    compute_period_stats,
    macro_energy_split,
)
from tests.conftest import FIXED_NOW, InMemoryMealLogRepository, make_meal

DAY = date(2024, 3, 10)


def test_daily_stats_sum_meals_of_the_day() -> None:
    owner_id = uuid4()
    meals = [
        make_meal(owner_id, DAY, 400.0, protein=30.0),
        make_meal(owner_id, DAY, 250.0, protein=10.0),
        make_meal(owner_id, DAY - timedelta(days=1), 900.0),
    ]

    stats = compute_daily_stats(DAY, meals)

    assert stats.day == DAY
    assert len(stats.meals) == 2
    assert stats.total_nutrients.calories == 650.0
    assert stats.total_nutrients.protein == 40.0


def test_daily_stats_lists_newest_first() -> None:
    owner_id = uuid4()
    early = make_meal(owner_id, DAY, 100.0, created_at=FIXED_NOW - timedelta(hours=6))
    late = make_meal(owner_id, DAY, 200.0, created_at=FIXED_NOW)

    stats = compute_daily_stats(DAY, [early, late])

    assert stats.meals == (late, early)


def test_empty_day_is_zero() -> None:
    stats = compute_daily_stats(DAY, [])
    assert stats.total_nutrients == ZERO
    assert stats.meals == ()


def test_period_stats_average_over_all_days() -> None:
    owner_id = uuid4()
    start = DAY - timedelta(days=6)
    meals = [
        make_meal(owner_id, start, 1400.0),
        make_meal(owner_id, DAY, 2100.0),
    ]

    summary = compute_period_stats(start, 7, meals)

    assert summary.start == start
    assert summary.end == DAY
    assert [day.day for day in summary.daily] == [
        start + timedelta(days=offset) for offset in range(7)
    ]
    assert summary.daily[0].total_nutrients.calories == 1400.0
    assert summary.daily[3].total_nutrients == ZERO
    assert summary.average_nutrients.calories == pytest.approx(500.0)


def test_stats_service_trend_ends_on_given_day() -> None:
    owner_id = uuid4()
    repository = InMemoryMealLogRepository()
    repository.add(make_meal(owner_id, DAY, 700.0))
    repository.add(make_meal(owner_id, DAY - timedelta(days=7), 5000.0))
    repository.add(make_meal(uuid4(), DAY, 5000.0))
    service = StatsService(repository)

    trend = service.get_trend(owner_id, DAY)

    assert trend.start == DAY - timedelta(days=6)
    assert trend.end == DAY
    assert len(trend.daily) == 7
    assert trend.daily[-1].total_nutrients.calories == 700.0
    assert trend.average_nutrients.calories == pytest.approx(100.0)
    assert service.get_day(owner_id, DAY).total_nutrients.calories == 700.0


def test_daily_totals_ignore_meal_order() -> None:
    owner_id = uuid4()
    meals = [make_meal(owner_id, DAY, value, protein=value * 2) for value in (1, 2, 3)]

    forward = compute_daily_stats(DAY, meals)
    backward = compute_daily_stats(DAY, list(reversed(meals)))

    assert forward.total_nutrients == backward.total_nutrients


def test_macro_energy_split_uses_atwater_factors() -> None:
    split = macro_energy_split(
        NutrientVector(calories=500.0, protein=25.0, fats=20.0, carbohydrates=55.0)
    )

    assert split.protein_kcal == 100.0
    assert split.fats_kcal == 180.0
    assert split.carbohydrates_kcal == 220.0
    assert split.protein_pct == 20.0
    assert split.fats_pct == 36.0
    assert split.carbohydrates_pct == 44.0


def test_daily_stats_carry_energy_split() -> None:
    owner_id = uuid4()
    stats = compute_daily_stats(DAY, [make_meal(owner_id, DAY, 400.0, protein=10.0)])

    assert stats.energy_split.protein_kcal == 40.0
    assert stats.energy_split.protein_pct == 100.0


def test_empty_day_has_no_energy_split() -> None:
    split = compute_daily_stats(DAY, []).energy_split
    assert split.protein_pct == split.fats_pct == split.carbohydrates_pct == 0.0
