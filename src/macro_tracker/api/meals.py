"""Meal logging and statistics endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from macro_tracker.api.dependencies import get_container, require_api_token
from macro_tracker.api.schemas import (
    MealCreatePayload,
    serialize_daily_stats,
    serialize_day_progress,
    serialize_meal,
    serialize_period,
)
from macro_tracker.services.stats import TREND_DAYS

if TYPE_CHECKING:
    from macro_tracker.containers import AppContainer

router = APIRouter(
    prefix="/users/{user_id}",
    tags=["meals"],
    dependencies=[Depends(require_api_token)],
)


@router.post("/meals", status_code=status.HTTP_201_CREATED)
async def log_meal(
    user_id: UUID, payload: MealCreatePayload, request: Request
) -> dict[str, object]:
    """Log a recipe portion or an ad-hoc meal."""
    container = get_container(request)
    timezone_name = _timezone_for(container, user_id)
    service = container.meal_log_service
    if payload.recipe_id is not None:
        meal = service.log_recipe_meal(
            user_id,
            payload.recipe_id,
            amount=payload.amount,
            unit=payload.unit,
            timezone_name=timezone_name,
            logged_on=payload.logged_on,
        )
        if meal is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return serialize_meal(meal)
    meal = service.log_manual_meal(
        user_id,
        payload.label,
        payload.mass_g,
        payload.nutrients.to_domain(),
        timezone_name=timezone_name,
        logged_on=payload.logged_on,
    )
    return serialize_meal(meal)


@router.get("/meals/{meal_id}")
async def get_meal(user_id: UUID, meal_id: UUID, request: Request) -> dict[str, object]:
    """Return a logged meal."""
    meal = get_container(request).meal_log_service.get_meal(user_id, meal_id)
    if meal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return serialize_meal(meal)


@router.delete("/meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(user_id: UUID, meal_id: UUID, request: Request) -> None:
    """Delete a logged meal."""
    if not get_container(request).meal_log_service.delete_meal(user_id, meal_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)


@router.get("/days/{day}")
async def get_day(user_id: UUID, day: date, request: Request) -> dict[str, object]:
    """Return a day's meals and goal progress.

    Users without a profile get totals only.
    """
    container = get_container(request)
    progress = container.progress_service.evaluate_day(user_id, day)
    if progress is not None:
        return serialize_day_progress(progress)
    stats = container.stats_service.get_day(user_id, day)
    return {
        "stats": serialize_daily_stats(stats),
        "calories": None,
        "protein": None,
        "goals_met": False,
        "streak": None,
    }


@router.get("/today")
async def get_today(user_id: UUID, request: Request) -> dict[str, object]:
    """Return today's progress in the user's timezone."""
    progress = get_container(request).progress_service.evaluate_day(user_id)
    if progress is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return serialize_day_progress(progress)


@router.get("/trend")
async def get_trend(
    user_id: UUID,
    request: Request,
    end: date | None = None,
    days: int = Query(default=TREND_DAYS, ge=1, le=31),
) -> dict[str, object]:
    """Return per-day totals and averages for the days ending at end."""
    container = get_container(request)
    if end is None:
        end = container.progress_service.today(_timezone_for(container, user_id))
    return serialize_period(container.stats_service.get_trend(user_id, end, days))


def _timezone_for(container: AppContainer, user_id: UUID) -> str:
    profile = container.profile_service.get_profile(user_id)
    if profile is None:
        return container.profile_service.default_timezone
    return profile.timezone
