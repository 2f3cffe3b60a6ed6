"""Profile endpoints."""

from __future__ import annotations

from uuid import UUID  # noqa: TC003
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, HTTPException, Request, status

from macro_tracker.api.dependencies import get_container, require_api_token
from macro_tracker.api.schemas import ProfilePayload, serialize_profile
from macro_tracker.domain.profiles import GoalProfile

router = APIRouter(
    prefix="/users/{user_id}/profile",
    tags=["profiles"],
    dependencies=[Depends(require_api_token)],
)


@router.get("")
async def get_profile(user_id: UUID, request: Request) -> dict[str, object]:
    """Return goals, preferences and streak."""
    profile = get_container(request).profile_service.get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return serialize_profile(profile)


@router.put("")
async def save_profile(
    user_id: UUID, payload: ProfilePayload, request: Request
) -> dict[str, object]:
    """Create or update goals and preferences."""
    if payload.timezone is not None and not _is_valid_timezone(payload.timezone):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown timezone: {payload.timezone}",
        )
    profile = get_container(request).profile_service.save_settings(
        user_id,
        GoalProfile(
            daily_calorie_goal=payload.daily_calorie_goal,
            daily_protein_goal=payload.daily_protein_goal,
        ),
        timezone=payload.timezone,
        preferred_unit=payload.preferred_unit,
        body_weight_kg=payload.body_weight_kg,
        target_monthly_weight_change_kg=payload.target_monthly_weight_change_kg,
    )
    return serialize_profile(profile)


def _is_valid_timezone(value: str) -> bool:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True
