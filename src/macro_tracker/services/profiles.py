"""User profile service."""

from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from macro_tracker.domain.profiles import GoalProfile, StreakState, UserProfile


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the profile for a user, if present."""

    def upsert_profile(self, profile: UserProfile) -> UserProfile:
        """Create or replace a user's profile."""

    def update_streak(self, user_id: UUID, streak: StreakState) -> None:
        """Persist the user's streak state."""


@dataclass
class ProfileService:
    """Service for goals, preferences and streak state."""

    repository: ProfileRepository
    default_timezone: str = "UTC"

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the user's profile."""
        return self.repository.get_profile(user_id)

    def save_settings(  # noqa: PLR0913
        self,
        user_id: UUID,
        goals: GoalProfile,
        *,
        timezone: str | None = None,
        preferred_unit: str | None = None,
        body_weight_kg: float | None = None,
        target_monthly_weight_change_kg: float | None = None,
    ) -> UserProfile:
        """Create or update goals and preferences, keeping the streak."""
        existing = self.repository.get_profile(user_id)
        if existing is None:
            existing = UserProfile(
                user_id=user_id, goals=goals, timezone=self.default_timezone
            )
        profile = replace(
            existing,
            goals=goals,
            timezone=timezone or existing.timezone,
            preferred_unit=preferred_unit or existing.preferred_unit,
            body_weight_kg=body_weight_kg,
            target_monthly_weight_change_kg=target_monthly_weight_change_kg,
        )
        return self.repository.upsert_profile(profile)

    def save_streak(self, user_id: UUID, streak: StreakState) -> None:
        """Persist a new streak state."""
        self.repository.update_streak(user_id, streak)
