"""Supabase repository for user profiles."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from macro_tracker.domain.profiles import GoalProfile, StreakState, UserProfile
from macro_tracker.services.profiles import ProfileRepository

_COLUMNS = (
    "user_id, daily_calorie_goal, daily_protein_goal, timezone, preferred_unit, "
    "body_weight, target_monthly_weight_change, current_streak, longest_streak, "
    "last_streak_date"
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for user profiles."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the stored profile for a user."""
        response = (
            self.client.table("profiles")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def upsert_profile(self, profile: UserProfile) -> UserProfile:
        """Create or replace a profile row."""
        self.client.table("profiles").upsert(
            {
                "user_id": str(profile.user_id),
                "daily_calorie_goal": profile.goals.daily_calorie_goal,
                "daily_protein_goal": profile.goals.daily_protein_goal,
                "timezone": profile.timezone,
                "preferred_unit": profile.preferred_unit,
                "body_weight": profile.body_weight_kg,
                "target_monthly_weight_change": (
                    profile.target_monthly_weight_change_kg
                ),
                **_streak_columns(profile.streak),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).execute()
        return profile

    def update_streak(self, user_id: UUID, streak: StreakState) -> None:
        """Update only the streak columns."""
        self.client.table("profiles").update(
            {
                **_streak_columns(streak),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("user_id", str(user_id)).execute()


def _streak_columns(streak: StreakState) -> dict[str, object]:
    return {
        "current_streak": streak.current_streak,
        "longest_streak": streak.longest_streak,
        "last_streak_date": (
            streak.last_streak_date.isoformat() if streak.last_streak_date else None
        ),
    }


def _parse_row(row: dict[str, object]) -> UserProfile:
    protein_goal = row.get("daily_protein_goal")
    body_weight = row.get("body_weight")
    weight_change = row.get("target_monthly_weight_change")
    last_date = row.get("last_streak_date")
    return UserProfile(
        user_id=UUID(str(row["user_id"])),
        goals=GoalProfile(
            daily_calorie_goal=float(row["daily_calorie_goal"]),
            daily_protein_goal=float(protein_goal) if protein_goal else None,
        ),
        streak=StreakState(
            current_streak=int(row.get("current_streak") or 0),
            longest_streak=int(row.get("longest_streak") or 0),
            last_streak_date=(
                date.fromisoformat(str(last_date)[:10]) if last_date else None
            ),
        ),
        timezone=str(row.get("timezone") or "UTC"),
        preferred_unit=(
            "tablespoons" if row.get("preferred_unit") == "tablespoons" else "grams"
        ),
        body_weight_kg=float(body_weight) if body_weight is not None else None,
        target_monthly_weight_change_kg=(
            float(weight_change) if weight_change is not None else None
        ),
    )
