"""Domain models for user goals, streaks and progress."""

from dataclasses import dataclass, field
from datetime import date
from typing import Literal
from uuid import UUID

from macro_tracker.domain.stats import DailyStats

PreferredUnit = Literal["grams", "tablespoons"]


@dataclass(frozen=True)
class GoalProfile:
    """Daily nutrition goals."""

    daily_calorie_goal: float
    daily_protein_goal: float | None = None


@dataclass(frozen=True)
class StreakState:
    """Consecutive days on which goals were met."""

    current_streak: int = 0
    longest_streak: int = 0
    last_streak_date: date | None = None


@dataclass(frozen=True)
class UserProfile:
    """User settings relevant to tracking."""

    user_id: UUID
    goals: GoalProfile
    streak: StreakState = field(default_factory=StreakState)
    timezone: str = "UTC"
    preferred_unit: PreferredUnit = "grams"
    body_weight_kg: float | None = None
    target_monthly_weight_change_kg: float | None = None


@dataclass(frozen=True)
class MetricProgress:
    """Progress of one metric against its goal."""

    consumed: float
    goal: float
    percent: float
    remaining: float
    over: float
    hue: float


@dataclass(frozen=True)
class DayProgress:
    """Stats and goal progress for a single day."""

    stats: DailyStats
    calories: MetricProgress
    protein: MetricProgress | None
    goals_met: bool
    streak: StreakState
