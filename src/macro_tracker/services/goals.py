"""Goal progress, color mapping and streak evaluation."""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

from macro_tracker.domain.profiles import (
    DayProgress,
    GoalProfile,
    MetricProgress,
    StreakState,
)
from macro_tracker.domain.stats import DailyStats
from macro_tracker.services.profiles import ProfileService
from macro_tracker.services.stats import StatsService

MAX_PROGRESS_PCT = 200.0
GOAL_HUE = 120.0

_logger = logging.getLogger(__name__)


def progress_percent(consumed: float, goal: float) -> float:
    """Return consumed as a percentage of goal, unclamped."""
    if goal <= 0:
        return 0.0
    return consumed / goal * 100.0


def color_for_progress(pct: float) -> float:
    """Map a progress percentage to a hue: red at 0%, green at 100%, red at 200%."""
    if math.isnan(pct):
        return 0.0
    pct = max(0.0, min(MAX_PROGRESS_PCT, pct))
    if pct <= 100.0:  # noqa: PLR2004
        return pct / 100.0 * GOAL_HUE
    return (1.0 - (pct - 100.0) / 100.0) * GOAL_HUE


def hsl_color(pct: float) -> str:
    """CSS color for a progress percentage."""
    return f"hsl({color_for_progress(pct):.0f} 60% 50%)"


MET_GOAL_COLOR = hsl_color(100.0)


def metric_progress(consumed: float, goal: float) -> MetricProgress:
    """Progress of a consumed amount against a goal."""
    percent = progress_percent(consumed, goal)
    return MetricProgress(
        consumed=consumed,
        goal=goal,
        percent=percent,
        remaining=max(goal - consumed, 0.0),
        over=max(consumed - goal, 0.0),
        hue=color_for_progress(percent),
    )


def met_daily_goals(
    stats: DailyStats, goals: GoalProfile, calorie_tolerance_pct: float = 0.0
) -> bool:
    """Return True when calories are at or under goal and protein is reached.

    The calorie ceiling can be widened by calorie_tolerance_pct percent of the
    goal. Protein only counts when a protein goal is configured.
    """
    totals = stats.total_nutrients
    calorie_limit = goals.daily_calorie_goal * (1.0 + calorie_tolerance_pct / 100.0)
    if totals.calories > calorie_limit:
        return False
    if goals.daily_protein_goal is not None:
        return totals.protein >= goals.daily_protein_goal
    return True


def update_streak(
    state: StreakState, today: date, goals_met_today: bool
) -> StreakState:
    """Advance the streak for today; repeated calls on the same day are no-ops."""
    if state.last_streak_date == today:
        return state
    if goals_met_today and state.last_streak_date == today - timedelta(days=1):
        current = state.current_streak + 1
    elif goals_met_today:
        current = 1
    else:
        current = 0
    return StreakState(
        current_streak=current,
        longest_streak=max(state.longest_streak, current),
        last_streak_date=today,
    )


def evaluate_progress(
    stats: DailyStats,
    goals: GoalProfile,
    streak: StreakState,
    calorie_tolerance_pct: float = 0.0,
) -> DayProgress:
    """Combine a day's stats with goal progress. Does not touch the streak."""
    totals = stats.total_nutrients
    protein = None
    if goals.daily_protein_goal is not None:
        protein = metric_progress(totals.protein, goals.daily_protein_goal)
    return DayProgress(
        stats=stats,
        calories=metric_progress(totals.calories, goals.daily_calorie_goal),
        protein=protein,
        goals_met=met_daily_goals(stats, goals, calorie_tolerance_pct),
        streak=streak,
    )


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ProgressService:
    """Service that evaluates days and keeps the streak current."""

    stats_service: StatsService
    profile_service: ProfileService
    calorie_tolerance_pct: float = 0.0
    clock: Callable[[], datetime] = field(default=_utc_now)

    def today(self, timezone_name: str) -> date:
        """Current calendar date in the given timezone."""
        return self.clock().astimezone(ZoneInfo(timezone_name)).date()

    def evaluate_day(
        self, owner_id: UUID, day: date | None = None
    ) -> DayProgress | None:
        """Return progress for a day, updating the streak only for today.

        Returns None when the user has no profile.
        """
        profile = self.profile_service.get_profile(owner_id)
        if profile is None:
            return None
        today = self.today(profile.timezone)
        day = day or today
        stats = self.stats_service.get_day(owner_id, day)
        progress = evaluate_progress(
            stats, profile.goals, profile.streak, self.calorie_tolerance_pct
        )
        if day != today:
            return progress
        streak = update_streak(profile.streak, today, progress.goals_met)
        if streak != profile.streak:
            self.profile_service.save_streak(owner_id, streak)
            _logger.info(
                "Streak updated: user_id=%s current=%s longest=%s",
                owner_id,
                streak.current_streak,
                streak.longest_streak,
            )
        return replace(progress, streak=streak)
