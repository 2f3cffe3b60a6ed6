"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from macro_tracker.adapters.fdc_client import HttpxFdcClient
from macro_tracker.adapters.supabase_meal_log_repository import (
    SupabaseMealLogRepository,
)
from macro_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from macro_tracker.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from macro_tracker.config import Settings, parse_countable_units
from macro_tracker.services.cache import InMemoryCache
from macro_tracker.services.goals import ProgressService
from macro_tracker.services.ingredients import IngredientService
from macro_tracker.services.meals import MealLogService
from macro_tracker.services.profiles import ProfileService
from macro_tracker.services.recipes import RecipeService
from macro_tracker.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    countable_units: frozenset[str]
    ingredient_service: IngredientService
    recipe_service: RecipeService
    meal_log_service: MealLogService
    stats_service: StatsService
    profile_service: ProfileService
    progress_service: ProgressService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    meal_log_repository = SupabaseMealLogRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    countable_units = parse_countable_units(resolved_settings.countable_units)
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    ingredient_service = IngredientService(
        fdc_client=fdc_client,
        cache=InMemoryCache(),
        countable_units=countable_units,
        debug=resolved_settings.debug,
    )
    recipe_service = RecipeService(recipe_repository)
    meal_log_service = MealLogService(
        recipe_repository=recipe_repository,
        repository=meal_log_repository,
    )
    stats_service = StatsService(meal_log_repository)
    profile_service = ProfileService(
        profile_repository, default_timezone=resolved_settings.default_timezone
    )
    progress_service = ProgressService(
        stats_service=stats_service,
        profile_service=profile_service,
        calorie_tolerance_pct=resolved_settings.calorie_goal_tolerance_pct,
    )

    async def close_resources() -> None:
        await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        countable_units=countable_units,
        ingredient_service=ingredient_service,
        recipe_service=recipe_service,
        meal_log_service=meal_log_service,
        stats_service=stats_service,
        profile_service=profile_service,
        progress_service=progress_service,
        close_resources=close_resources,
    )
