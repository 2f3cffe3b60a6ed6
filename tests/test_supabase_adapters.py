"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import uuid4

import pytest

from macro_tracker.adapters.supabase_meal_log_repository import (
    SupabaseMealLogRepository,
)
from macro_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from macro_tracker.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from macro_tracker.domain.meals import MealLogEntry
from macro_tracker.domain.nutrition import NutrientVector
from macro_tracker.domain.profiles import GoalProfile, StreakState, UserProfile
from macro_tracker.services.recipes import build_recipe
from tests.conftest import entry, make_egg, make_ingredient


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {
            "select": [],
            "insert": [],
            "update": [],
            "upsert": [],
            "delete": [],
        }
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, str, object]] = field(default_factory=list)
    actions: list[str] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def _start(self, action: str, payload: object | None = None) -> "FakeTable":
        self._action = action
        self.actions.append(action)
        self.last_payload = payload
        return self

    def select(self, *_args) -> "FakeTable":
        return self._start("select")

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._start("insert", payload)

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._start("update", payload)

    def upsert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._start("upsert", payload)

    def delete(self) -> "FakeTable":
        return self._start("delete")

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("eq", column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("gte", column, value))
        return self

    def lte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("lte", column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _recipe_row(recipe_id: str, user_id: str) -> dict[str, object]:
    return {
        "id": recipe_id,
        "user_id": user_id,
        "name": "Omelette",
        "ingredients": [
            {
                "ingredient": {
                    "id": 2,
                    "description": "Egg, whole, raw",
                    "nutrients": {
                        "calories": 143,
                        "protein": 12.6,
                        "fats": 9.5,
                        "carbohydrates": 0.7,
                    },
                    "serving_size": 50,
                    "serving_unit": "Egg",
                    "has_natural_unit": True,
                },
                "mass": 100,
            }
        ],
        # Stale aggregates are ignored on read.
        "total_mass": 999,
        "total_nutrients": {},
        "nutrients_per_100g": {},
        "created_at": "2024-03-10T08:00:00+00:00",
        "updated_at": "2024-03-10T08:00:00+00:00",
    }


def test_supabase_recipe_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    table = client.table("recipes")
    recipe_id, user_id = str(uuid4()), str(uuid4())
    table.queue("insert", [_recipe_row(recipe_id, user_id)])
    table.queue("select", [_recipe_row(recipe_id, user_id)])
    repository = SupabaseRecipeRepository(client)
    recipe = build_recipe(
        uuid4(),
        "Omelette",
        [entry(make_egg(), 100.0)],
        created_at=datetime(2024, 3, 10, 8, tzinfo=UTC),
    )

    created = repository.create_recipe(recipe)
    payload = table.last_payload
    fetched = repository.get_recipe(created.id)

    assert isinstance(payload, dict)
    assert payload["total_mass"] == 100.0
    assert payload["ingredients"][0]["ingredient"]["serving_unit"] == "Egg"
    assert payload["nutrients_per_100g"]["calories"] == pytest.approx(143.0)
    assert str(created.id) == recipe_id
    assert fetched is not None
    assert fetched.total_mass_g == 100.0
    assert fetched.total_nutrients.calories == pytest.approx(143.0)
    assert fetched.entries[0].quantity == 2.0


def test_supabase_recipe_repository_update_and_delete() -> None:
    client = FakeSupabaseClient()
    table = client.table("recipes")
    repository = SupabaseRecipeRepository(client)
    recipe = build_recipe(
        uuid4(),
        "Rice",
        [entry(make_ingredient(), 200.0)],
        recipe_id=uuid4(),
        created_at=datetime(2024, 3, 10, tzinfo=UTC),
    )

    assert repository.update_recipe(recipe) == recipe
    assert "created_at" not in table.last_payload
    assert ("eq", "id", str(recipe.id)) in table.last_filters

    repository.delete_recipe(recipe.id)
    assert table.actions[-1] == "delete"


def test_supabase_recipe_repository_create_failure() -> None:
    repository = SupabaseRecipeRepository(FakeSupabaseClient())
    with pytest.raises(RuntimeError):
        repository.create_recipe(build_recipe(uuid4(), "Rice", []))


def test_supabase_meal_log_repository() -> None:
    client = FakeSupabaseClient()
    table = client.table("meal_logs")
    meal_id, user_id = str(uuid4()), str(uuid4())
    row = {
        "id": meal_id,
        "user_id": user_id,
        "recipe_id": None,
        "recipe_name": "Sandwich",
        "mass": 250,
        "nutrients": {
            "calories": 450,
            "protein": 20,
            "fats": 15,
            "carbohydrates": 55,
        },
        "date": "2024-03-10",
        "created_at": "2024-03-10T12:00:00+00:00",
    }
    table.queue("insert", [row])
    table.queue("select", [row])
    repository = SupabaseMealLogRepository(client)
    meal = MealLogEntry(
        id=None,
        owner_id=uuid4(),
        recipe_id=None,
        label="Sandwich",
        mass_g=250.0,
        nutrients=NutrientVector(
            calories=450.0, protein=20.0, fats=15.0, carbohydrates=55.0
        ),
        logged_on=date(2024, 3, 10),
        created_at=datetime(2024, 3, 10, 12, tzinfo=UTC),
    )

    created = repository.create_meal(meal)
    assert table.last_payload["date"] == "2024-03-10"
    assert table.last_payload["nutrients"]["calories"] == 450.0
    assert str(created.id) == meal_id

    meals = repository.list_meals(created.owner_id, date(2024, 3, 4), date(2024, 3, 10))
    assert meals[0].nutrients.protein == 20.0
    assert meals[0].logged_on == date(2024, 3, 10)
    assert ("gte", "date", "2024-03-04") in table.last_filters
    assert ("lte", "date", "2024-03-10") in table.last_filters

    assert repository.get_meal(created.id) is None


def test_supabase_profile_repository() -> None:
    client = FakeSupabaseClient()
    table = client.table("profiles")
    user_id = uuid4()
    table.queue(
        "select",
        [
            {
                "user_id": str(user_id),
                "daily_calorie_goal": 2000,
                "daily_protein_goal": None,
                "timezone": "Europe/Berlin",
                "preferred_unit": "tablespoons",
                "body_weight": 72.5,
                "target_monthly_weight_change": -1,
                "current_streak": 3,
                "longest_streak": 8,
                "last_streak_date": "2024-03-09",
            }
        ],
    )
    repository = SupabaseProfileRepository(client)

    profile = repository.get_profile(user_id)

    assert profile is not None
    assert profile.goals == GoalProfile(daily_calorie_goal=2000.0)
    assert profile.streak == StreakState(3, 8, date(2024, 3, 9))
    assert profile.preferred_unit == "tablespoons"
    assert profile.target_monthly_weight_change_kg == -1.0

    repository.upsert_profile(UserProfile(user_id=user_id, goals=profile.goals))
    assert table.last_payload["user_id"] == str(user_id)
    assert table.last_payload["last_streak_date"] is None

    repository.update_streak(user_id, StreakState(4, 8, date(2024, 3, 10)))
    assert table.actions[-1] == "update"
    assert table.last_payload["current_streak"] == 4
    assert table.last_payload["last_streak_date"] == "2024-03-10"
    assert repository.get_profile(uuid4()) is None
