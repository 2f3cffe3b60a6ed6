"""Recipe endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, HTTPException, Request, status

from macro_tracker.api.dependencies import get_container, require_api_token
from macro_tracker.api.schemas import (
    AmountPayload,
    RecipeCreatePayload,
    RecipeEntryPayload,
    RecipePreviewPayload,
    RecipeRenamePayload,
    serialize_recipe,
    serialize_totals,
)
from macro_tracker.domain.errors import InvalidUnitConversion
from macro_tracker.services.meals import recipe_serving_size
from macro_tracker.services.units import to_grams

if TYPE_CHECKING:
    from macro_tracker.domain.recipes import Recipe

router = APIRouter(tags=["recipes"], dependencies=[Depends(require_api_token)])


@router.post("/recipes/preview")
async def preview_recipe(
    payload: RecipePreviewPayload, request: Request
) -> dict[str, object]:
    """Aggregate entries without saving a recipe."""
    container = get_container(request)
    entries = [entry.to_domain(container.countable_units) for entry in payload.entries]
    return serialize_totals(container.recipe_service.preview(entries))


@router.get("/users/{user_id}/recipes")
async def list_recipes(user_id: UUID, request: Request) -> dict[str, object]:
    """Return the user's recipes."""
    recipes = get_container(request).recipe_service.list_recipes(user_id)
    return {"recipes": [serialize_recipe(recipe) for recipe in recipes]}


@router.post("/users/{user_id}/recipes", status_code=status.HTTP_201_CREATED)
async def create_recipe(
    user_id: UUID, payload: RecipeCreatePayload, request: Request
) -> dict[str, object]:
    """Save a new recipe."""
    container = get_container(request)
    entries = [entry.to_domain(container.countable_units) for entry in payload.entries]
    recipe = container.recipe_service.create(user_id, payload.name, entries)
    return serialize_recipe(recipe)


@router.get("/users/{user_id}/recipes/{recipe_id}")
async def get_recipe(
    user_id: UUID, recipe_id: UUID, request: Request
) -> dict[str, object]:
    """Return a single recipe."""
    recipe = get_container(request).recipe_service.get(user_id, recipe_id)
    return serialize_recipe(_found(recipe))


@router.patch("/users/{user_id}/recipes/{recipe_id}")
async def rename_recipe(
    user_id: UUID, recipe_id: UUID, payload: RecipeRenamePayload, request: Request
) -> dict[str, object]:
    """Rename a recipe."""
    service = get_container(request).recipe_service
    return serialize_recipe(_found(service.rename(user_id, recipe_id, payload.name)))


@router.delete(
    "/users/{user_id}/recipes/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_recipe(user_id: UUID, recipe_id: UUID, request: Request) -> None:
    """Delete a recipe; meals logged from it are kept."""
    if not get_container(request).recipe_service.delete(user_id, recipe_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)


@router.post("/users/{user_id}/recipes/{recipe_id}/entries")
async def add_recipe_entry(
    user_id: UUID, recipe_id: UUID, payload: RecipeEntryPayload, request: Request
) -> dict[str, object]:
    """Append an ingredient entry."""
    container = get_container(request)
    entry = payload.to_domain(container.countable_units)
    recipe = container.recipe_service.add_entry(user_id, recipe_id, entry)
    return serialize_recipe(_found(recipe))


@router.patch("/users/{user_id}/recipes/{recipe_id}/entries/{index}")
async def resize_recipe_entry(
    user_id: UUID,
    recipe_id: UUID,
    index: int,
    payload: AmountPayload,
    request: Request,
) -> dict[str, object]:
    """Change the amount of an ingredient entry."""
    service = get_container(request).recipe_service
    recipe = _found(service.get(user_id, recipe_id))
    if not 0 <= index < len(recipe.entries):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    ingredient = recipe.entries[index].ingredient
    if payload.unit == "natural" and not ingredient.has_natural_unit:
        raise InvalidUnitConversion(
            f"{ingredient.description!r} has no countable serving unit"
        )
    mass_g = to_grams(payload.amount, payload.unit, ingredient.serving_size_g)
    return serialize_recipe(
        _found(service.resize_entry(user_id, recipe_id, index, mass_g))
    )


@router.delete("/users/{user_id}/recipes/{recipe_id}/entries/{index}")
async def remove_recipe_entry(
    user_id: UUID, recipe_id: UUID, index: int, request: Request
) -> dict[str, object]:
    """Remove an ingredient entry."""
    service = get_container(request).recipe_service
    try:
        recipe = service.remove_entry(user_id, recipe_id, index)
    except IndexError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
    return serialize_recipe(_found(recipe))


@router.get("/users/{user_id}/recipes/{recipe_id}/serving")
async def recipe_serving(
    user_id: UUID, recipe_id: UUID, request: Request
) -> dict[str, object]:
    """Return the masses a recipe can be logged with."""
    recipe = _found(get_container(request).recipe_service.get(user_id, recipe_id))
    return {
        "total_mass_g": recipe.total_mass_g,
        "natural_serving_g": recipe_serving_size(recipe),
        "tablespoon_g": to_grams(1, "tbsp"),
    }


def _found(recipe: Recipe | None) -> Recipe:
    if recipe is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return recipe
