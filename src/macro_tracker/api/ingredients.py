"""Ingredient lookup endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from macro_tracker.api.dependencies import get_container, require_api_token
from macro_tracker.api.schemas import serialize_ingredient

router = APIRouter(
    prefix="/ingredients",
    tags=["ingredients"],
    dependencies=[Depends(require_api_token)],
)


@router.get("/search")
async def search_ingredients(
    request: Request,
    q: str = Query(default=""),
    limit: int = Query(default=15, ge=1, le=50),
) -> dict[str, object]:
    """Search ingredients by description."""
    service = get_container(request).ingredient_service
    results = await service.search(q, limit=limit)
    return {"results": [serialize_ingredient(item) for item in results]}


@router.get("/{fdc_id}")
async def get_ingredient(fdc_id: int, request: Request) -> dict[str, object]:
    """Return an ingredient with its serving data."""
    ingredient = await get_container(request).ingredient_service.get_ingredient(
        fdc_id
    )
    if ingredient is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return serialize_ingredient(ingredient)
