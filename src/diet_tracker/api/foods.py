"""Food registry endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Request, Response, status

from diet_tracker.api.models import FoodPayload, FoodResponse

if TYPE_CHECKING:
    from diet_tracker.containers import AppContainer

router = APIRouter(prefix="/foods", tags=["foods"])


@router.get("")
async def list_foods(request: Request) -> dict[str, list[FoodResponse]]:
    """Return all foods."""
    container: AppContainer = request.app.state.container
    foods = container.food_registry.list_foods()
    return {"foods": [FoodResponse.from_domain(food) for food in foods]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_food(payload: FoodPayload, request: Request) -> FoodResponse:
    """Create a food."""
    container: AppContainer = request.app.state.container
    food = container.food_registry.create_food(
        payload.name, payload.standard_portion, payload.calories, payload.protein
    )
    return FoodResponse.from_domain(food)


@router.get("/{food_id}")
async def get_food(food_id: UUID, request: Request) -> FoodResponse:
    """Return a single food."""
    container: AppContainer = request.app.state.container
    return FoodResponse.from_domain(container.food_registry.get_food(food_id))


@router.put("/{food_id}")
async def update_food(
    food_id: UUID, payload: FoodPayload, request: Request
) -> FoodResponse:
    """Update a food."""
    container: AppContainer = request.app.state.container
    food = container.food_registry.update_food(
        food_id,
        payload.name,
        payload.standard_portion,
        payload.calories,
        payload.protein,
    )
    return FoodResponse.from_domain(food)


@router.delete("/{food_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_food(food_id: UUID, request: Request) -> Response:
    """Delete a food that no meal uses."""
    container: AppContainer = request.app.state.container
    container.food_registry.delete_food(food_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
