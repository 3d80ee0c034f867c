"""Meal and meal item endpoints."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Query, Request, Response, status

from diet_tracker.api.models import (
    DaySummaryResponse,
    MealItemPayload,
    MealItemResponse,
    MealPayload,
    MealResponse,
)

if TYPE_CHECKING:
    from diet_tracker.containers import AppContainer

router = APIRouter(tags=["meals"])


@router.get("/meals")
async def list_meals(
    request: Request, day: date | None = Query(default=None, alias="date")
) -> dict[str, list[MealResponse]]:
    """Return meals logged on a day, defaulting to today."""
    container: AppContainer = request.app.state.container
    aggregator = container.meal_aggregator
    day = day or datetime.now(tz=aggregator.timezone).date()
    meals = aggregator.load_meals_for_date(day)
    return {"meals": [MealResponse.from_domain(meal) for meal in meals]}


@router.get("/days/{day}")
async def day_summary(day: date, request: Request) -> DaySummaryResponse:
    """Return a day's meals with summed totals."""
    container: AppContainer = request.app.state.container
    summary = container.meal_aggregator.summarize_day(day)
    return DaySummaryResponse.from_domain(summary)


@router.post("/meals", status_code=status.HTTP_201_CREATED)
async def create_meal(payload: MealPayload, request: Request) -> MealResponse:
    """Create a meal."""
    container: AppContainer = request.app.state.container
    meal = container.meal_aggregator.create_meal(payload.memo, payload.logged_at)
    return MealResponse.from_domain(meal)


@router.get("/meals/{meal_id}")
async def get_meal(meal_id: UUID, request: Request) -> MealResponse:
    """Return a meal with its items and totals."""
    container: AppContainer = request.app.state.container
    meal = container.meal_aggregator.load_meal_with_totals(meal_id)
    return MealResponse.from_domain(meal)


@router.put("/meals/{meal_id}")
async def update_meal(
    meal_id: UUID, payload: MealPayload, request: Request
) -> MealResponse:
    """Update a meal's memo and time."""
    container: AppContainer = request.app.state.container
    meal = container.meal_aggregator.update_meal(
        meal_id, payload.memo, payload.logged_at
    )
    return MealResponse.from_domain(meal)


@router.delete("/meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(meal_id: UUID, request: Request) -> Response:
    """Delete a meal and its items."""
    container: AppContainer = request.app.state.container
    container.meal_aggregator.delete_meal(meal_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/meals/{meal_id}/items")
async def list_meal_items(
    meal_id: UUID, request: Request
) -> dict[str, list[MealItemResponse]]:
    """Return a meal's items in the order they were added."""
    container: AppContainer = request.app.state.container
    items = container.meal_aggregator.load_meal_items(meal_id)
    return {"items": [MealItemResponse.from_domain(item) for item in items]}


@router.post("/meals/{meal_id}/items", status_code=status.HTTP_201_CREATED)
async def add_meal_item(
    meal_id: UUID, payload: MealItemPayload, request: Request
) -> MealResponse:
    """Add a food to a meal."""
    container: AppContainer = request.app.state.container
    meal = container.meal_item_service.add_item(
        meal_id, payload.food_id, payload.serving_size
    )
    return MealResponse.from_domain(meal)


@router.put("/meals/{meal_id}/items/{item_id}")
async def update_meal_item(
    meal_id: UUID, item_id: UUID, payload: MealItemPayload, request: Request
) -> MealResponse:
    """Change a meal item's food or serving size."""
    container: AppContainer = request.app.state.container
    meal = container.meal_item_service.update_item(
        meal_id, item_id, payload.food_id, payload.serving_size
    )
    return MealResponse.from_domain(meal)


@router.delete("/meals/{meal_id}/items/{item_id}")
async def remove_meal_item(
    meal_id: UUID, item_id: UUID, request: Request
) -> MealResponse:
    """Remove an item from a meal."""
    container: AppContainer = request.app.state.container
    meal = container.meal_item_service.remove_item(meal_id, item_id)
    return MealResponse.from_domain(meal)
