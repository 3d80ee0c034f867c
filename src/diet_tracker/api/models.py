"""Pydantic models for the JSON API."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from diet_tracker.domain import formatting
from diet_tracker.domain.foods import Food
from diet_tracker.domain.meals import DaySummary, Meal, MealItem


class FoodPayload(BaseModel):
    """Fields for creating or updating a food."""

    name: str | None = None
    standard_portion: Decimal | None = None
    calories: Decimal | None = None
    protein: Decimal | None = None


class MealPayload(BaseModel):
    """Fields for creating or updating a meal."""

    memo: str | None = None
    logged_at: datetime | None = None


class MealItemPayload(BaseModel):
    """Fields for adding or changing a meal item."""

    food_id: UUID
    serving_size: Decimal | None = None


class FoodResponse(BaseModel):
    id: UUID
    name: str
    standard_portion: float
    calories: float
    protein: float

    @classmethod
    def from_domain(cls, food: Food) -> "FoodResponse":
        return cls(
            id=food.id,
            name=food.name,
            standard_portion=food.standard_portion,
            calories=food.calories,
            protein=food.protein,
        )


class MealItemResponse(BaseModel):
    id: UUID
    food_id: UUID
    name: str
    serving_size: float
    calories: float
    protein: float
    display: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, item: MealItem) -> "MealItemResponse":
        return cls(
            id=item.id,
            food_id=item.food_id,
            name=item.name,
            serving_size=item.serving_size,
            calories=float(item.calories),
            protein=float(item.protein),
            display={
                "serving_size": formatting.grams(item.serving_size),
                "calories": formatting.kcal(item.calories),
                "protein": formatting.protein_label(item.protein),
            },
        )


class MealResponse(BaseModel):
    id: UUID
    memo: str
    logged_at: datetime
    total_calories: float
    total_protein: float
    food_names: list[str]
    items: list[MealItemResponse]
    display: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, meal: Meal) -> "MealResponse":
        return cls(
            id=meal.id,
            memo=meal.memo,
            logged_at=meal.logged_at,
            total_calories=float(meal.total_calories),
            total_protein=float(meal.total_protein),
            food_names=meal.food_names,
            items=[MealItemResponse.from_domain(item) for item in meal.items],
            display={
                "calories": formatting.kcal(meal.total_calories),
                "protein": formatting.protein_label(meal.total_protein),
                "food_names": formatting.food_name_list(meal.food_names),
            },
        )


class DaySummaryResponse(BaseModel):
    day: date
    total_calories: float
    total_protein: float
    meals: list[MealResponse]

    @classmethod
    def from_domain(cls, summary: DaySummary) -> "DaySummaryResponse":
        return cls(
            day=summary.day,
            total_calories=float(summary.total_calories),
            total_protein=float(summary.total_protein),
            meals=[MealResponse.from_domain(meal) for meal in summary.meals],
        )
