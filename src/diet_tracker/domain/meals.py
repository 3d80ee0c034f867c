"""Domain models for meals and meal items."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from fractions import Fraction
from uuid import UUID


@dataclass(frozen=True)
class MealRecord:
    """Meal row as stored."""

    id: UUID
    memo: str
    logged_at: datetime


@dataclass(frozen=True)
class MealItemRecord:
    """Meal item row as stored."""

    id: UUID
    meal_id: UUID
    food_id: UUID
    serving_size: Decimal


@dataclass(frozen=True)
class MealItem:
    """Meal item with nutrition adjusted to its serving size."""

    id: UUID
    meal_id: UUID
    food_id: UUID
    name: str
    serving_size: Decimal
    calories: Fraction
    protein: Fraction


@dataclass(frozen=True)
class Meal:
    """Meal with its items and aggregated totals."""

    id: UUID
    memo: str
    logged_at: datetime
    total_calories: Fraction = Fraction(0)
    total_protein: Fraction = Fraction(0)
    food_names: list[str] = field(default_factory=list)
    items: list[MealItem] = field(default_factory=list)


@dataclass(frozen=True)
class DaySummary:
    """Meals logged on a calendar day with their summed totals."""

    day: date
    meals: list[Meal]
    total_calories: Fraction
    total_protein: Fraction
