"""Meal aggregation service."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta
from decimal import Decimal
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from diet_tracker.domain.errors import InconsistencyError, NotFoundError, ValidationError
from diet_tracker.domain.foods import Food
from diet_tracker.domain.meals import (
    DaySummary,
    Meal,
    MealItem,
    MealItemRecord,
    MealRecord,
)
from diet_tracker.domain.nutrition import ZERO, adjust
from diet_tracker.services.foods import FoodRepository

_logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for meals and their items."""

    def create_meal(self, memo: str, logged_at: datetime) -> MealRecord:
        """Insert a meal and return the stored row."""

    def update_meal(
        self, meal_id: UUID, memo: str, logged_at: datetime
    ) -> MealRecord | None:
        """Update a meal and return the stored row, or None if it is gone."""

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal by id."""

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        """Return a meal row by id."""

    def list_meals_logged_between(
        self, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals with start <= logged_at < end ordered by logged_at."""

    def list_meal_items(self, meal_ids: list[UUID]) -> list[MealItemRecord]:
        """Return items of the given meals in insertion order."""

    def get_meal_item(self, meal_item_id: UUID) -> MealItemRecord | None:
        """Return a meal item row by id."""

    def find_meal_item_ids(self, meal_id: UUID, food_id: UUID) -> list[UUID]:
        """Return ids of items linking the food to the meal."""

    def create_meal_item(
        self, meal_id: UUID, food_id: UUID, serving_size: Decimal
    ) -> MealItemRecord:
        """Insert a meal item and return the stored row."""

    def update_meal_item(
        self, meal_item_id: UUID, food_id: UUID, serving_size: Decimal
    ) -> MealItemRecord | None:
        """Update a meal item and return the stored row, or None if it is gone."""

    def delete_meal_item(self, meal_item_id: UUID) -> None:
        """Delete a meal item by id."""

    def delete_meal_items(self, meal_id: UUID) -> None:
        """Delete every item of a meal."""


@dataclass
class MealAggregator:
    """Loads meals with nutrition totals and owns meal write paths."""

    repository: MealRepository
    food_repository: FoodRepository
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))

    def load_meal_with_totals(self, meal_id: UUID) -> Meal:
        """Return a meal with its items and totals, or raise NotFoundError."""
        record = self.repository.get_meal(meal_id)
        if record is None:
            raise NotFoundError("Meal", meal_id)
        return self._aggregate([record])[0]

    def load_meals_for_date(self, day: date) -> list[Meal]:
        """Return meals logged on a calendar day in the configured timezone."""
        start = datetime.combine(day, time.min, tzinfo=self.timezone)
        end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=self.timezone)
        records = self.repository.list_meals_logged_between(
            start.astimezone(UTC), end.astimezone(UTC)
        )
        return self._aggregate(records)

    def summarize_day(self, day: date) -> DaySummary:
        """Return the day's meals with summed totals."""
        meals = self.load_meals_for_date(day)
        return DaySummary(
            day=day,
            meals=meals,
            total_calories=sum((meal.total_calories for meal in meals), ZERO),
            total_protein=sum((meal.total_protein for meal in meals), ZERO),
        )

    def load_meal_items(self, meal_id: UUID) -> list[MealItem]:
        """Return a meal's items with adjusted nutrition in insertion order."""
        if self.repository.get_meal(meal_id) is None:
            raise NotFoundError("Meal", meal_id)
        records = self.repository.list_meal_items([meal_id])
        return self._adjust_items(records)

    def create_meal(self, memo: str | None, logged_at: datetime | None) -> Meal:
        """Validate and insert a meal."""
        clean_memo, logged = self._validate(memo, logged_at)
        record = self.repository.create_meal(clean_memo, logged)
        _logger.info("Created meal: id=%s", record.id)
        return Meal(id=record.id, memo=record.memo, logged_at=record.logged_at)

    def update_meal(
        self, meal_id: UUID, memo: str | None, logged_at: datetime | None
    ) -> Meal:
        """Validate and update a meal, returning it with fresh totals."""
        clean_memo, logged = self._validate(memo, logged_at)
        if self.repository.get_meal(meal_id) is None:
            raise NotFoundError("Meal", meal_id)
        record = self.repository.update_meal(meal_id, clean_memo, logged)
        if record is None:
            raise NotFoundError("Meal", meal_id)
        _logger.info("Updated meal: id=%s", meal_id)
        return self._aggregate([record])[0]

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal and its items; missing meals are ignored."""
        self.repository.delete_meal(meal_id)
        orphans = self.repository.list_meal_items([meal_id])
        if orphans:
            _logger.warning(
                "Meal delete left %s orphaned items: meal=%s", len(orphans), meal_id
            )
            self.repository.delete_meal_items(meal_id)
        _logger.info("Deleted meal: id=%s", meal_id)

    def meal_exists(self, meal_id: UUID) -> bool:
        return self.repository.get_meal(meal_id) is not None

    def find_meal_item_ids(self, meal_id: UUID, food_id: UUID) -> list[UUID]:
        return self.repository.find_meal_item_ids(meal_id, food_id)

    def _validate(
        self, memo: str | None, logged_at: datetime | None
    ) -> tuple[str, datetime]:
        clean_memo = (memo or "").strip()
        if not clean_memo:
            raise ValidationError("memo", "Memo must not be empty.")
        if logged_at is None:
            raise ValidationError("logged_at", "Logged time is required.")
        if logged_at.tzinfo is None:
            logged_at = logged_at.replace(tzinfo=self.timezone)
        return clean_memo, logged_at

    def _aggregate(self, records: list[MealRecord]) -> list[Meal]:
        if not records:
            return []
        items = self._adjust_items(
            self.repository.list_meal_items([record.id for record in records])
        )
        items_by_meal: dict[UUID, list[MealItem]] = {}
        for item in items:
            items_by_meal.setdefault(item.meal_id, []).append(item)
        return [
            _build_meal(record, items_by_meal.get(record.id, [])) for record in records
        ]

    def _adjust_items(self, records: list[MealItemRecord]) -> list[MealItem]:
        food_ids = list(dict.fromkeys(record.food_id for record in records))
        foods: dict[UUID, Food] = {}
        if food_ids:
            foods = {food.id: food for food in self.food_repository.get_foods(food_ids)}
        items = []
        for record in records:
            food = foods.get(record.food_id)
            if food is None:
                _logger.error(
                    "Meal item references a missing food: item=%s meal=%s food=%s",
                    record.id,
                    record.meal_id,
                    record.food_id,
                )
                raise InconsistencyError(
                    f"Meal item {record.id} references missing food {record.food_id}"
                )
            items.append(
                MealItem(
                    id=record.id,
                    meal_id=record.meal_id,
                    food_id=food.id,
                    name=food.name,
                    serving_size=record.serving_size,
                    calories=adjust(
                        food.calories, record.serving_size, food.standard_portion
                    ),
                    protein=adjust(
                        food.protein, record.serving_size, food.standard_portion
                    ),
                )
            )
        return items


def _build_meal(record: MealRecord, items: list[MealItem]) -> Meal:
    return Meal(
        id=record.id,
        memo=record.memo,
        logged_at=record.logged_at,
        total_calories=sum((item.calories for item in items), ZERO),
        total_protein=sum((item.protein for item in items), ZERO),
        food_names=list(dict.fromkeys(item.name for item in items)),
        items=items,
    )
