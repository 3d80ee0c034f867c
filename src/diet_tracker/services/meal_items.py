"""Validation and write paths for meal items."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from diet_tracker.domain.errors import CollisionError, NotFoundError, ValidationError
from diet_tracker.domain.meals import Meal
from diet_tracker.services.foods import (
    MAX_NUTRITION_VALUE,
    FoodRegistry,
    to_store_amount,
)
from diet_tracker.services.meals import MealAggregator, MealRepository

_logger = logging.getLogger(__name__)


@dataclass
class MealItemValidator:
    """Checks meal item writes against the meal/food graph.

    Rules run in a fixed order and the first failure is returned, so a bad
    serving size is reported before a collision or a missing meal or food.
    """

    food_registry: FoodRegistry
    meal_aggregator: MealAggregator

    def validate_for_insert(
        self, meal_id: UUID, food_id: UUID, serving_size: object
    ) -> ValidationError | None:
        """Return the first failing rule for a new item, or None."""
        error = _check_serving_size(serving_size)
        if error:
            return error
        if not self.is_unique(None, meal_id, food_id):
            return CollisionError()
        if not self.meal_aggregator.meal_exists(meal_id):
            return ValidationError("meal_id", "The selected meal does not exist.")
        if not self.food_registry.food_exists(food_id):
            return ValidationError("food_id", "The selected food does not exist.")
        return None

    def validate_for_update(
        self,
        item_id: UUID,
        meal_id: UUID,
        new_food_id: UUID,
        new_serving_size: object,
    ) -> ValidationError | None:
        """Return the first failing rule for changing an item, or None."""
        error = _check_serving_size(new_serving_size)
        if error:
            return error
        if not self.is_unique(item_id, meal_id, new_food_id):
            return CollisionError()
        if not self.food_registry.food_exists(new_food_id):
            return ValidationError("food_id", "The selected food does not exist.")
        return None

    def is_unique(self, excluding_id: UUID | None, meal_id: UUID, food_id: UUID) -> bool:
        """Return whether no other item links this food to this meal."""
        matches = self.meal_aggregator.find_meal_item_ids(meal_id, food_id)
        if excluding_id is None:
            return not matches
        return all(item_id == excluding_id for item_id in matches)


@dataclass
class MealItemService:
    """Validates meal item changes, writes them and returns the reloaded meal."""

    validator: MealItemValidator
    meal_aggregator: MealAggregator
    repository: MealRepository

    def add_item(self, meal_id: UUID, food_id: UUID, serving_size: object) -> Meal:
        """Add a food to a meal."""
        error = self.validator.validate_for_insert(meal_id, food_id, serving_size)
        if error:
            raise error
        item = self.repository.create_meal_item(
            meal_id, food_id, _as_decimal(serving_size)
        )
        _logger.info("Added meal item: id=%s meal=%s food=%s", item.id, meal_id, food_id)
        return self.meal_aggregator.load_meal_with_totals(meal_id)

    def update_item(
        self, meal_id: UUID, item_id: UUID, food_id: UUID, serving_size: object
    ) -> Meal:
        """Change the food or serving size of a meal item."""
        self._require_item(meal_id, item_id)
        error = self.validator.validate_for_update(
            item_id, meal_id, food_id, serving_size
        )
        if error:
            raise error
        updated = self.repository.update_meal_item(
            item_id, food_id, _as_decimal(serving_size)
        )
        if updated is None:
            raise NotFoundError("MealItem", item_id)
        _logger.info("Updated meal item: id=%s meal=%s", item_id, meal_id)
        return self.meal_aggregator.load_meal_with_totals(meal_id)

    def remove_item(self, meal_id: UUID, item_id: UUID) -> Meal:
        """Remove an item from a meal; removing a missing item is not an error."""
        item = self.repository.get_meal_item(item_id)
        if item is not None:
            if item.meal_id != meal_id:
                raise NotFoundError("MealItem", item_id)
            self.repository.delete_meal_item(item_id)
            _logger.info("Removed meal item: id=%s meal=%s", item_id, meal_id)
        return self.meal_aggregator.load_meal_with_totals(meal_id)

    def _require_item(self, meal_id: UUID, item_id: UUID) -> None:
        item = self.repository.get_meal_item(item_id)
        if item is None or item.meal_id != meal_id:
            raise NotFoundError("MealItem", item_id)


def _check_serving_size(value: object) -> ValidationError | None:
    if to_store_amount(value) is None:
        return _serving_size_error()
    return None


def _as_decimal(value: object) -> Decimal:
    amount = to_store_amount(value)
    if amount is None:
        raise _serving_size_error()
    return amount


def _serving_size_error() -> ValidationError:
    return ValidationError(
        "serving_size",
        f"Serving size must be greater than 0 and at most {MAX_NUTRITION_VALUE}, "
        "with at most 2 decimal places.",
    )
