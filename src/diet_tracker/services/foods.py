"""Food registry service."""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Protocol
from uuid import UUID

from diet_tracker.domain.errors import FoodInUseError, NotFoundError, ValidationError
from diet_tracker.domain.foods import Food

MAX_NUTRITION_VALUE = Decimal("99999999.99")
STORE_PLACES = Decimal("0.01")

_logger = logging.getLogger(__name__)


class FoodRepository(Protocol):
    """Persistence interface for foods."""

    def list_foods(self) -> list[Food]:
        """Return all foods ordered by name."""

    def get_food(self, food_id: UUID) -> Food | None:
        """Return a food by id, if present."""

    def get_foods(self, food_ids: list[UUID]) -> list[Food]:
        """Return the foods with the given ids that exist."""

    def find_food_ids_by_name(self, name: str) -> list[UUID]:
        """Return ids of foods whose name matches ignoring case."""

    def create_food(
        self, name: str, standard_portion: Decimal, calories: Decimal, protein: Decimal
    ) -> Food:
        """Insert a food and return the stored row."""

    def update_food(
        self,
        food_id: UUID,
        name: str,
        standard_portion: Decimal,
        calories: Decimal,
        protein: Decimal,
    ) -> Food | None:
        """Update a food and return the stored row, or None if it is gone."""

    def delete_food(self, food_id: UUID) -> None:
        """Delete a food by id."""

    def is_food_referenced(self, food_id: UUID) -> bool:
        """Return whether any meal item references the food."""


@dataclass
class FoodRegistry:
    """Application service for food CRUD and name uniqueness."""

    repository: FoodRepository

    def list_foods(self) -> list[Food]:
        """Return all foods."""
        return self.repository.list_foods()

    def get_food(self, food_id: UUID) -> Food:
        """Return a food or raise NotFoundError."""
        food = self.repository.get_food(food_id)
        if food is None:
            raise NotFoundError("Food", food_id)
        return food

    def food_exists(self, food_id: UUID) -> bool:
        return self.repository.get_food(food_id) is not None

    def is_name_unique(self, name: str, excluding_id: UUID | None = None) -> bool:
        """Return whether no other food uses this name, ignoring case."""
        matches = self.repository.find_food_ids_by_name(name.strip())
        if excluding_id is None:
            return not matches
        return all(food_id == excluding_id for food_id in matches)

    def create_food(
        self,
        name: str | None,
        standard_portion: object,
        calories: object,
        protein: object,
    ) -> Food:
        """Validate and insert a new food."""
        clean_name, values = self._validate(
            name, standard_portion, calories, protein, excluding_id=None
        )
        food = self.repository.create_food(clean_name, *values)
        _logger.info("Created food: id=%s name=%s", food.id, food.name)
        return food

    def update_food(
        self,
        food_id: UUID,
        name: str | None,
        standard_portion: object,
        calories: object,
        protein: object,
    ) -> Food:
        """Validate and update an existing food."""
        clean_name, values = self._validate(
            name, standard_portion, calories, protein, excluding_id=food_id
        )
        food = self.repository.update_food(food_id, clean_name, *values)
        if food is None:
            raise NotFoundError("Food", food_id)
        _logger.info("Updated food: id=%s name=%s", food.id, food.name)
        return food

    def delete_food(self, food_id: UUID) -> None:
        """Delete a food unless meal items still reference it."""
        if self.repository.is_food_referenced(food_id):
            raise FoodInUseError(food_id)
        self.repository.delete_food(food_id)
        _logger.info("Deleted food: id=%s", food_id)

    def _validate(
        self,
        name: str | None,
        standard_portion: object,
        calories: object,
        protein: object,
        *,
        excluding_id: UUID | None,
    ) -> tuple[str, tuple[Decimal, Decimal, Decimal]]:
        clean_name = (name or "").strip()
        if not clean_name:
            raise ValidationError("name", "Food name must not be empty.")
        if not self.is_name_unique(clean_name, excluding_id=excluding_id):
            raise ValidationError("name", f"A food named {clean_name!r} already exists.")
        values = (
            _validate_amount("standard_portion", "Standard portion", standard_portion),
            _validate_amount("calories", "Calories", calories),
            _validate_amount("protein", "Protein", protein),
        )
        return clean_name, values


def _validate_amount(field: str, label: str, value: object) -> Decimal:
    amount = to_store_amount(value)
    if amount is None:
        raise ValidationError(
            field,
            f"{label} must be greater than 0 and at most {MAX_NUTRITION_VALUE}, "
            "with at most 2 decimal places.",
        )
    return amount


def to_store_amount(value: object) -> Decimal | None:
    """Return the input as a stored amount, or None when it cannot be stored.

    Stored amounts are strictly positive, at most MAX_NUTRITION_VALUE and have
    no more than two decimal places.
    """
    amount = _to_decimal(value)
    if amount is None or not amount.is_finite():
        return None
    if amount <= 0 or amount > MAX_NUTRITION_VALUE:
        return None
    stored = amount.quantize(STORE_PLACES)
    if stored != amount:
        return None
    return stored


def _to_decimal(value: object) -> Decimal | None:
    """Convert user input to a Decimal, returning None when it is not a number."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int | float | str):
        try:
            return Decimal(str(value).strip())
        except InvalidOperation:
            return None
    return None
