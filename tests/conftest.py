"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

import pytest

from diet_tracker.config import Settings
from diet_tracker.containers import AppContainer
from diet_tracker.domain.errors import CollisionError, FoodInUseError, ValidationError
from diet_tracker.domain.foods import Food
from diet_tracker.domain.meals import MealItemRecord, MealRecord
from diet_tracker.services.foods import FoodRegistry, FoodRepository
from diet_tracker.services.meal_items import MealItemService, MealItemValidator
from diet_tracker.services.meals import MealAggregator, MealRepository


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository enforcing the store's meal item constraints."""

    meals: dict[UUID, MealRecord] = field(default_factory=dict)
    items: dict[UUID, MealItemRecord] = field(default_factory=dict)
    cascade: bool = True

    def create_meal(self, memo: str, logged_at: datetime) -> MealRecord:
        meal = MealRecord(id=uuid4(), memo=memo, logged_at=logged_at)
        self.meals[meal.id] = meal
        return meal

    def update_meal(
        self, meal_id: UUID, memo: str, logged_at: datetime
    ) -> MealRecord | None:
        if meal_id not in self.meals:
            return None
        meal = MealRecord(id=meal_id, memo=memo, logged_at=logged_at)
        self.meals[meal_id] = meal
        return meal

    def delete_meal(self, meal_id: UUID) -> None:
        self.meals.pop(meal_id, None)
        if self.cascade:
            self.delete_meal_items(meal_id)

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        return self.meals.get(meal_id)

    def list_meals_logged_between(
        self, start: datetime, end: datetime
    ) -> list[MealRecord]:
        return sorted(
            (meal for meal in self.meals.values() if start <= meal.logged_at < end),
            key=lambda meal: meal.logged_at,
        )

    def list_meal_items(self, meal_ids: list[UUID]) -> list[MealItemRecord]:
        return [item for item in self.items.values() if item.meal_id in meal_ids]

    def get_meal_item(self, meal_item_id: UUID) -> MealItemRecord | None:
        return self.items.get(meal_item_id)

    def find_meal_item_ids(self, meal_id: UUID, food_id: UUID) -> list[UUID]:
        return [
            item.id
            for item in self.items.values()
            if item.meal_id == meal_id and item.food_id == food_id
        ]

    def create_meal_item(
        self, meal_id: UUID, food_id: UUID, serving_size: Decimal
    ) -> MealItemRecord:
        if self.find_meal_item_ids(meal_id, food_id):
            raise CollisionError()
        item = MealItemRecord(
            id=uuid4(), meal_id=meal_id, food_id=food_id, serving_size=serving_size
        )
        self.items[item.id] = item
        return item

    def update_meal_item(
        self, meal_item_id: UUID, food_id: UUID, serving_size: Decimal
    ) -> MealItemRecord | None:
        current = self.items.get(meal_item_id)
        if current is None:
            return None
        others = [
            item_id
            for item_id in self.find_meal_item_ids(current.meal_id, food_id)
            if item_id != meal_item_id
        ]
        if others:
            raise CollisionError()
        updated = MealItemRecord(
            id=current.id,
            meal_id=current.meal_id,
            food_id=food_id,
            serving_size=serving_size,
        )
        self.items[meal_item_id] = updated
        return updated

    def delete_meal_item(self, meal_item_id: UUID) -> None:
        self.items.pop(meal_item_id, None)

    def delete_meal_items(self, meal_id: UUID) -> None:
        for item_id in [i.id for i in self.items.values() if i.meal_id == meal_id]:
            del self.items[item_id]


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """In-memory food repository for tests."""

    meal_repository: InMemoryMealRepository = field(
        default_factory=InMemoryMealRepository
    )
    foods: dict[UUID, Food] = field(default_factory=dict)

    def list_foods(self) -> list[Food]:
        return sorted(self.foods.values(), key=lambda food: food.name)

    def get_food(self, food_id: UUID) -> Food | None:
        return self.foods.get(food_id)

    def get_foods(self, food_ids: list[UUID]) -> list[Food]:
        return [self.foods[food_id] for food_id in food_ids if food_id in self.foods]

    def find_food_ids_by_name(self, name: str) -> list[UUID]:
        return [
            food.id for food in self.foods.values() if food.name.lower() == name.lower()
        ]

    def create_food(
        self, name: str, standard_portion: Decimal, calories: Decimal, protein: Decimal
    ) -> Food:
        if self.find_food_ids_by_name(name):
            raise ValidationError("name", "duplicate")
        food = Food(
            id=uuid4(),
            name=name,
            standard_portion=standard_portion,
            calories=calories,
            protein=protein,
        )
        self.foods[food.id] = food
        return food

    def update_food(
        self,
        food_id: UUID,
        name: str,
        standard_portion: Decimal,
        calories: Decimal,
        protein: Decimal,
    ) -> Food | None:
        if food_id not in self.foods:
            return None
        food = Food(
            id=food_id,
            name=name,
            standard_portion=standard_portion,
            calories=calories,
            protein=protein,
        )
        self.foods[food_id] = food
        return food

    def delete_food(self, food_id: UUID) -> None:
        if self.is_food_referenced(food_id):
            raise FoodInUseError(food_id)
        self.foods.pop(food_id, None)

    def is_food_referenced(self, food_id: UUID) -> bool:
        return any(
            item.food_id == food_id for item in self.meal_repository.items.values()
        )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
    )


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def food_repository(meal_repository: InMemoryMealRepository) -> InMemoryFoodRepository:
    return InMemoryFoodRepository(meal_repository=meal_repository)


@pytest.fixture
def food_registry(food_repository: InMemoryFoodRepository) -> FoodRegistry:
    return FoodRegistry(food_repository)


@pytest.fixture
def meal_aggregator(
    meal_repository: InMemoryMealRepository, food_repository: InMemoryFoodRepository
) -> MealAggregator:
    return MealAggregator(
        repository=meal_repository,
        food_repository=food_repository,
        timezone=ZoneInfo("UTC"),
    )


@pytest.fixture
def validator(
    food_registry: FoodRegistry, meal_aggregator: MealAggregator
) -> MealItemValidator:
    return MealItemValidator(food_registry=food_registry, meal_aggregator=meal_aggregator)


@pytest.fixture
def item_service(
    validator: MealItemValidator,
    meal_aggregator: MealAggregator,
    meal_repository: InMemoryMealRepository,
) -> MealItemService:
    return MealItemService(
        validator=validator,
        meal_aggregator=meal_aggregator,
        repository=meal_repository,
    )


@pytest.fixture
def container(
    settings: Settings,
    food_registry: FoodRegistry,
    meal_aggregator: MealAggregator,
    validator: MealItemValidator,
    item_service: MealItemService,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        food_registry=food_registry,
        meal_aggregator=meal_aggregator,
        meal_item_validator=validator,
        meal_item_service=item_service,
    )
