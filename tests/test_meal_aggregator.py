"""Tests for the meal aggregator."""

from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from fractions import Fraction
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest

from diet_tracker.domain.errors import InconsistencyError, NotFoundError, ValidationError
from diet_tracker.domain.nutrition import adjust
from diet_tracker.services.foods import FoodRegistry
from diet_tracker.services.meals import MealAggregator
from tests.conftest import InMemoryFoodRepository, InMemoryMealRepository

BREAKFAST_AT = datetime(2026, 10, 19, 8, 30, tzinfo=UTC)


def test_create_meal_returns_empty_totals(meal_aggregator: MealAggregator) -> None:
    meal = meal_aggregator.create_meal("  Breakfast ", BREAKFAST_AT)

    assert meal.memo == "Breakfast"
    assert meal.total_calories == 0
    assert meal.total_protein == 0
    assert meal.food_names == []
    assert meal.items == []


@pytest.mark.parametrize("memo", ["", "   ", None])
def test_create_meal_rejects_blank_memo(meal_aggregator: MealAggregator, memo) -> None:
    with pytest.raises(ValidationError) as exc_info:
        meal_aggregator.create_meal(memo, BREAKFAST_AT)

    assert exc_info.value.field == "memo"


def test_create_meal_requires_logged_at(meal_aggregator: MealAggregator) -> None:
    with pytest.raises(ValidationError) as exc_info:
        meal_aggregator.create_meal("Lunch", None)

    assert exc_info.value.field == "logged_at"


def test_create_meal_localizes_naive_time(
    meal_repository: InMemoryMealRepository, food_repository: InMemoryFoodRepository
) -> None:
    tz = ZoneInfo("Europe/Berlin")
    aggregator = MealAggregator(meal_repository, food_repository, timezone=tz)

    meal = aggregator.create_meal("Dinner", datetime(2026, 10, 19, 19, 0))

    assert meal.logged_at.tzinfo == tz


def test_empty_meal_has_zero_totals(meal_aggregator: MealAggregator) -> None:
    created = meal_aggregator.create_meal("Snack", BREAKFAST_AT)

    meal = meal_aggregator.load_meal_with_totals(created.id)

    assert meal.total_calories == Fraction("0")
    assert meal.total_protein == Fraction("0")
    assert meal.food_names == []


def test_totals_sum_adjusted_items(
    meal_aggregator: MealAggregator,
    food_registry: FoodRegistry,
    meal_repository: InMemoryMealRepository,
) -> None:
    banana = food_registry.create_food("Banana", "100", "89", "1.1")
    oats = food_registry.create_food("Oats", "40", "150", "5.3")
    created = meal_aggregator.create_meal("Breakfast", BREAKFAST_AT)
    meal_repository.create_meal_item(created.id, banana.id, Decimal("150"))
    meal_repository.create_meal_item(created.id, oats.id, Decimal("60"))

    meal = meal_aggregator.load_meal_with_totals(created.id)

    expected_calories = adjust(banana.calories, Decimal("150"), banana.standard_portion)
    expected_calories += adjust(oats.calories, Decimal("60"), oats.standard_portion)
    expected_protein = adjust(banana.protein, Decimal("150"), banana.standard_portion)
    expected_protein += adjust(oats.protein, Decimal("60"), oats.standard_portion)
    assert meal.total_calories == expected_calories == Fraction("358.5")
    assert meal.total_protein == expected_protein
    assert meal.food_names == ["Banana", "Oats"]
    assert [item.name for item in meal.items] == ["Banana", "Oats"]


def test_totals_follow_current_food_values(
    meal_aggregator: MealAggregator,
    food_registry: FoodRegistry,
    meal_repository: InMemoryMealRepository,
) -> None:
    banana = food_registry.create_food("Banana", "100", "89", "1.1")
    created = meal_aggregator.create_meal("Breakfast", BREAKFAST_AT)
    meal_repository.create_meal_item(created.id, banana.id, Decimal("200"))

    food_registry.update_food(banana.id, "Banana", "100", "100", "1")
    meal = meal_aggregator.load_meal_with_totals(created.id)

    assert meal.total_calories == Fraction("200")
    assert meal.total_protein == Fraction("2")


def test_load_meal_items_keeps_insertion_order(
    meal_aggregator: MealAggregator,
    food_registry: FoodRegistry,
    meal_repository: InMemoryMealRepository,
) -> None:
    zucchini = food_registry.create_food("Zucchini", "100", "17", "1.2")
    apple = food_registry.create_food("Apple", "100", "52", "0.3")
    created = meal_aggregator.create_meal("Lunch", BREAKFAST_AT)
    meal_repository.create_meal_item(created.id, zucchini.id, Decimal("300"))
    meal_repository.create_meal_item(created.id, apple.id, Decimal("50"))

    items = meal_aggregator.load_meal_items(created.id)

    assert [item.name for item in items] == ["Zucchini", "Apple"]
    assert items[0].calories == Fraction("51")
    assert items[1].serving_size == Decimal("50")


def test_load_missing_meal_raises_not_found(meal_aggregator: MealAggregator) -> None:
    with pytest.raises(NotFoundError):
        meal_aggregator.load_meal_with_totals(uuid4())
    with pytest.raises(NotFoundError):
        meal_aggregator.load_meal_items(uuid4())


def test_dangling_food_reference_is_inconsistency(
    meal_aggregator: MealAggregator,
    food_repository: InMemoryFoodRepository,
    meal_repository: InMemoryMealRepository,
) -> None:
    created = meal_aggregator.create_meal("Breakfast", BREAKFAST_AT)
    meal_repository.create_meal_item(created.id, uuid4(), Decimal("100"))

    with pytest.raises(InconsistencyError):
        meal_aggregator.load_meal_with_totals(created.id)


def test_load_meals_for_date_uses_calendar_day(
    meal_repository: InMemoryMealRepository, food_repository: InMemoryFoodRepository
) -> None:
    tz = ZoneInfo("America/New_York")
    aggregator = MealAggregator(meal_repository, food_repository, timezone=tz)
    late = aggregator.create_meal("Late snack", datetime(2026, 10, 19, 23, 30, tzinfo=tz))
    early = aggregator.create_meal("Breakfast", datetime(2026, 10, 19, 0, 0, tzinfo=tz))
    aggregator.create_meal("Next day", datetime(2026, 10, 20, 0, 0, tzinfo=tz))
    aggregator.create_meal("Day before", datetime(2026, 10, 18, 23, 59, tzinfo=tz))

    meals = aggregator.load_meals_for_date(date(2026, 10, 19))

    assert [meal.id for meal in meals] == [early.id, late.id]


def test_summarize_day_sums_meals(
    meal_aggregator: MealAggregator,
    food_registry: FoodRegistry,
    meal_repository: InMemoryMealRepository,
) -> None:
    banana = food_registry.create_food("Banana", "100", "89", "1.1")
    breakfast = meal_aggregator.create_meal("Breakfast", BREAKFAST_AT)
    lunch = meal_aggregator.create_meal("Lunch", BREAKFAST_AT + timedelta(hours=4))
    meal_aggregator.create_meal("Empty", BREAKFAST_AT + timedelta(hours=6))
    meal_repository.create_meal_item(breakfast.id, banana.id, Decimal("150"))
    meal_repository.create_meal_item(lunch.id, banana.id, Decimal("100"))

    summary = meal_aggregator.summarize_day(BREAKFAST_AT.date())

    assert len(summary.meals) == 3
    assert summary.total_calories == Fraction("222.5")
    assert summary.total_protein == Fraction("2.75")


def test_update_meal_validates_then_checks_existence(
    meal_aggregator: MealAggregator,
) -> None:
    with pytest.raises(ValidationError):
        meal_aggregator.update_meal(uuid4(), "", BREAKFAST_AT)
    with pytest.raises(NotFoundError):
        meal_aggregator.update_meal(uuid4(), "Brunch", BREAKFAST_AT)


def test_update_meal_returns_updated_meal(meal_aggregator: MealAggregator) -> None:
    created = meal_aggregator.create_meal("Breakfast", BREAKFAST_AT)
    later = BREAKFAST_AT + timedelta(hours=2)

    meal = meal_aggregator.update_meal(created.id, "Brunch", later)

    assert meal.memo == "Brunch"
    assert meal.logged_at == later


def test_delete_meal_cascades_and_is_idempotent(
    meal_aggregator: MealAggregator,
    food_registry: FoodRegistry,
    meal_repository: InMemoryMealRepository,
) -> None:
    banana = food_registry.create_food("Banana", "100", "89", "1.1")
    created = meal_aggregator.create_meal("Breakfast", BREAKFAST_AT)
    meal_repository.create_meal_item(created.id, banana.id, Decimal("150"))

    meal_aggregator.delete_meal(created.id)
    meal_aggregator.delete_meal(created.id)

    assert not meal_aggregator.meal_exists(created.id)
    assert meal_repository.items == {}


def test_delete_meal_removes_orphans_without_store_cascade(
    meal_aggregator: MealAggregator,
    food_registry: FoodRegistry,
    meal_repository: InMemoryMealRepository,
) -> None:
    meal_repository.cascade = False
    banana = food_registry.create_food("Banana", "100", "89", "1.1")
    created = meal_aggregator.create_meal("Breakfast", BREAKFAST_AT)
    meal_repository.create_meal_item(created.id, banana.id, Decimal("150"))

    meal_aggregator.delete_meal(created.id)

    assert meal_repository.items == {}
