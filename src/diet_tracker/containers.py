"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from diet_tracker.adapters.supabase_food_repository import SupabaseFoodRepository
from diet_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from diet_tracker.config import Settings, parse_timezone
from diet_tracker.services.foods import FoodRegistry
from diet_tracker.services.meal_items import MealItemService, MealItemValidator
from diet_tracker.services.meals import MealAggregator


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    food_registry: FoodRegistry
    meal_aggregator: MealAggregator
    meal_item_validator: MealItemValidator
    meal_item_service: MealItemService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    food_repository = SupabaseFoodRepository(supabase_client)
    meal_repository = SupabaseMealRepository(supabase_client)
    food_registry = FoodRegistry(food_repository)
    meal_aggregator = MealAggregator(
        repository=meal_repository,
        food_repository=food_repository,
        timezone=parse_timezone(resolved_settings.timezone),
    )
    validator = MealItemValidator(
        food_registry=food_registry,
        meal_aggregator=meal_aggregator,
    )
    meal_item_service = MealItemService(
        validator=validator,
        meal_aggregator=meal_aggregator,
        repository=meal_repository,
    )
    return AppContainer(
        settings=resolved_settings,
        food_registry=food_registry,
        meal_aggregator=meal_aggregator,
        meal_item_validator=validator,
        meal_item_service=meal_item_service,
    )
