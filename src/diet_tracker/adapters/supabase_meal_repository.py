"""Supabase repository for meals and meal items."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from supabase import Client

from diet_tracker.adapters.supabase_errors import UniqueViolation, execute
from diet_tracker.domain.errors import CollisionError, StoreUnavailableError
from diet_tracker.domain.meals import MealItemRecord, MealRecord
from diet_tracker.services.meals import MealRepository

_MEAL_COLUMNS = "id, memo, logged_at"
_ITEM_COLUMNS = "id, meal_id, food_id, serving_size"


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals."""

    client: Client

    def create_meal(self, memo: str, logged_at: datetime) -> MealRecord:
        """Insert a meal row."""
        response = execute(
            self.client.table("meals").insert(
                {"memo": memo, "logged_at": logged_at.isoformat()}
            )
        )
        if not response.data:
            raise StoreUnavailableError("Failed to create meal")
        return _parse_meal(response.data[0])

    def update_meal(
        self, meal_id: UUID, memo: str, logged_at: datetime
    ) -> MealRecord | None:
        """Update a meal row."""
        response = execute(
            self.client.table("meals")
            .update({"memo": memo, "logged_at": logged_at.isoformat()})
            .eq("id", str(meal_id))
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal row; items cascade in the store."""
        execute(self.client.table("meals").delete().eq("id", str(meal_id)))

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        """Return a meal row by id."""
        response = execute(
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("id", str(meal_id))
            .limit(1)
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def list_meals_logged_between(
        self, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals logged in the half-open range."""
        response = execute(
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=False)
            .order("id", desc=False)
        )
        return [_parse_meal(row) for row in response.data or []]

    def list_meal_items(self, meal_ids: list[UUID]) -> list[MealItemRecord]:
        """Return items of the given meals in insertion order."""
        if not meal_ids:
            return []
        response = execute(
            self.client.table("meal_items")
            .select(_ITEM_COLUMNS)
            .in_("meal_id", [str(meal_id) for meal_id in meal_ids])
            .order("created_at", desc=False)
            .order("id", desc=False)
        )
        return [_parse_item(row) for row in response.data or []]

    def get_meal_item(self, meal_item_id: UUID) -> MealItemRecord | None:
        """Return a meal item by id."""
        response = execute(
            self.client.table("meal_items")
            .select(_ITEM_COLUMNS)
            .eq("id", str(meal_item_id))
            .limit(1)
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def find_meal_item_ids(self, meal_id: UUID, food_id: UUID) -> list[UUID]:
        """Return ids of items pairing the meal with the food."""
        response = execute(
            self.client.table("meal_items")
            .select("id")
            .eq("meal_id", str(meal_id))
            .eq("food_id", str(food_id))
        )
        return [UUID(str(row["id"])) for row in response.data or []]

    def create_meal_item(
        self, meal_id: UUID, food_id: UUID, serving_size: Decimal
    ) -> MealItemRecord:
        """Insert a meal item row."""
        try:
            response = execute(
                self.client.table("meal_items").insert(
                    {
                        "meal_id": str(meal_id),
                        "food_id": str(food_id),
                        "serving_size": str(serving_size),
                    }
                )
            )
        except UniqueViolation as exc:
            raise CollisionError() from exc
        if not response.data:
            raise StoreUnavailableError("Failed to create meal item")
        return _parse_item(response.data[0])

    def update_meal_item(
        self, meal_item_id: UUID, food_id: UUID, serving_size: Decimal
    ) -> MealItemRecord | None:
        """Update a meal item row."""
        try:
            response = execute(
                self.client.table("meal_items")
                .update({"food_id": str(food_id), "serving_size": str(serving_size)})
                .eq("id", str(meal_item_id))
            )
        except UniqueViolation as exc:
            raise CollisionError() from exc
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def delete_meal_item(self, meal_item_id: UUID) -> None:
        """Delete a meal item row."""
        execute(self.client.table("meal_items").delete().eq("id", str(meal_item_id)))

    def delete_meal_items(self, meal_id: UUID) -> None:
        """Delete every item row of a meal."""
        execute(self.client.table("meal_items").delete().eq("meal_id", str(meal_id)))


def _parse_meal(row: dict[str, object]) -> MealRecord:
    return MealRecord(
        id=UUID(str(row["id"])),
        memo=str(row.get("memo", "")),
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
    )


def _parse_item(row: dict[str, object]) -> MealItemRecord:
    return MealItemRecord(
        id=UUID(str(row["id"])),
        meal_id=UUID(str(row["meal_id"])),
        food_id=UUID(str(row["food_id"])),
        serving_size=Decimal(str(row["serving_size"])),
    )
