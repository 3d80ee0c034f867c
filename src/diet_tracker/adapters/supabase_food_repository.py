"""Supabase implementation for foods."""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from supabase import Client

from diet_tracker.adapters.supabase_errors import (
    ForeignKeyViolation,
    UniqueViolation,
    execute,
)
from diet_tracker.domain.errors import (
    FoodInUseError,
    StoreUnavailableError,
    ValidationError,
)
from diet_tracker.domain.foods import Food
from diet_tracker.services.foods import FoodRepository

_COLUMNS = "id, name, standard_portion, calories, protein"


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase-backed repository for foods."""

    client: Client

    def list_foods(self) -> list[Food]:
        """Return all foods ordered by name."""
        response = execute(self.client.table("foods").select(_COLUMNS).order("name"))
        return [_parse_food(row) for row in response.data or []]

    def get_food(self, food_id: UUID) -> Food | None:
        """Return a food by id, if present."""
        response = execute(
            self.client.table("foods")
            .select(_COLUMNS)
            .eq("id", str(food_id))
            .limit(1)
        )
        if not response.data:
            return None
        return _parse_food(response.data[0])

    def get_foods(self, food_ids: list[UUID]) -> list[Food]:
        """Return the foods with the given ids."""
        if not food_ids:
            return []
        response = execute(
            self.client.table("foods")
            .select(_COLUMNS)
            .in_("id", [str(food_id) for food_id in food_ids])
        )
        return [_parse_food(row) for row in response.data or []]

    def find_food_ids_by_name(self, name: str) -> list[UUID]:
        """Return ids of foods whose name equals ``name`` ignoring case."""
        # ilike narrows the candidates; the exact match is decided below.
        response = execute(
            self.client.table("foods")
            .select("id, name")
            .ilike("name", _escape_like(name))
        )
        wanted = name.lower()
        return [
            UUID(row["id"])
            for row in response.data or []
            if str(row.get("name", "")).lower() == wanted
        ]

    def create_food(
        self, name: str, standard_portion: Decimal, calories: Decimal, protein: Decimal
    ) -> Food:
        """Insert a food and return it."""
        try:
            response = execute(
                self.client.table("foods").insert(
                    _payload(name, standard_portion, calories, protein)
                )
            )
        except UniqueViolation as exc:
            raise _duplicate_name(name) from exc
        if not response.data:
            raise StoreUnavailableError("Failed to create food")
        return _parse_food(response.data[0])

    def update_food(
        self,
        food_id: UUID,
        name: str,
        standard_portion: Decimal,
        calories: Decimal,
        protein: Decimal,
    ) -> Food | None:
        """Update a food and return it."""
        try:
            response = execute(
                self.client.table("foods")
                .update(_payload(name, standard_portion, calories, protein))
                .eq("id", str(food_id))
            )
        except UniqueViolation as exc:
            raise _duplicate_name(name) from exc
        if not response.data:
            return None
        return _parse_food(response.data[0])

    def delete_food(self, food_id: UUID) -> None:
        """Delete a food by id."""
        try:
            execute(self.client.table("foods").delete().eq("id", str(food_id)))
        except ForeignKeyViolation as exc:
            raise FoodInUseError(food_id) from exc

    def is_food_referenced(self, food_id: UUID) -> bool:
        """Return whether any meal item uses the food."""
        response = execute(
            self.client.table("meal_items")
            .select("id")
            .eq("food_id", str(food_id))
            .limit(1)
        )
        return bool(response.data)


def _payload(
    name: str, standard_portion: Decimal, calories: Decimal, protein: Decimal
) -> dict[str, str]:
    return {
        "name": name,
        "standard_portion": str(standard_portion),
        "calories": str(calories),
        "protein": str(protein),
    }


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _duplicate_name(name: str) -> ValidationError:
    return ValidationError("name", f"A food named {name!r} already exists.")


def _parse_food(row: dict[str, object]) -> Food:
    """Parse a food row into a domain model."""
    return Food(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        standard_portion=Decimal(str(row["standard_portion"])),
        calories=Decimal(str(row.get("calories", 0))),
        protein=Decimal(str(row.get("protein", 0))),
    )
