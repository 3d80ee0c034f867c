"""Domain errors raised by the diet tracker services."""

from uuid import UUID

COLLISION_MESSAGE = "You can't add the same food twice to the same meal."


class DietTrackerError(Exception):
    """Base class for diet tracker errors."""


class InvalidArgumentError(DietTrackerError, ValueError):
    """Raised when a function is called with arguments it cannot accept."""


class ValidationError(DietTrackerError):
    """User input failed validation for a specific field."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class CollisionError(ValidationError):
    """A food is linked twice to the same meal."""

    def __init__(self) -> None:
        super().__init__("food_id", COLLISION_MESSAGE)


class FoodInUseError(ValidationError):
    """A food cannot be deleted while meal items reference it."""

    def __init__(self, food_id: UUID) -> None:
        super().__init__(
            "food_id", "This food is used by existing meals and can't be deleted."
        )
        self.food_id = food_id


class NotFoundError(DietTrackerError):
    """An entity id did not resolve."""

    def __init__(self, entity: str, entity_id: UUID) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InconsistencyError(DietTrackerError):
    """Stored rows reference something that no longer exists."""


class StoreUnavailableError(DietTrackerError):
    """The backing store could not be reached or queried."""
