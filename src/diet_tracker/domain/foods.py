"""Domain models for the food registry."""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True)
class Food:
    """A food with nutrition values valid for its standard portion in grams."""

    id: UUID
    name: str
    standard_portion: Decimal
    calories: Decimal
    protein: Decimal
