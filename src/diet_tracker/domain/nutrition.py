"""Portion adjustment for nutrient values."""

from decimal import Decimal
from fractions import Fraction

from diet_tracker.domain.errors import InvalidArgumentError

ZERO = Fraction(0)


def adjust(
    nutrient_value: Decimal,
    requested_serving_size: Decimal,
    standard_portion: Decimal,
) -> Fraction:
    """Scale a nutrient value from the standard portion to the requested serving.

    The result is an exact fraction, so it is linear in the serving size and
    sums of adjusted values carry no rounding error. Rounding is left to
    presentation.
    """
    if standard_portion <= 0:
        raise InvalidArgumentError(
            f"standard_portion must be positive, got {standard_portion}"
        )
    if requested_serving_size < 0:
        raise InvalidArgumentError(
            f"requested_serving_size must not be negative, got {requested_serving_size}"
        )
    if requested_serving_size == 0:
        return ZERO
    return (
        Fraction(nutrient_value)
        * Fraction(requested_serving_size)
        / Fraction(standard_portion)
    )
