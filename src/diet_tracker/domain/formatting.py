"""Display formatting for nutrition values."""

from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction

_DISPLAY_PLACES = Decimal("0.01")


def _display_decimal(value: Decimal | Fraction) -> Decimal:
    """Round an exact value to the two places shown to users."""
    if isinstance(value, Fraction):
        value = Decimal(value.numerator) / Decimal(value.denominator)
    return Decimal(value).quantize(_DISPLAY_PLACES, rounding=ROUND_HALF_UP)


def _plain(value: Decimal | Fraction) -> str:
    text = format(_display_decimal(value), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def grams(value: Decimal | Fraction) -> str:
    """Format a weight, e.g. ``150g``."""
    return f"{_plain(value)}g"


def kcal(value: Decimal | Fraction) -> str:
    """Format an energy value, e.g. ``133.5kcal``."""
    return f"{_plain(value)}kcal"


def protein_label(value: Decimal | Fraction) -> str:
    """Format a protein amount, e.g. ``1.65g Protein``."""
    return f"{grams(value)} Protein"


def food_name_list(names: list[str]) -> str:
    return ", ".join(names)
