"""Weight unit conversions."""

from enum import StrEnum

GRAMS_PER_POUND = 453.59237
OUNCES_PER_POUND = 16
GRAMS_PER_OUNCE = GRAMS_PER_POUND / OUNCES_PER_POUND
GRAMS_PER_KILOGRAM = 1000.0


class WeightUnit(StrEnum):
    """Display unit preference for weights."""

    KILOGRAMS = "kilograms"
    POUNDS_OUNCES = "poundsOunces"

    @property
    def label(self) -> str:
        return "kg" if self is WeightUnit.KILOGRAMS else "lb"


def kilograms_to_grams(kilograms: float) -> float:
    """Convert kilograms to grams."""
    return kilograms * GRAMS_PER_KILOGRAM


def pounds_ounces_to_grams(pounds: float, ounces: float = 0) -> float:
    """Convert pounds and ounces to grams."""
    return (pounds + ounces / OUNCES_PER_POUND) * GRAMS_PER_POUND


def grams_to_kilograms(grams: float) -> float:
    """Convert grams to kilograms."""
    return grams / GRAMS_PER_KILOGRAM


def grams_to_pounds(grams: float) -> float:
    """Convert grams to fractional pounds."""
    return grams / GRAMS_PER_POUND


def grams_to_pounds_ounces(grams: float) -> tuple[int, float]:
    """Split grams into whole pounds and remaining ounces."""
    total_ounces = grams / GRAMS_PER_OUNCE
    pounds = int(total_ounces // OUNCES_PER_POUND)
    return pounds, total_ounces - pounds * OUNCES_PER_POUND


def grams_in_unit(grams: float, unit: WeightUnit) -> float:
    """Return the weight expressed in the chart value of the given unit."""
    if unit is WeightUnit.KILOGRAMS:
        return grams_to_kilograms(grams)
    return grams_to_pounds(grams)


def format_weight(grams: float, unit: WeightUnit) -> str:
    """Format a weight for display with two decimals."""
    return f"{grams_in_unit(grams, unit):.2f} {unit.label}"
