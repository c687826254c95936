"""Domain models for user preferences."""

from dataclasses import dataclass

from feedbridge.domain.units import WeightUnit


@dataclass(frozen=True)
class Preferences:
    """Per-user display and selection preferences."""

    selected_baby_id: str | None = None
    weight_unit: WeightUnit = WeightUnit.KILOGRAMS
    timezone: str = "UTC"
