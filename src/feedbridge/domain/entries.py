"""Domain models for baby health entries."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import StrEnum
from typing import Self

from feedbridge.domain.units import (
    OUNCES_PER_POUND,
    grams_to_kilograms,
    grams_to_pounds,
    grams_to_pounds_ounces,
    kilograms_to_grams,
    pounds_ounces_to_grams,
)


def _now() -> datetime:
    return datetime.now(tz=UTC)


class EntryKind(StrEnum):
    """Entry sub-collections owned by a baby, keyed by collection name."""

    FEED = "feedEntries"
    WEIGHT = "weightEntries"
    STOOL = "stoolEntries"
    WET_DIAPER = "wetDiaperEntries"
    DEHYDRATION_CHECK = "dehydrationChecks"


class FeedType(StrEnum):
    DIRECT_BREASTFEEDING = "directBreastfeeding"
    BOTTLE = "bottle"


class MilkType(StrEnum):
    BREASTMILK = "breastmilk"
    FORMULA = "formula"


class StoolVolume(StrEnum):
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


class StoolColor(StrEnum):
    BLACK = "black"
    DARK_GREEN = "darkGreen"
    GREEN = "green"
    BROWN = "brown"
    YELLOW = "yellow"
    BEIGE = "beige"


class DiaperVolume(StrEnum):
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


class WetDiaperColor(StrEnum):
    YELLOW = "yellow"
    PINK = "pink"
    RED_TINGED = "redTinged"


@dataclass(frozen=True)
class Breastfeeding:
    """Direct breastfeeding payload."""

    minutes: int

    def __post_init__(self) -> None:
        if self.minutes < 0:
            raise ValueError("Feed duration must be non-negative")


@dataclass(frozen=True)
class BottleFeed:
    """Bottle feeding payload."""

    volume_ml: float
    milk_type: MilkType

    def __post_init__(self) -> None:
        if self.volume_ml < 0:
            raise ValueError("Feed volume must be non-negative")
        object.__setattr__(self, "milk_type", MilkType(self.milk_type))


FeedPayload = Breastfeeding | BottleFeed


@dataclass(frozen=True)
class FeedEntry:
    """A single feed, either at the breast or from a bottle."""

    payload: FeedPayload
    date_time: datetime = field(default_factory=_now)
    id: str | None = None

    @classmethod
    def breastfeeding(cls, minutes: int, date_time: datetime | None = None) -> Self:
        return cls(payload=Breastfeeding(minutes), date_time=date_time or _now())

    @classmethod
    def bottle(
        cls,
        volume_ml: float,
        milk_type: MilkType,
        date_time: datetime | None = None,
    ) -> Self:
        return cls(
            payload=BottleFeed(volume_ml, milk_type),
            date_time=date_time or _now(),
        )

    @property
    def feed_type(self) -> FeedType:
        if isinstance(self.payload, Breastfeeding):
            return FeedType.DIRECT_BREASTFEEDING
        return FeedType.BOTTLE

    def with_id(self, entry_id: str) -> Self:
        return replace(self, id=entry_id)


@dataclass(frozen=True)
class WeightEntry:
    """Weight measurement stored canonically in grams.

    Every construction path keeps the exact gram value; rounding happens only
    when a weight is formatted for display.
    """

    grams: float
    date_time: datetime = field(default_factory=_now)
    id: str | None = None

    def __post_init__(self) -> None:
        if self.grams < 0:
            raise ValueError("Weight must be non-negative")

    @classmethod
    def from_grams(cls, grams: float, date_time: datetime | None = None) -> Self:
        return cls(grams=grams, date_time=date_time or _now())

    @classmethod
    def from_kilograms(
        cls, kilograms: float, date_time: datetime | None = None
    ) -> Self:
        return cls(
            grams=kilograms_to_grams(kilograms), date_time=date_time or _now()
        )

    @classmethod
    def from_pounds_ounces(
        cls, pounds: int, ounces: float = 0, date_time: datetime | None = None
    ) -> Self:
        if not 0 <= ounces < OUNCES_PER_POUND:
            raise ValueError("Ounces must be between 0 and 16")
        return cls(
            grams=pounds_ounces_to_grams(pounds, ounces),
            date_time=date_time or _now(),
        )

    @property
    def kilograms(self) -> float:
        return grams_to_kilograms(self.grams)

    @property
    def pounds(self) -> float:
        return grams_to_pounds(self.grams)

    @property
    def pounds_ounces(self) -> tuple[int, float]:
        return grams_to_pounds_ounces(self.grams)

    def with_id(self, entry_id: str) -> Self:
        return replace(self, id=entry_id)


@dataclass(frozen=True)
class StoolEntry:
    """Stool observation."""

    volume: StoolVolume
    color: StoolColor
    date_time: datetime = field(default_factory=_now)
    id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "volume", StoolVolume(self.volume))
        object.__setattr__(self, "color", StoolColor(self.color))

    @property
    def medical_alert(self) -> bool:
        return self.color == StoolColor.BEIGE

    def with_id(self, entry_id: str) -> Self:
        return replace(self, id=entry_id)


@dataclass(frozen=True)
class WetDiaperEntry:
    """Wet diaper observation."""

    volume: DiaperVolume
    color: WetDiaperColor
    date_time: datetime = field(default_factory=_now)
    id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "volume", DiaperVolume(self.volume))
        object.__setattr__(self, "color", WetDiaperColor(self.color))

    @property
    def dehydration_alert(self) -> bool:
        return self.color in {WetDiaperColor.PINK, WetDiaperColor.RED_TINGED}

    def with_id(self, entry_id: str) -> Self:
        return replace(self, id=entry_id)


@dataclass(frozen=True)
class DehydrationCheck:
    """Physical dehydration symptom check."""

    poor_skin_elasticity: bool
    dry_mucous_membranes: bool
    date_time: datetime = field(default_factory=_now)
    id: str | None = None

    @property
    def dehydration_alert(self) -> bool:
        return self.poor_skin_elasticity or self.dry_mucous_membranes

    def with_id(self, entry_id: str) -> Self:
        return replace(self, id=entry_id)


Entry = FeedEntry | WeightEntry | StoolEntry | WetDiaperEntry | DehydrationCheck

ENTRY_TYPES: dict[EntryKind, type] = {
    EntryKind.FEED: FeedEntry,
    EntryKind.WEIGHT: WeightEntry,
    EntryKind.STOOL: StoolEntry,
    EntryKind.WET_DIAPER: WetDiaperEntry,
    EntryKind.DEHYDRATION_CHECK: DehydrationCheck,
}


def kind_of(entry: Entry) -> EntryKind:
    """Return the sub-collection an entry belongs to."""
    for kind, entry_type in ENTRY_TYPES.items():
        if isinstance(entry, entry_type):
            return kind
    raise TypeError(f"Unsupported entry type: {type(entry).__name__}")
