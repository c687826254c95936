"""Chart aggregation over time-stamped entries."""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from enum import StrEnum
from typing import Generic, Protocol, TypeVar

from feedbridge.domain.entries import (
    Breastfeeding,
    DehydrationCheck,
    DiaperVolume,
    FeedEntry,
    StoolVolume,
    WeightEntry,
    WetDiaperEntry,
)
from feedbridge.domain.units import WeightUnit, grams_in_unit

DEFAULT_WINDOW_DAYS = 7
ALERT_WINDOW_DAYS = 5

# Bubble areas per tier: (full chart, mini chart).
_BUBBLE_SIZES = ((100.0, 30.0), (300.0, 60.0), (650.0, 100.0))
_BREASTFEEDING_TIERS_MINUTES = (10, 20)
_BOTTLE_TIERS_ML = (10, 30)
_VOLUME_TIERS = {"light": 0, "medium": 1, "heavy": 2}


class TimestampedEntry(Protocol):
    date_time: datetime


EntryT = TypeVar("EntryT", bound=TimestampedEntry)


@dataclass(frozen=True)
class IndexedEntry(Generic[EntryT]):
    """Entry with its 1-based position within its calendar day."""

    entry: EntryT
    day: date
    index: int


@dataclass(frozen=True)
class DailyAverage:
    """Average value for one calendar day."""

    day: date
    value: float


class AlertStatus(StrEnum):
    NO_DATA = "no_data"
    NO_ALERT = "no_alert"
    ALERT = "alert"


@dataclass(frozen=True)
class DayAlert:
    """Alert state of one calendar day."""

    day: date
    status: AlertStatus


def local_day(value: datetime, tz: tzinfo | None = None) -> date:
    """Return the calendar day of a timestamp in the given timezone."""
    if tz is not None and value.tzinfo is not None:
        return value.astimezone(tz).date()
    return value.date()


def trailing_days(today: date, count: int = DEFAULT_WINDOW_DAYS) -> list[date]:
    """Return ``count`` consecutive days ending with ``today``."""
    start = today - timedelta(days=count - 1)
    return [start + timedelta(days=offset) for offset in range(count)]


def within_days(
    entries: Iterable[EntryT], days: Sequence[date], tz: tzinfo | None = None
) -> list[EntryT]:
    """Keep entries whose calendar day falls inside ``days``."""
    allowed = set(days)
    return [entry for entry in entries if local_day(entry.date_time, tz) in allowed]


def index_entries_per_day(
    entries: Iterable[EntryT], tz: tzinfo | None = None
) -> list[IndexedEntry[EntryT]]:
    """Sort entries by time and number them within each calendar day."""
    indexed: list[IndexedEntry[EntryT]] = []
    counters: dict[date, int] = {}
    for entry in sorted(entries, key=lambda item: item.date_time):
        day = local_day(entry.date_time, tz)
        counters[day] = counters.get(day, 0) + 1
        indexed.append(IndexedEntry(entry=entry, day=day, index=counters[day]))
    return indexed


def average_weights_per_day(
    entries: Iterable[WeightEntry],
    unit: WeightUnit = WeightUnit.KILOGRAMS,
    tz: tzinfo | None = None,
) -> list[DailyAverage]:
    """Average weights in the selected unit per calendar day."""
    grouped: dict[date, list[float]] = {}
    for entry in entries:
        day = local_day(entry.date_time, tz)
        grouped.setdefault(day, []).append(grams_in_unit(entry.grams, unit))
    return [
        DailyAverage(day=day, value=sum(values) / len(values))
        for day, values in sorted(grouped.items())
    ]


def alert_grid(
    entries: Iterable[EntryT],
    is_alert: Callable[[EntryT], bool],
    today: date,
    days: int = ALERT_WINDOW_DAYS,
    tz: tzinfo | None = None,
) -> list[DayAlert]:
    """Classify each trailing day as no data, no alert or alert."""
    window = trailing_days(today, days)
    seen: dict[date, bool] = {}
    for entry in within_days(entries, window, tz):
        day = local_day(entry.date_time, tz)
        seen[day] = seen.get(day, False) or is_alert(entry)
    grid = []
    for day in window:
        if day not in seen:
            status = AlertStatus.NO_DATA
        elif seen[day]:
            status = AlertStatus.ALERT
        else:
            status = AlertStatus.NO_ALERT
        grid.append(DayAlert(day=day, status=status))
    return grid


def dehydration_alert_grid(
    checks: Iterable[DehydrationCheck],
    today: date,
    days: int = ALERT_WINDOW_DAYS,
    tz: tzinfo | None = None,
) -> list[DayAlert]:
    return alert_grid(checks, lambda check: check.dehydration_alert, today, days, tz)


def wet_diaper_alert_grid(
    entries: Iterable[WetDiaperEntry],
    today: date,
    days: int = ALERT_WINDOW_DAYS,
    tz: tzinfo | None = None,
) -> list[DayAlert]:
    return alert_grid(entries, lambda entry: entry.dehydration_alert, today, days, tz)


def feed_bubble_size(entry: FeedEntry, mini: bool = False) -> float:
    """Bubble size for a feed: by minutes at the breast or bottle volume."""
    if isinstance(entry.payload, Breastfeeding):
        tier = _tier(entry.payload.minutes, _BREASTFEEDING_TIERS_MINUTES)
    else:
        tier = _tier(entry.payload.volume_ml, _BOTTLE_TIERS_ML)
    return _bubble(tier, mini)


def volume_bubble_size(volume: StoolVolume | DiaperVolume, mini: bool = False) -> float:
    """Bubble size for a stool or wet diaper volume."""
    return _bubble(_VOLUME_TIERS[volume.value], mini)


def _tier(magnitude: float, bounds: tuple[int, int]) -> int:
    low, high = bounds
    if magnitude < low:
        return 0
    if magnitude < high:
        return 1
    return 2


def _bubble(tier: int, mini: bool) -> float:
    full, small = _BUBBLE_SIZES[tier]
    return small if mini else full
