"""Dashboard assembly: chart series and alerts for one baby."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import TypeVar
from zoneinfo import ZoneInfo

from feedbridge.domain.babies import Baby
from feedbridge.domain.charts import (
    ALERT_WINDOW_DAYS,
    DEFAULT_WINDOW_DAYS,
    DailyAverage,
    DayAlert,
    average_weights_per_day,
    dehydration_alert_grid,
    feed_bubble_size,
    index_entries_per_day,
    trailing_days,
    volume_bubble_size,
    wet_diaper_alert_grid,
    within_days,
)
from feedbridge.domain.entries import (
    BottleFeed,
    Entry,
    EntryKind,
    FeedEntry,
    StoolEntry,
    WetDiaperEntry,
)
from feedbridge.domain.preferences import Preferences
from feedbridge.domain.units import WeightUnit, format_weight
from feedbridge.services.babies import BabyService
from feedbridge.services.preferences import PreferencesService

EntryT = TypeVar("EntryT", bound=Entry)


@dataclass(frozen=True)
class ChartPoint:
    """One bubble of a per-day chart."""

    entry_id: str | None
    date_time: datetime
    day: date
    index: int
    size: float
    mini_size: float
    category: str


@dataclass
class Dashboard:
    """Everything the dashboard renders for a baby."""

    baby_id: str | None
    name: str
    age_in_months: int
    days: list[date]
    weight_unit: WeightUnit
    current_weight: str | None
    feeds: list[ChartPoint]
    stools: list[ChartPoint]
    wet_diapers: list[ChartPoint]
    weights: list[DailyAverage]
    dehydration_alerts: list[DayAlert]
    wet_diaper_alerts: list[DayAlert]
    has_active_alerts: bool
    latest: dict[EntryKind, Entry] = field(default_factory=dict)
    unavailable_collections: list[EntryKind] = field(default_factory=list)


@dataclass
class DashboardService:
    """Builds dashboards from hydrated babies and the user's preferences."""

    baby_service: BabyService
    preferences_service: PreferencesService
    window_days: int = DEFAULT_WINDOW_DAYS
    alert_days: int = ALERT_WINDOW_DAYS

    def build(
        self, user_id: str | None, baby_id: str, today: date | None = None
    ) -> Dashboard | None:
        """Return the dashboard of a baby, or None if it does not exist."""
        baby = self.baby_service.get_baby(user_id, baby_id)
        if baby is None:
            return None
        preferences = self.preferences_service.get(user_id)
        return self.build_from_baby(baby, preferences, today)

    def build_from_baby(
        self, baby: Baby, preferences: Preferences, today: date | None = None
    ) -> Dashboard:
        """Assemble a dashboard from an already loaded baby."""
        tz = ZoneInfo(preferences.timezone)
        current_day = today or datetime.now(tz=tz).date()
        days = trailing_days(current_day, self.window_days)
        current_weight = baby.current_weight
        return Dashboard(
            baby_id=baby.id,
            name=baby.name,
            age_in_months=baby.age_in_months,
            days=days,
            weight_unit=preferences.weight_unit,
            current_weight=(
                format_weight(current_weight.grams, preferences.weight_unit)
                if current_weight
                else None
            ),
            feeds=_points(within_days(baby.feed_entries, days, tz), tz, _feed_point),
            stools=_points(
                within_days(baby.stool_entries, days, tz), tz, _volume_point
            ),
            wet_diapers=_points(
                within_days(baby.wet_diaper_entries, days, tz), tz, _volume_point
            ),
            weights=average_weights_per_day(
                within_days(baby.weight_entries, days, tz), preferences.weight_unit, tz
            ),
            dehydration_alerts=dehydration_alert_grid(
                baby.dehydration_checks, current_day, self.alert_days, tz
            ),
            wet_diaper_alerts=wet_diaper_alert_grid(
                baby.wet_diaper_entries, current_day, self.alert_days, tz
            ),
            has_active_alerts=baby.has_active_alerts,
            latest=_latest_entries(baby),
            unavailable_collections=sorted(baby.unavailable_collections),
        )


def _feed_point(entry: FeedEntry) -> tuple[float, float, str]:
    if isinstance(entry.payload, BottleFeed):
        category = entry.payload.milk_type.value
    else:
        category = entry.feed_type.value
    return feed_bubble_size(entry), feed_bubble_size(entry, mini=True), category


def _volume_point(entry: StoolEntry | WetDiaperEntry) -> tuple[float, float, str]:
    return (
        volume_bubble_size(entry.volume),
        volume_bubble_size(entry.volume, mini=True),
        entry.color.value,
    )


def _points(
    entries: list[EntryT],
    tz: tzinfo,
    describe: Callable[[EntryT], tuple[float, float, str]],
) -> list[ChartPoint]:
    points = []
    for indexed in index_entries_per_day(entries, tz):
        size, mini_size, category = describe(indexed.entry)
        points.append(
            ChartPoint(
                entry_id=indexed.entry.id,
                date_time=indexed.entry.date_time,
                day=indexed.day,
                index=indexed.index,
                size=size,
                mini_size=mini_size,
                category=category,
            )
        )
    return points


def _latest_entries(baby: Baby) -> dict[EntryKind, Entry]:
    latest: dict[EntryKind, Entry] = {}
    for kind in EntryKind:
        entries = baby.entries(kind)
        if entries:
            latest[kind] = max(entries, key=lambda entry: entry.date_time)
    return latest
