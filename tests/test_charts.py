"""Tests for chart aggregation."""

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from feedbridge.domain.charts import (
    AlertStatus,
    average_weights_per_day,
    dehydration_alert_grid,
    feed_bubble_size,
    index_entries_per_day,
    local_day,
    trailing_days,
    volume_bubble_size,
    wet_diaper_alert_grid,
    within_days,
)
from feedbridge.domain.entries import (
    DehydrationCheck,
    DiaperVolume,
    FeedEntry,
    MilkType,
    StoolVolume,
    WeightEntry,
    WetDiaperColor,
    WetDiaperEntry,
)
from feedbridge.domain.units import WeightUnit

TODAY = date(2024, 3, 10)


def _at(day: date, hour: int) -> datetime:
    return datetime(day.year, day.month, day.day, hour, tzinfo=UTC)


def test_trailing_days_ends_today() -> None:
    days = trailing_days(TODAY, 7)

    assert len(days) == 7
    assert days[0] == date(2024, 3, 4)
    assert days[-1] == TODAY


def test_local_day_uses_timezone() -> None:
    late = datetime(2024, 3, 10, 23, 30, tzinfo=UTC)

    assert local_day(late) == date(2024, 3, 10)
    assert local_day(late, ZoneInfo("Europe/Berlin")) == date(2024, 3, 11)


def test_within_days_filters_window() -> None:
    inside = FeedEntry.breastfeeding(5, _at(TODAY, 9))
    outside = FeedEntry.breastfeeding(5, _at(TODAY - timedelta(days=7), 9))

    assert within_days([inside, outside], trailing_days(TODAY)) == [inside]


def test_average_weights_per_day() -> None:
    entries = [
        WeightEntry(3000, _at(TODAY, 8)),
        WeightEntry(3400, _at(TODAY, 20)),
        WeightEntry(3100, _at(TODAY - timedelta(days=1), 8)),
    ]

    averages = average_weights_per_day(entries, WeightUnit.KILOGRAMS)

    assert [average.day for average in averages] == [TODAY - timedelta(days=1), TODAY]
    assert averages[1].value == pytest.approx(3.2)


def test_average_weights_in_pounds() -> None:
    averages = average_weights_per_day(
        [WeightEntry(453.59237, _at(TODAY, 8))], WeightUnit.POUNDS_OUNCES
    )

    assert averages[0].value == pytest.approx(1.0)


def test_index_entries_per_day_numbers_in_time_order() -> None:
    first = FeedEntry.breastfeeding(5, _at(TODAY, 7))
    second = FeedEntry.breastfeeding(5, _at(TODAY, 11))
    yesterday = FeedEntry.breastfeeding(5, _at(TODAY - timedelta(days=1), 22))

    indexed = index_entries_per_day([second, yesterday, first])

    assert [(item.entry, item.index) for item in indexed] == [
        (yesterday, 1),
        (first, 1),
        (second, 2),
    ]


def test_dehydration_alert_grid_statuses() -> None:
    checks = [
        DehydrationCheck(False, False, _at(TODAY, 8)),
        DehydrationCheck(True, False, _at(TODAY, 18)),
        DehydrationCheck(False, False, _at(TODAY - timedelta(days=2), 8)),
    ]

    grid = dehydration_alert_grid(checks, TODAY)

    assert [cell.day for cell in grid] == trailing_days(TODAY, 5)
    assert [cell.status for cell in grid] == [
        AlertStatus.NO_DATA,
        AlertStatus.NO_DATA,
        AlertStatus.NO_ALERT,
        AlertStatus.NO_DATA,
        AlertStatus.ALERT,
    ]


def test_wet_diaper_alert_grid_ignores_entries_outside_window() -> None:
    entries = [
        WetDiaperEntry(
            DiaperVolume.LIGHT, WetDiaperColor.PINK, _at(TODAY - timedelta(days=9), 8)
        ),
        WetDiaperEntry(DiaperVolume.LIGHT, WetDiaperColor.YELLOW, _at(TODAY, 8)),
    ]

    grid = wet_diaper_alert_grid(entries, TODAY, days=3)

    assert [cell.status for cell in grid] == [
        AlertStatus.NO_DATA,
        AlertStatus.NO_DATA,
        AlertStatus.NO_ALERT,
    ]


@pytest.mark.parametrize(
    ("entry", "size", "mini"),
    [
        (FeedEntry.breastfeeding(9), 100.0, 30.0),
        (FeedEntry.breastfeeding(10), 300.0, 60.0),
        (FeedEntry.breastfeeding(20), 650.0, 100.0),
        (FeedEntry.bottle(5, MilkType.FORMULA), 100.0, 30.0),
        (FeedEntry.bottle(29, MilkType.BREASTMILK), 300.0, 60.0),
        (FeedEntry.bottle(120, MilkType.FORMULA), 650.0, 100.0),
    ],
)
def test_feed_bubble_size(entry: FeedEntry, size: float, mini: float) -> None:
    assert feed_bubble_size(entry) == size
    assert feed_bubble_size(entry, mini=True) == mini


def test_volume_bubble_size() -> None:
    assert volume_bubble_size(StoolVolume.LIGHT) == 100.0
    assert volume_bubble_size(DiaperVolume.MEDIUM) == 300.0
    assert volume_bubble_size(StoolVolume.HEAVY, mini=True) == 100.0
