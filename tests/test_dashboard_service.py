"""Tests for dashboard assembly."""

from datetime import UTC, date, datetime, timedelta

import pytest

from feedbridge.domain.babies import Baby
from feedbridge.domain.charts import AlertStatus
from feedbridge.domain.entries import (
    DehydrationCheck,
    EntryKind,
    FeedEntry,
    MilkType,
    StoolColor,
    StoolEntry,
    StoolVolume,
    WeightEntry,
    WetDiaperColor,
    WetDiaperEntry,
)
from feedbridge.domain.preferences import Preferences
from feedbridge.domain.units import WeightUnit
from feedbridge.services.babies import BabyService
from feedbridge.services.dashboard import DashboardService
from feedbridge.services.preferences import PreferencesService
from tests.conftest import InMemoryBabyRepository, InMemoryPreferencesRepository

TODAY = date(2024, 3, 10)
BIRTH = datetime(2024, 1, 1, tzinfo=UTC)


def _at(days_ago: int, hour: int) -> datetime:
    day = TODAY - timedelta(days=days_ago)
    return datetime(day.year, day.month, day.day, hour, tzinfo=UTC)


def _dashboard_service() -> DashboardService:
    baby_service = BabyService(InMemoryBabyRepository())
    return DashboardService(
        baby_service=baby_service,
        preferences_service=PreferencesService(InMemoryPreferencesRepository()),
    )


def _baby() -> Baby:
    baby = Baby(name="Ada", date_of_birth=BIRTH, id="b1")
    baby.add_entry(FeedEntry.breastfeeding(25, _at(0, 9)).with_id("f2"))
    baby.add_entry(FeedEntry.bottle(20, MilkType.FORMULA, _at(0, 6)).with_id("f1"))
    baby.add_entry(FeedEntry.breastfeeding(5, _at(9, 6)).with_id("old"))
    baby.add_entry(WeightEntry(3000, _at(1, 8)))
    baby.add_entry(WeightEntry(3400, _at(1, 20)))
    baby.add_entry(StoolEntry(StoolVolume.HEAVY, StoolColor.BEIGE, _at(2, 10)))
    baby.add_entry(WetDiaperEntry("light", WetDiaperColor.PINK, _at(0, 7)))
    baby.add_entry(DehydrationCheck(False, False, _at(3, 9)))
    return baby


def test_build_from_baby_charts_window() -> None:
    service = _dashboard_service()

    dashboard = service.build_from_baby(_baby(), Preferences(), TODAY)

    assert dashboard.days[-1] == TODAY
    assert len(dashboard.days) == 7
    assert [(point.entry_id, point.index) for point in dashboard.feeds] == [
        ("f1", 1),
        ("f2", 2),
    ]
    assert dashboard.feeds[0].category == MilkType.FORMULA.value
    assert dashboard.feeds[0].size == 300.0
    assert dashboard.feeds[1].category == "directBreastfeeding"
    assert dashboard.feeds[1].mini_size == 100.0
    assert dashboard.stools[0].category == "beige"
    assert dashboard.weights[0].value == pytest.approx(3.2)
    assert dashboard.current_weight == "3.40 kg"


def test_build_from_baby_alert_grids() -> None:
    service = _dashboard_service()

    dashboard = service.build_from_baby(_baby(), Preferences(), TODAY)

    assert [alert.status for alert in dashboard.dehydration_alerts] == [
        AlertStatus.NO_DATA,
        AlertStatus.NO_ALERT,
        AlertStatus.NO_DATA,
        AlertStatus.NO_DATA,
        AlertStatus.NO_DATA,
    ]
    assert dashboard.wet_diaper_alerts[-1].status is AlertStatus.ALERT
    assert dashboard.has_active_alerts is True


def test_build_from_baby_uses_weight_unit() -> None:
    service = _dashboard_service()

    dashboard = service.build_from_baby(
        _baby(), Preferences(weight_unit=WeightUnit.POUNDS_OUNCES), TODAY
    )

    assert dashboard.current_weight == "7.50 lb"
    assert dashboard.weight_unit is WeightUnit.POUNDS_OUNCES


def test_latest_entries_per_kind() -> None:
    service = _dashboard_service()

    dashboard = service.build_from_baby(_baby(), Preferences(), TODAY)

    assert dashboard.latest[EntryKind.FEED].id == "f2"
    assert dashboard.latest[EntryKind.WEIGHT].grams == 3400
    assert len(dashboard.latest) == len(EntryKind)


def test_build_missing_baby_returns_none() -> None:
    assert _dashboard_service().build("user-1", "missing", TODAY) is None


def test_build_loads_baby_and_preferences() -> None:
    service = _dashboard_service()
    baby = service.baby_service.add_baby(
        "user-1", Baby(name="Ada", date_of_birth=BIRTH)
    )
    service.baby_service.add_weight_entry(
        "user-1", baby.id, WeightEntry(3289, _at(0, 8))
    )
    service.preferences_service.update(
        "user-1", weight_unit=WeightUnit.POUNDS_OUNCES
    )

    dashboard = service.build("user-1", baby.id, TODAY)

    assert dashboard.baby_id == baby.id
    assert dashboard.current_weight == "7.25 lb"
    assert dashboard.feeds == []
