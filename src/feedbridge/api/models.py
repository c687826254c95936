"""Pydantic request models and response serializers for the HTTP API."""

from dataclasses import asdict
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from feedbridge.domain.babies import COLLECTION_FIELDS, Baby, BabySummary
from feedbridge.domain.entries import (
    BottleFeed,
    DehydrationCheck,
    DiaperVolume,
    Entry,
    EntryKind,
    FeedEntry,
    FeedType,
    MilkType,
    StoolColor,
    StoolEntry,
    StoolVolume,
    WeightEntry,
    WetDiaperColor,
    WetDiaperEntry,
)
from feedbridge.domain.health import HealthSample
from feedbridge.domain.preferences import Preferences
from feedbridge.domain.units import WeightUnit
from feedbridge.services.dashboard import ChartPoint, Dashboard


def _now() -> datetime:
    return datetime.now(tz=UTC)


class BabyCreate(BaseModel):
    """New baby payload."""

    name: str = Field(min_length=1)
    date_of_birth: datetime

    def to_baby(self) -> Baby:
        return Baby(name=self.name.strip(), date_of_birth=self.date_of_birth)


class BabiesCreate(BaseModel):
    """Several babies added in one request."""

    babies: list[BabyCreate] = Field(min_length=1)


class FeedCreate(BaseModel):
    """Feed payload: minutes for breastfeeding, volume and milk for a bottle."""

    feed_type: FeedType
    minutes: int | None = Field(default=None, ge=0)
    volume_ml: float | None = Field(default=None, ge=0)
    milk_type: MilkType | None = None
    date_time: datetime = Field(default_factory=_now)

    def to_entry(self) -> FeedEntry:
        if self.feed_type is FeedType.DIRECT_BREASTFEEDING:
            if self.minutes is None or self.volume_ml is not None or self.milk_type:
                raise ValueError("Breastfeeding feeds take minutes only")
            return FeedEntry.breastfeeding(self.minutes, self.date_time)
        if self.volume_ml is None or self.milk_type is None or self.minutes is not None:
            raise ValueError("Bottle feeds take volume_ml and milk_type only")
        return FeedEntry.bottle(self.volume_ml, self.milk_type, self.date_time)


class WeightCreate(BaseModel):
    """Weight payload in exactly one of grams, kilograms or pounds/ounces."""

    grams: float | None = Field(default=None, ge=0)
    kilograms: float | None = Field(default=None, ge=0)
    pounds: int | None = Field(default=None, ge=0)
    ounces: float | None = Field(default=None, ge=0, lt=16)
    date_time: datetime = Field(default_factory=_now)

    def to_entry(self) -> WeightEntry:
        given = [
            value is not None for value in (self.grams, self.kilograms, self.pounds)
        ]
        if sum(given) != 1 or (self.ounces is not None and self.pounds is None):
            raise ValueError("Give exactly one of grams, kilograms or pounds/ounces")
        if self.grams is not None:
            return WeightEntry.from_grams(self.grams, self.date_time)
        if self.kilograms is not None:
            return WeightEntry.from_kilograms(self.kilograms, self.date_time)
        return WeightEntry.from_pounds_ounces(
            self.pounds or 0, self.ounces or 0, self.date_time
        )


class StoolCreate(BaseModel):
    volume: StoolVolume
    color: StoolColor
    date_time: datetime = Field(default_factory=_now)

    def to_entry(self) -> StoolEntry:
        return StoolEntry(
            volume=self.volume, color=self.color, date_time=self.date_time
        )


class WetDiaperCreate(BaseModel):
    volume: DiaperVolume
    color: WetDiaperColor
    date_time: datetime = Field(default_factory=_now)

    def to_entry(self) -> WetDiaperEntry:
        return WetDiaperEntry(
            volume=self.volume, color=self.color, date_time=self.date_time
        )


class DehydrationCheckCreate(BaseModel):
    poor_skin_elasticity: bool
    dry_mucous_membranes: bool
    date_time: datetime = Field(default_factory=_now)

    def to_entry(self) -> DehydrationCheck:
        return DehydrationCheck(
            poor_skin_elasticity=self.poor_skin_elasticity,
            dry_mucous_membranes=self.dry_mucous_membranes,
            date_time=self.date_time,
        )


class PreferencesUpdate(BaseModel):
    """Partial preferences update."""

    weight_unit: WeightUnit | None = None
    timezone: str | None = None
    selected_baby_id: str | None = None


class HealthSampleIn(BaseModel):
    """Health sample to mirror."""

    id: str = Field(min_length=1)
    sample_type: str
    payload: dict[str, object] = Field(default_factory=dict)

    def to_sample(self) -> HealthSample:
        return HealthSample(
            id=self.id, sample_type=self.sample_type, payload=self.payload
        )


def summary_to_dict(summary: BabySummary) -> dict[str, object]:
    return {
        "id": summary.id,
        "name": summary.name,
        "date_of_birth": summary.date_of_birth.isoformat(),
    }


def entry_to_dict(entry: Entry) -> dict[str, object]:
    """Serialize an entry with its derived fields."""
    data: dict[str, object] = {
        "id": entry.id,
        "date_time": entry.date_time.isoformat(),
    }
    if isinstance(entry, FeedEntry):
        bottle = entry.payload if isinstance(entry.payload, BottleFeed) else None
        data.update(
            feed_type=entry.feed_type.value,
            minutes=None if bottle else entry.payload.minutes,
            volume_ml=bottle.volume_ml if bottle else None,
            milk_type=bottle.milk_type.value if bottle else None,
        )
    elif isinstance(entry, WeightEntry):
        pounds, ounces = entry.pounds_ounces
        data.update(
            grams=entry.grams,
            kilograms=round(entry.kilograms, 2),
            pounds=round(entry.pounds, 2),
            pounds_ounces={"pounds": pounds, "ounces": round(ounces, 2)},
        )
    elif isinstance(entry, StoolEntry):
        data.update(
            volume=entry.volume.value,
            color=entry.color.value,
            medical_alert=entry.medical_alert,
        )
    elif isinstance(entry, WetDiaperEntry):
        data.update(
            volume=entry.volume.value,
            color=entry.color.value,
            dehydration_alert=entry.dehydration_alert,
        )
    else:
        data.update(
            poor_skin_elasticity=entry.poor_skin_elasticity,
            dry_mucous_membranes=entry.dry_mucous_membranes,
            dehydration_alert=entry.dehydration_alert,
        )
    return data


def baby_to_dict(baby: Baby) -> dict[str, object]:
    """Serialize a hydrated baby; collections are sorted by time."""
    current_weight = baby.current_weight
    latest_check = baby.latest_dehydration_check
    data: dict[str, object] = {
        "id": baby.id,
        "name": baby.name,
        "date_of_birth": baby.date_of_birth.isoformat(),
        "age_in_months": baby.age_in_months,
        "current_weight": entry_to_dict(current_weight) if current_weight else None,
        "latest_dehydration_check": (
            entry_to_dict(latest_check) if latest_check else None
        ),
        "has_active_alerts": baby.has_active_alerts,
        "unavailable_collections": sorted(
            COLLECTION_FIELDS[kind] for kind in baby.unavailable_collections
        ),
    }
    for kind in EntryKind:
        entries = sorted(baby.entries(kind), key=lambda entry: entry.date_time)
        data[COLLECTION_FIELDS[kind]] = [entry_to_dict(entry) for entry in entries]
    return data


def preferences_to_dict(preferences: Preferences) -> dict[str, object]:
    return {
        "selected_baby_id": preferences.selected_baby_id,
        "weight_unit": preferences.weight_unit.value,
        "timezone": preferences.timezone,
    }


def dashboard_to_dict(dashboard: Dashboard) -> dict[str, object]:
    """Serialize a dashboard; dates become ISO strings."""
    return {
        "baby_id": dashboard.baby_id,
        "name": dashboard.name,
        "age_in_months": dashboard.age_in_months,
        "days": [day.isoformat() for day in dashboard.days],
        "weight_unit": dashboard.weight_unit.value,
        "current_weight": dashboard.current_weight,
        "feeds": [_chart_point(point) for point in dashboard.feeds],
        "stools": [_chart_point(point) for point in dashboard.stools],
        "wet_diapers": [_chart_point(point) for point in dashboard.wet_diapers],
        "weights": [
            {"day": average.day.isoformat(), "value": average.value}
            for average in dashboard.weights
        ],
        "dehydration_alerts": [
            {"day": alert.day.isoformat(), "status": alert.status.value}
            for alert in dashboard.dehydration_alerts
        ],
        "wet_diaper_alerts": [
            {"day": alert.day.isoformat(), "status": alert.status.value}
            for alert in dashboard.wet_diaper_alerts
        ],
        "has_active_alerts": dashboard.has_active_alerts,
        "latest": {
            COLLECTION_FIELDS[kind]: entry_to_dict(entry)
            for kind, entry in dashboard.latest.items()
        },
        "unavailable_collections": [
            COLLECTION_FIELDS[kind] for kind in dashboard.unavailable_collections
        ],
    }


def _chart_point(point: ChartPoint) -> dict[str, object]:
    data = asdict(point)
    data["date_time"] = point.date_time.isoformat()
    data["day"] = point.day.isoformat()
    return data
