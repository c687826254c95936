"""Conversion between domain entities and stored documents."""

from collections.abc import Callable
from datetime import datetime

from feedbridge.domain.babies import Baby, BabySummary
from feedbridge.domain.entries import (
    BottleFeed,
    Breastfeeding,
    DehydrationCheck,
    Entry,
    EntryKind,
    FeedEntry,
    FeedType,
    MilkType,
    StoolEntry,
    WeightEntry,
    WetDiaperEntry,
)
from feedbridge.domain.errors import DecodeError

Document = dict[str, object]


def encode_baby(baby: Baby) -> Document:
    """Return the stored fields of a baby document."""
    return {
        "name": baby.name,
        "date_of_birth": baby.date_of_birth.isoformat(),
    }


def decode_baby_summary(document: Document) -> BabySummary:
    """Decode a stored baby document."""
    try:
        return BabySummary(
            id=str(document["id"]),
            name=str(document["name"]),
            date_of_birth=parse_timestamp(document["date_of_birth"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise DecodeError(f"Invalid baby document: {exc}") from exc


def encode_entry(entry: Entry) -> Document:
    """Return the stored fields of an entry document."""
    document: Document = {"date_time": entry.date_time.isoformat()}
    if isinstance(entry, FeedEntry):
        document["feed_type"] = entry.feed_type.value
        if isinstance(entry.payload, Breastfeeding):
            document["feed_time_in_minutes"] = entry.payload.minutes
            document["feed_volume_in_ml"] = None
            document["milk_type"] = None
        else:
            document["feed_time_in_minutes"] = None
            document["feed_volume_in_ml"] = entry.payload.volume_ml
            document["milk_type"] = entry.payload.milk_type.value
    elif isinstance(entry, WeightEntry):
        document["weight_in_grams"] = entry.grams
    elif isinstance(entry, StoolEntry | WetDiaperEntry):
        document["volume"] = entry.volume.value
        document["color"] = entry.color.value
    elif isinstance(entry, DehydrationCheck):
        document["poor_skin_elasticity"] = entry.poor_skin_elasticity
        document["dry_mucous_membranes"] = entry.dry_mucous_membranes
    else:
        raise TypeError(f"Unsupported entry type: {type(entry).__name__}")
    return document


def decode_entry(kind: EntryKind, document: Document) -> Entry:
    """Decode a stored entry document of the given kind."""
    try:
        return _DECODERS[kind](document)
    except (KeyError, TypeError, ValueError) as exc:
        raise DecodeError(f"Invalid {kind.value} document: {exc}") from exc


def decode_entries(kind: EntryKind, documents: list[Document]) -> list[Entry]:
    """Decode every document of a collection, failing on the first bad one."""
    return [decode_entry(kind, document) for document in documents]


def parse_timestamp(value: object) -> datetime:
    """Parse a stored temporal value."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    raise ValueError(f"Invalid timestamp: {value!r}")


def _entry_id(document: Document) -> str | None:
    value = document.get("id")
    return str(value) if value is not None else None


def _decode_feed(document: Document) -> FeedEntry:
    feed_type = FeedType(document["feed_type"])
    if feed_type is FeedType.DIRECT_BREASTFEEDING:
        payload: Breastfeeding | BottleFeed = Breastfeeding(
            int(document["feed_time_in_minutes"])
        )
    else:
        payload = BottleFeed(
            volume_ml=float(document["feed_volume_in_ml"]),
            milk_type=MilkType(document["milk_type"]),
        )
    return FeedEntry(
        payload=payload,
        date_time=parse_timestamp(document["date_time"]),
        id=_entry_id(document),
    )


def _decode_weight(document: Document) -> WeightEntry:
    return WeightEntry(
        grams=float(document["weight_in_grams"]),
        date_time=parse_timestamp(document["date_time"]),
        id=_entry_id(document),
    )


def _decode_stool(document: Document) -> StoolEntry:
    return StoolEntry(
        volume=document["volume"],
        color=document["color"],
        date_time=parse_timestamp(document["date_time"]),
        id=_entry_id(document),
    )


def _decode_wet_diaper(document: Document) -> WetDiaperEntry:
    return WetDiaperEntry(
        volume=document["volume"],
        color=document["color"],
        date_time=parse_timestamp(document["date_time"]),
        id=_entry_id(document),
    )


def _decode_dehydration_check(document: Document) -> DehydrationCheck:
    return DehydrationCheck(
        poor_skin_elasticity=bool(document["poor_skin_elasticity"]),
        dry_mucous_membranes=bool(document["dry_mucous_membranes"]),
        date_time=parse_timestamp(document["date_time"]),
        id=_entry_id(document),
    )


_DECODERS: dict[EntryKind, Callable[[Document], Entry]] = {
    EntryKind.FEED: _decode_feed,
    EntryKind.WEIGHT: _decode_weight,
    EntryKind.STOOL: _decode_stool,
    EntryKind.WET_DIAPER: _decode_wet_diaper,
    EntryKind.DEHYDRATION_CHECK: _decode_dehydration_check,
}
