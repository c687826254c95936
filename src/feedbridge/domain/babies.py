"""Baby aggregate and its read models."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Self

from feedbridge.domain.entries import (
    DehydrationCheck,
    Entry,
    EntryKind,
    FeedEntry,
    StoolEntry,
    WeightEntry,
    WetDiaperEntry,
    kind_of,
)

COLLECTION_FIELDS = {
    EntryKind.FEED: "feed_entries",
    EntryKind.WEIGHT: "weight_entries",
    EntryKind.STOOL: "stool_entries",
    EntryKind.WET_DIAPER: "wet_diaper_entries",
    EntryKind.DEHYDRATION_CHECK: "dehydration_checks",
}


@dataclass(frozen=True)
class BabySummary:
    """Baby document without its entry collections."""

    id: str
    name: str
    date_of_birth: datetime


@dataclass(eq=False)
class Baby:
    """A tracked baby together with all of its entry collections.

    Collections are unordered bags; sort by ``date_time`` before display.
    ``unavailable_collections`` lists sub-collections that could not be
    loaded and were hydrated as empty.
    """

    name: str
    date_of_birth: datetime
    id: str | None = None
    feed_entries: list[FeedEntry] = field(default_factory=list)
    weight_entries: list[WeightEntry] = field(default_factory=list)
    stool_entries: list[StoolEntry] = field(default_factory=list)
    wet_diaper_entries: list[WetDiaperEntry] = field(default_factory=list)
    dehydration_checks: list[DehydrationCheck] = field(default_factory=list)
    unavailable_collections: frozenset[EntryKind] = frozenset()

    @classmethod
    def placeholder(cls) -> Self:
        """Empty baby used until the baby document has been received."""
        return cls(name="", date_of_birth=datetime.now(tz=UTC))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Baby):
            return NotImplemented
        if self.id is not None and other.id is not None:
            return self.id == other.id
        if self.id is None and other.id is None:
            return (
                self.name == other.name and self.date_of_birth == other.date_of_birth
            )
        return False

    def __hash__(self) -> int:
        if self.id is not None:
            return hash(self.id)
        return hash((self.name, self.date_of_birth))

    def validate(self, now: datetime | None = None) -> None:
        """Check the fields a new baby must satisfy before persistence."""
        if not self.name.strip():
            raise ValueError("Baby name must not be empty")
        reference = now or datetime.now(tz=self.date_of_birth.tzinfo or UTC)
        if self.date_of_birth.tzinfo is None:
            reference = reference.replace(tzinfo=None)
        if self.date_of_birth > reference:
            raise ValueError("Date of birth must not be in the future")

    @property
    def age_in_months(self) -> int:
        now = datetime.now(tz=self.date_of_birth.tzinfo)
        return whole_months_between(self.date_of_birth, now)

    @property
    def current_weight(self) -> WeightEntry | None:
        return max(self.weight_entries, key=lambda entry: entry.date_time, default=None)

    @property
    def latest_dehydration_check(self) -> DehydrationCheck | None:
        return max(
            self.dehydration_checks, key=lambda check: check.date_time, default=None
        )

    @property
    def has_active_alerts(self) -> bool:
        latest_check = self.latest_dehydration_check
        if latest_check is not None and latest_check.dehydration_alert:
            return True
        if self.wet_diaper_entries and self.wet_diaper_entries[-1].dehydration_alert:
            return True
        return bool(self.stool_entries and self.stool_entries[-1].medical_alert)

    def entries(self, kind: EntryKind) -> list[Entry]:
        """Return the collection for an entry kind."""
        return getattr(self, COLLECTION_FIELDS[kind])

    def add_entry(self, entry: Entry) -> None:
        """Append an entry to its collection."""
        self.entries(kind_of(entry)).append(entry)

    def with_entries(self, kind: EntryKind, entries: list[Entry]) -> Self:
        """Return a copy with one collection replaced."""
        return replace(self, **{COLLECTION_FIELDS[kind]: list(entries)})

    def with_details(self, summary: BabySummary) -> Self:
        """Return a copy with new document fields and the same collections."""
        return replace(
            self,
            id=summary.id,
            name=summary.name,
            date_of_birth=summary.date_of_birth,
        )

    def summary(self) -> BabySummary:
        if self.id is None:
            raise ValueError("Baby has not been persisted yet")
        return BabySummary(id=self.id, name=self.name, date_of_birth=self.date_of_birth)


def whole_months_between(start: datetime, end: datetime) -> int:
    """Return the number of whole calendar months from start to end."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    start_offset = (start.day, start.time())
    end_offset = (end.day, end.time())
    if months > 0 and end_offset < start_offset:
        months -= 1
    elif months < 0 and end_offset > start_offset:
        months += 1
    return months
