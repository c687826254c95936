"""Baby and entry access on top of the remote store."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol, TypeVar

from feedbridge.domain.babies import Baby, BabySummary
from feedbridge.domain.entries import (
    DehydrationCheck,
    Entry,
    EntryKind,
    FeedEntry,
    StoolEntry,
    WeightEntry,
    WetDiaperEntry,
)
from feedbridge.domain.errors import (
    DuplicateBabyError,
    NotFoundError,
    UnauthenticatedError,
)

_logger = logging.getLogger(__name__)

EntryT = TypeVar("EntryT", bound=Entry)


class BabyRepository(Protocol):
    """Persistence interface for babies and their entry sub-collections."""

    def create_baby(self, user_id: str, baby: Baby) -> str:
        """Create a baby document and return its id."""

    def list_babies(self, user_id: str) -> list[BabySummary]:
        """Return every baby document of a user."""

    def get_baby(self, user_id: str, baby_id: str) -> BabySummary | None:
        """Return a baby document by id."""

    def delete_baby(self, user_id: str, baby_id: str) -> None:
        """Delete a baby document (entries are not touched)."""

    def create_entry(self, user_id: str, baby_id: str, entry: Entry) -> str:
        """Create an entry in the matching sub-collection and return its id."""

    def list_entries(self, user_id: str, baby_id: str, kind: EntryKind) -> list[Entry]:
        """Return and decode every entry of a sub-collection."""

    def list_entry_ids(self, user_id: str, baby_id: str, kind: EntryKind) -> list[str]:
        """Return the ids of every entry of a sub-collection."""

    def delete_entry(
        self, user_id: str, baby_id: str, kind: EntryKind, entry_id: str
    ) -> None:
        """Delete one entry by id."""


def require_user(user_id: str | None) -> str:
    """Return the user id or fail before touching the store."""
    if not user_id:
        raise UnauthenticatedError
    return user_id


def _name_key(name: str) -> str:
    return name.strip().casefold()


@dataclass
class BabyService:
    """Service for reading and writing babies scoped by the signed-in user."""

    repository: BabyRepository

    def add_babies(
        self,
        user_id: str | None,
        babies: list[Baby],
        *,
        reject_duplicate_names: bool = True,
    ) -> list[Baby]:
        """Persist babies one by one and return them with their ids.

        Names are compared case-insensitively after stripping, against each
        other and against the user's existing babies, before the first write.
        Writes are sequential and stop at the first failure; babies written
        before the failure stay persisted.
        """
        uid = require_user(user_id)
        for baby in babies:
            baby.validate()
        if reject_duplicate_names:
            self._check_unique_names(uid, babies)
        created: list[Baby] = []
        for baby in babies:
            try:
                baby_id = self.repository.create_baby(uid, baby)
            except Exception:
                _logger.exception(
                    "Could not store baby; %s of %s stored", len(created), len(babies)
                )
                raise
            created.append(replace(baby, id=baby_id))
        return created

    def add_baby(
        self,
        user_id: str | None,
        baby: Baby,
        *,
        reject_duplicate_names: bool = True,
    ) -> Baby:
        """Persist one baby, optionally rejecting a name already in use."""
        return self.add_babies(
            user_id, [baby], reject_duplicate_names=reject_duplicate_names
        )[0]

    def _check_unique_names(self, user_id: str, babies: list[Baby]) -> None:
        taken = {
            _name_key(existing.name)
            for existing in self.repository.list_babies(user_id)
        }
        for baby in babies:
            key = _name_key(baby.name)
            if key in taken:
                raise DuplicateBabyError(
                    f"A baby named {baby.name.strip()!r} already exists"
                )
            taken.add(key)

    def get_babies(self, user_id: str | None) -> list[BabySummary]:
        """Return the user's babies without their entries."""
        return self.repository.list_babies(require_user(user_id))

    def get_baby(self, user_id: str | None, baby_id: str) -> Baby | None:
        """Return a fully hydrated baby, or None if it does not exist.

        A sub-collection that cannot be loaded is hydrated as empty and its
        kind is reported in ``unavailable_collections``.
        """
        uid = require_user(user_id)
        summary = self.repository.get_baby(uid, baby_id)
        if summary is None:
            return None
        baby = Baby(
            name=summary.name, date_of_birth=summary.date_of_birth, id=summary.id
        )
        unavailable: set[EntryKind] = set()
        for kind in EntryKind:
            try:
                entries = self.repository.list_entries(uid, baby_id, kind)
            except Exception:
                _logger.warning(
                    "Could not load %s for baby %s; treating as empty",
                    kind.value,
                    baby_id,
                    exc_info=True,
                )
                unavailable.add(kind)
                continue
            baby = baby.with_entries(kind, entries)
        baby.unavailable_collections = frozenset(unavailable)
        return baby

    def add_entry(
        self, user_id: str | None, baby_id: str, entry: EntryT
    ) -> EntryT:
        """Persist an entry under a baby and return it with its id."""
        uid = require_user(user_id)
        if self.repository.get_baby(uid, baby_id) is None:
            raise NotFoundError(f"Baby {baby_id} not found")
        entry_id = self.repository.create_entry(uid, baby_id, entry)
        return entry.with_id(entry_id)

    def add_feed_entry(
        self, user_id: str | None, baby_id: str, entry: FeedEntry
    ) -> FeedEntry:
        return self.add_entry(user_id, baby_id, entry)

    def add_weight_entry(
        self, user_id: str | None, baby_id: str, entry: WeightEntry
    ) -> WeightEntry:
        return self.add_entry(user_id, baby_id, entry)

    def add_stool_entry(
        self, user_id: str | None, baby_id: str, entry: StoolEntry
    ) -> StoolEntry:
        return self.add_entry(user_id, baby_id, entry)

    def add_wet_diaper_entry(
        self, user_id: str | None, baby_id: str, entry: WetDiaperEntry
    ) -> WetDiaperEntry:
        return self.add_entry(user_id, baby_id, entry)

    def add_dehydration_check(
        self, user_id: str | None, baby_id: str, check: DehydrationCheck
    ) -> DehydrationCheck:
        return self.add_entry(user_id, baby_id, check)

    def delete_entry(
        self, user_id: str | None, baby_id: str, kind: EntryKind, entry_id: str
    ) -> None:
        """Delete one entry of a baby."""
        self.repository.delete_entry(require_user(user_id), baby_id, kind, entry_id)

    def delete_feed_entry(
        self, user_id: str | None, baby_id: str, entry_id: str
    ) -> None:
        self.delete_entry(user_id, baby_id, EntryKind.FEED, entry_id)

    def delete_weight_entry(
        self, user_id: str | None, baby_id: str, entry_id: str
    ) -> None:
        self.delete_entry(user_id, baby_id, EntryKind.WEIGHT, entry_id)

    def delete_stool_entry(
        self, user_id: str | None, baby_id: str, entry_id: str
    ) -> None:
        self.delete_entry(user_id, baby_id, EntryKind.STOOL, entry_id)

    def delete_wet_diaper_entry(
        self, user_id: str | None, baby_id: str, entry_id: str
    ) -> None:
        self.delete_entry(user_id, baby_id, EntryKind.WET_DIAPER, entry_id)

    def delete_dehydration_check(
        self, user_id: str | None, baby_id: str, entry_id: str
    ) -> None:
        self.delete_entry(user_id, baby_id, EntryKind.DEHYDRATION_CHECK, entry_id)

    def delete_baby(self, user_id: str | None, baby_id: str) -> None:
        """Delete every entry of a baby, then the baby document.

        The deletes run one after another and are not atomic. If one fails the
        error propagates and the remaining documents stay in place; calling
        this again finishes the job.
        """
        uid = require_user(user_id)
        if self.repository.get_baby(uid, baby_id) is None:
            raise NotFoundError(f"Baby {baby_id} not found")
        deleted = 0
        try:
            for kind in EntryKind:
                for entry_id in self.repository.list_entry_ids(uid, baby_id, kind):
                    self.repository.delete_entry(uid, baby_id, kind, entry_id)
                    deleted += 1
            self.repository.delete_baby(uid, baby_id)
        except Exception:
            _logger.exception(
                "Cascading delete of baby %s stopped after %s entries", baby_id, deleted
            )
            raise
        _logger.info("Deleted baby %s with %s entries", baby_id, deleted)
