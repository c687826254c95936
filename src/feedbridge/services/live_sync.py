"""Live synchronisation of one baby with the remote store."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from feedbridge.domain.babies import Baby
from feedbridge.domain.codec import Document, decode_baby_summary, decode_entries
from feedbridge.domain.entries import EntryKind
from feedbridge.domain.errors import DecodeError, UnauthenticatedError

_logger = logging.getLogger(__name__)

DocumentListener = Callable[[Document | None, Exception | None], None]
CollectionListener = Callable[[list[Document] | None, Exception | None], None]
BabyObserver = Callable[["SyncUpdate"], None]

_COLLECTION_LABELS = {
    EntryKind.FEED: "feed entries",
    EntryKind.WEIGHT: "weight entries",
    EntryKind.STOOL: "stool entries",
    EntryKind.WET_DIAPER: "wet diaper entries",
    EntryKind.DEHYDRATION_CHECK: "dehydration checks",
}


class Subscription(Protocol):
    """Handle for a registered snapshot listener."""

    def cancel(self) -> None:
        """Stop delivering snapshots."""


class SnapshotSource(Protocol):
    """Source of full-content snapshots for a baby and its sub-collections."""

    def watch_baby(
        self, user_id: str, baby_id: str, listener: DocumentListener
    ) -> Subscription:
        """Deliver the baby document (None when missing) whenever it changes."""

    def watch_collection(
        self,
        user_id: str,
        baby_id: str,
        kind: EntryKind,
        listener: CollectionListener,
    ) -> Subscription:
        """Deliver every document of a sub-collection whenever it changes."""


@dataclass(frozen=True)
class SyncUpdate:
    """State of a live sync captured when an observer is notified."""

    baby: Baby | None
    error: str | None
    loading: bool


@dataclass(frozen=True)
class SyncHandle:
    """Cancellable handle returned by ``LiveBabySync.start_listening``."""

    sync: "LiveBabySync"
    generation: int

    def cancel(self) -> None:
        """Stop the sync if it is still tracking this subscription set."""
        self.sync.stop_listening(self.generation)


class LiveBabySync:
    """Keeps one in-memory Baby current with six snapshot streams.

    The baby document and each of the five entry sub-collections update their
    own slice of the snapshot independently, so slices may reflect different
    points in time. All state changes and observer notifications happen under
    one lock; once ``stop_listening`` returns no listener touches the state.
    """

    def __init__(self, source: SnapshotSource) -> None:
        self.source = source
        self.baby: Baby | None = None
        self.baby_id: str | None = None
        self.error_message: str | None = None
        self.is_loading = False
        self._lock = threading.RLock()
        self._generation = 0
        self._subscriptions: list[Subscription] = []
        self._observers: list[BabyObserver] = []

    def add_observer(self, observer: BabyObserver) -> Callable[[], None]:
        """Register a callback for every new snapshot; returns a remover."""
        with self._lock:
            self._observers.append(observer)

        def remove() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return remove

    def start_listening(self, user_id: str | None, baby_id: str) -> SyncHandle:
        """Subscribe to a baby, replacing any previous subscription set."""
        if not user_id:
            with self._lock:
                self.error_message = "User is not authenticated."
            raise UnauthenticatedError
        self.stop_listening()
        with self._lock:
            self._generation += 1
            generation = self._generation
            self.baby = None
            self.baby_id = baby_id
            self.error_message = None
            self.is_loading = True
            subscriptions = [
                self.source.watch_baby(
                    user_id,
                    baby_id,
                    lambda document, error: self._on_baby(generation, document, error),
                )
            ]
            for kind in EntryKind:
                subscriptions.append(
                    self.source.watch_collection(
                        user_id,
                        baby_id,
                        kind,
                        self._collection_listener(generation, kind),
                    )
                )
            self._subscriptions = subscriptions
        _logger.info("Listening to baby %s", baby_id)
        return SyncHandle(sync=self, generation=generation)

    def stop_listening(self, generation: int | None = None) -> None:
        """Cancel every subscription. Safe to call repeatedly."""
        with self._lock:
            if generation is not None and generation != self._generation:
                return
            self._generation += 1
            subscriptions = self._subscriptions
            self._subscriptions = []
            self.is_loading = False
            if subscriptions:
                _logger.info("Stopped listening to baby %s", self.baby_id)
        for subscription in subscriptions:
            subscription.cancel()

    @property
    def is_listening(self) -> bool:
        with self._lock:
            return bool(self._subscriptions)

    def _collection_listener(
        self, generation: int, kind: EntryKind
    ) -> CollectionListener:
        def listener(documents: list[Document] | None, error: Exception | None) -> None:
            self._on_collection(generation, kind, documents, error)

        return listener

    def _on_baby(
        self, generation: int, document: Document | None, error: Exception | None
    ) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self.is_loading = False
            if error is not None:
                self.error_message = f"Failed to load baby document: {error}"
                self._notify()
                return
            if document is None:
                self.baby = None
                self._notify()
                return
            try:
                summary = decode_baby_summary(document)
            except DecodeError as exc:
                _logger.warning("Could not decode baby document: %s", exc)
                self.error_message = f"Failed to decode baby document: {exc}"
                self._notify()
                return
            if self.baby is None:
                self.baby = Baby(
                    name=summary.name,
                    date_of_birth=summary.date_of_birth,
                    id=summary.id,
                )
            else:
                self.baby = self.baby.with_details(summary)
            self._notify()

    def _on_collection(
        self,
        generation: int,
        kind: EntryKind,
        documents: list[Document] | None,
        error: Exception | None,
    ) -> None:
        label = _COLLECTION_LABELS[kind]
        with self._lock:
            if generation != self._generation:
                return
            if error is not None:
                self.error_message = f"Failed to load {label}: {error}"
                self._notify()
                return
            if documents is None:
                return
            try:
                entries = decode_entries(kind, documents)
            except DecodeError as exc:
                _logger.warning("Could not decode %s: %s", label, exc)
                self.error_message = f"Failed to decode {label}: {exc}"
                self._notify()
                return
            current = self.baby or Baby.placeholder()
            self.baby = current.with_entries(kind, entries)
            self._notify()

    def _notify(self) -> None:
        update = SyncUpdate(
            baby=self.baby, error=self.error_message, loading=self.is_loading
        )
        for observer in list(self._observers):
            try:
                observer(update)
            except Exception:
                _logger.exception("Live sync observer failed")
