"""Polling snapshot source over Supabase tables."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

from supabase import Client

from feedbridge.adapters.supabase_baby_repository import (
    fetch_baby_document,
    fetch_entry_documents,
)
from feedbridge.domain.entries import EntryKind
from feedbridge.services.live_sync import (
    CollectionListener,
    DocumentListener,
    SnapshotSource,
    Subscription,
)

_logger = logging.getLogger(__name__)

_UNSET = object()
_JOIN_TIMEOUT_SECONDS = 5.0


class PollingSubscription:
    """Re-reads a snapshot on a daemon thread and emits it when it changes."""

    def __init__(
        self,
        fetch: Callable[[], object],
        listener: Callable[[object, Exception | None], None],
        interval_seconds: float,
        name: str,
    ) -> None:
        self._fetch = fetch
        self._listener = listener
        self._interval_seconds = interval_seconds
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        """Stop polling and wait for the poll thread to exit.

        The current read, if any, is discarded. Called from the poll thread
        itself (a listener cancelling its own subscription) it only signals.
        """
        self._stopped.set()
        if threading.current_thread() is self._thread:
            return
        self._thread.join(timeout=_JOIN_TIMEOUT_SECONDS)
        if self._thread.is_alive():
            _logger.warning("Snapshot poll %s did not stop in time", self._thread.name)

    @property
    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def _run(self) -> None:
        last: object = _UNSET
        while not self._stopped.is_set():
            try:
                snapshot = self._fetch()
            except Exception as exc:
                _logger.warning("Snapshot poll %s failed: %s", self._thread.name, exc)
                if not self._stopped.is_set():
                    self._listener(None, exc)
            else:
                if snapshot != last and not self._stopped.is_set():
                    last = snapshot
                    self._listener(snapshot, None)
            self._stopped.wait(self._interval_seconds)


@dataclass
class PollingSnapshotSource(SnapshotSource):
    """Snapshot source that polls the baby row and its entry tables."""

    client: Client
    interval_seconds: float = 2.0

    def watch_baby(
        self, user_id: str, baby_id: str, listener: DocumentListener
    ) -> Subscription:
        """Poll the baby row."""
        return PollingSubscription(
            fetch=lambda: fetch_baby_document(self.client, user_id, baby_id),
            listener=listener,
            interval_seconds=self.interval_seconds,
            name=f"baby:{baby_id}",
        )

    def watch_collection(
        self,
        user_id: str,
        baby_id: str,
        kind: EntryKind,
        listener: CollectionListener,
    ) -> Subscription:
        """Poll one entry table of the baby."""
        return PollingSubscription(
            fetch=lambda: fetch_entry_documents(self.client, user_id, baby_id, kind),
            listener=listener,
            interval_seconds=self.interval_seconds,
            name=f"{kind.value}:{baby_id}",
        )
