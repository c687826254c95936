"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import uuid4

import pytest

from feedbridge.adapters.supabase_identity_provider import IdentityProvider
from feedbridge.config import Settings
from feedbridge.containers import AppContainer
from feedbridge.domain.babies import Baby, BabySummary
from feedbridge.domain.codec import (
    Document,
    decode_baby_summary,
    decode_entries,
    encode_baby,
    encode_entry,
)
from feedbridge.domain.entries import Entry, EntryKind, kind_of
from feedbridge.domain.health import HealthSample
from feedbridge.domain.preferences import Preferences
from feedbridge.services.accounts import AccountService
from feedbridge.services.babies import BabyRepository, BabyService
from feedbridge.services.consent import ConsentService, ConsentStorage
from feedbridge.services.dashboard import DashboardService
from feedbridge.services.health_samples import (
    HealthSampleRepository,
    HealthSampleService,
)
from feedbridge.services.live_sync import (
    CollectionListener,
    DocumentListener,
    SnapshotSource,
)
from feedbridge.services.preferences import (
    PreferencesRepository,
    PreferencesService,
)


class StoreFailure(Exception):
    """Simulated remote store failure."""


@dataclass
class InMemoryBabyRepository(BabyRepository):
    """Stores encoded documents keyed like users/{user}/babies/{baby}/{kind}."""

    babies: dict[tuple[str, str], Document] = field(default_factory=dict)
    entries: dict[tuple[str, str, EntryKind], dict[str, Document]] = field(
        default_factory=dict
    )
    fail_on: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise StoreFailure(operation)

    def create_baby(self, user_id: str, baby: Baby) -> str:
        self._check("create_baby")
        baby_id = str(uuid4())
        self.babies[(user_id, baby_id)] = {"id": baby_id, **encode_baby(baby)}
        return baby_id

    def list_babies(self, user_id: str) -> list[BabySummary]:
        self._check("list_babies")
        return [
            decode_baby_summary(document)
            for (owner, _), document in self.babies.items()
            if owner == user_id
        ]

    def get_baby(self, user_id: str, baby_id: str) -> BabySummary | None:
        self._check("get_baby")
        document = self.babies.get((user_id, baby_id))
        return decode_baby_summary(document) if document else None

    def delete_baby(self, user_id: str, baby_id: str) -> None:
        self._check("delete_baby")
        self.babies.pop((user_id, baby_id), None)

    def create_entry(self, user_id: str, baby_id: str, entry: Entry) -> str:
        kind = kind_of(entry)
        self._check(f"create_entry:{kind.value}")
        entry_id = str(uuid4())
        collection = self.entries.setdefault((user_id, baby_id, kind), {})
        collection[entry_id] = {"id": entry_id, **encode_entry(entry)}
        return entry_id

    def list_entries(self, user_id: str, baby_id: str, kind: EntryKind) -> list[Entry]:
        self._check(f"list_entries:{kind.value}")
        return decode_entries(kind, self.documents(user_id, baby_id, kind))

    def list_entry_ids(self, user_id: str, baby_id: str, kind: EntryKind) -> list[str]:
        self._check(f"list_entry_ids:{kind.value}")
        return list(self.entries.get((user_id, baby_id, kind), {}))

    def delete_entry(
        self, user_id: str, baby_id: str, kind: EntryKind, entry_id: str
    ) -> None:
        self._check(f"delete_entry:{kind.value}")
        self.entries.get((user_id, baby_id, kind), {}).pop(entry_id, None)

    def documents(self, user_id: str, baby_id: str, kind: EntryKind) -> list[Document]:
        return list(self.entries.get((user_id, baby_id, kind), {}).values())


@dataclass
class InMemoryPreferencesRepository(PreferencesRepository):
    """In-memory preferences repository for tests."""

    preferences: dict[str, Preferences] = field(default_factory=dict)

    def get_preferences(self, user_id: str) -> Preferences | None:
        return self.preferences.get(user_id)

    def save_preferences(self, user_id: str, preferences: Preferences) -> None:
        self.preferences[user_id] = preferences

    def delete_preferences(self, user_id: str) -> None:
        self.preferences.pop(user_id, None)


@dataclass
class InMemoryHealthSampleRepository(HealthSampleRepository):
    """In-memory health sample repository for tests."""

    samples: dict[tuple[str, str], HealthSample] = field(default_factory=dict)
    fail: bool = False

    def upsert_sample(self, user_id: str, sample: HealthSample) -> None:
        if self.fail:
            raise StoreFailure("upsert_sample")
        self.samples[(user_id, sample.id)] = sample

    def delete_sample(self, user_id: str, sample_id: str) -> None:
        if self.fail:
            raise StoreFailure("delete_sample")
        self.samples.pop((user_id, sample_id), None)

    def delete_all_samples(self, user_id: str) -> None:
        for key in [key for key in self.samples if key[0] == user_id]:
            del self.samples[key]


@dataclass
class FakeConsentStorage(ConsentStorage):
    """Fake object storage that records uploads."""

    uploads: dict[str, tuple[bytes, str]] = field(default_factory=dict)

    def upload(self, path: str, content: bytes, content_type: str) -> None:
        self.uploads[path] = (content, content_type)


@dataclass
class FakeIdentityProvider(IdentityProvider):
    """Fake identity provider with a fixed token table."""

    tokens: dict[str, str] = field(default_factory=lambda: {"token-1": "user-1"})

    def resolve_user_id(self, access_token: str) -> str | None:
        return self.tokens.get(access_token)


@dataclass
class FakeSubscription:
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class FakeSnapshotSource(SnapshotSource):
    """Records listeners so tests can push snapshots by hand."""

    baby_listeners: list[DocumentListener] = field(default_factory=list)
    collection_listeners: dict[EntryKind, list[CollectionListener]] = field(
        default_factory=dict
    )
    subscriptions: list[FakeSubscription] = field(default_factory=list)
    on_watch: Callable[["FakeSnapshotSource"], None] | None = None

    def watch_baby(
        self, user_id: str, baby_id: str, listener: DocumentListener
    ) -> FakeSubscription:
        self.baby_listeners.append(listener)
        return self._subscription()

    def watch_collection(
        self,
        user_id: str,
        baby_id: str,
        kind: EntryKind,
        listener: CollectionListener,
    ) -> FakeSubscription:
        self.collection_listeners.setdefault(kind, []).append(listener)
        subscription = self._subscription()
        if self.on_watch and len(self.collection_listeners) == len(EntryKind):
            self.on_watch(self)
        return subscription

    def _subscription(self) -> FakeSubscription:
        subscription = FakeSubscription()
        self.subscriptions.append(subscription)
        return subscription

    def push_baby(
        self, document: Document | None, error: Exception | None = None
    ) -> None:
        self.baby_listeners[-1](document, error)

    def push_collection(
        self,
        kind: EntryKind,
        documents: list[Document] | None,
        error: Exception | None = None,
    ) -> None:
        self.collection_listeners[kind][-1](documents, error)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def baby_repository() -> InMemoryBabyRepository:
    return InMemoryBabyRepository()


@pytest.fixture
def preferences_repository() -> InMemoryPreferencesRepository:
    return InMemoryPreferencesRepository()


@pytest.fixture
def health_sample_repository() -> InMemoryHealthSampleRepository:
    return InMemoryHealthSampleRepository()


@pytest.fixture
def consent_storage() -> FakeConsentStorage:
    return FakeConsentStorage()


@pytest.fixture
def snapshot_source() -> FakeSnapshotSource:
    return FakeSnapshotSource()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    baby_repository: InMemoryBabyRepository,
    preferences_repository: InMemoryPreferencesRepository,
    health_sample_repository: InMemoryHealthSampleRepository,
    consent_storage: FakeConsentStorage,
    snapshot_source: FakeSnapshotSource,
) -> AppContainer:
    baby_service = BabyService(baby_repository)
    preferences_service = PreferencesService(preferences_repository)
    return AppContainer(
        settings=settings,
        identity_provider=FakeIdentityProvider(),
        baby_service=baby_service,
        preferences_service=preferences_service,
        dashboard_service=DashboardService(
            baby_service=baby_service, preferences_service=preferences_service
        ),
        health_sample_service=HealthSampleService(health_sample_repository),
        consent_service=ConsentService(consent_storage),
        account_service=AccountService(
            baby_service=baby_service,
            health_sample_repository=health_sample_repository,
            preferences_repository=preferences_repository,
        ),
        snapshot_source=snapshot_source,
    )
