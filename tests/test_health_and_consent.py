"""Tests for health sample mirroring and consent storage."""

from datetime import UTC, datetime

import pytest

from feedbridge.domain.errors import UnauthenticatedError
from feedbridge.domain.health import HealthSample
from feedbridge.services.consent import PDF_CONTENT_TYPE, ConsentService
from feedbridge.services.health_samples import HealthSampleService
from tests.conftest import FakeConsentStorage, InMemoryHealthSampleRepository

SAMPLE = HealthSample(
    id="hk-1", sample_type="bodyMass", payload={"value": 3.4, "unit": "kg"}
)


def test_mirror_sample_upserts_by_id() -> None:
    repository = InMemoryHealthSampleRepository()
    service = HealthSampleService(repository)

    assert service.mirror_sample("user-1", SAMPLE) is True
    assert service.mirror_sample("user-1", SAMPLE) is True

    assert list(repository.samples) == [("user-1", "hk-1")]


def test_mirror_sample_failure_is_reported_not_raised() -> None:
    service = HealthSampleService(InMemoryHealthSampleRepository(fail=True))

    assert service.mirror_sample("user-1", SAMPLE) is False
    assert service.remove_sample("user-1", SAMPLE.id) is False


def test_remove_sample() -> None:
    repository = InMemoryHealthSampleRepository()
    service = HealthSampleService(repository)
    service.mirror_sample("user-1", SAMPLE)

    assert service.remove_sample("user-1", SAMPLE.id) is True
    assert repository.samples == {}


def test_mirror_sample_requires_user() -> None:
    service = HealthSampleService(InMemoryHealthSampleRepository())

    with pytest.raises(UnauthenticatedError):
        service.mirror_sample(None, SAMPLE)


def test_store_consent_uses_timestamped_path() -> None:
    storage = FakeConsentStorage()
    service = ConsentService(storage)

    path = service.store_consent(
        "user-1", b"%PDF-1.7", now=datetime(2024, 5, 6, 7, 8, 9, tzinfo=UTC)
    )

    assert path == "user-1/consent/2024-05-06_070809.pdf"
    assert storage.uploads[path] == (b"%PDF-1.7", PDF_CONTENT_TYPE)


def test_store_consent_rejects_empty_document() -> None:
    service = ConsentService(FakeConsentStorage())

    with pytest.raises(ValueError):
        service.store_consent("user-1", b"")
