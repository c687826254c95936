"""Tests for account data removal."""

from datetime import UTC, datetime

import pytest

from feedbridge.domain.babies import Baby
from feedbridge.domain.entries import EntryKind, WeightEntry
from feedbridge.domain.health import HealthSample
from feedbridge.domain.preferences import Preferences
from feedbridge.services.accounts import AccountService
from feedbridge.services.babies import BabyService
from tests.conftest import (
    InMemoryBabyRepository,
    InMemoryHealthSampleRepository,
    InMemoryPreferencesRepository,
    StoreFailure,
)

BIRTH = datetime(2024, 1, 15, tzinfo=UTC)


def _account() -> tuple[
    AccountService,
    InMemoryBabyRepository,
    InMemoryHealthSampleRepository,
    InMemoryPreferencesRepository,
]:
    babies = InMemoryBabyRepository()
    samples = InMemoryHealthSampleRepository()
    preferences = InMemoryPreferencesRepository()
    service = AccountService(
        baby_service=BabyService(babies),
        health_sample_repository=samples,
        preferences_repository=preferences,
    )
    return service, babies, samples, preferences


def test_delete_account_removes_everything_of_user() -> None:
    service, babies, samples, preferences = _account()
    baby_service = service.baby_service
    for name in ("Ada", "Grace"):
        baby = baby_service.add_baby("user-1", Baby(name=name, date_of_birth=BIRTH))
        baby_service.add_weight_entry("user-1", baby.id, WeightEntry(3000))
    other = baby_service.add_baby("user-2", Baby(name="Ada", date_of_birth=BIRTH))
    samples.upsert_sample("user-1", HealthSample(id="s1", sample_type="bodyMass"))
    preferences.save_preferences("user-1", Preferences(selected_baby_id="x"))

    removed = service.delete_account("user-1")

    assert removed == 2
    assert baby_service.get_babies("user-1") == []
    assert [baby.id for baby in baby_service.get_babies("user-2")] == [other.id]
    assert not any(key[0] == "user-1" for key in babies.entries if babies.entries[key])
    assert samples.samples == {}
    assert preferences.get_preferences("user-1") is None


def test_delete_account_propagates_store_failure() -> None:
    service, babies, _, preferences = _account()
    baby = service.baby_service.add_baby(
        "user-1", Baby(name="Ada", date_of_birth=BIRTH)
    )
    service.baby_service.add_weight_entry("user-1", baby.id, WeightEntry(3000))
    preferences.save_preferences("user-1", Preferences())
    babies.fail_on.add(f"delete_entry:{EntryKind.WEIGHT.value}")

    with pytest.raises(StoreFailure):
        service.delete_account("user-1")

    assert preferences.get_preferences("user-1") == Preferences()
