"""User preference service."""

from dataclasses import dataclass, replace
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from feedbridge.domain.babies import BabySummary
from feedbridge.domain.preferences import Preferences
from feedbridge.domain.units import WeightUnit
from feedbridge.services.babies import require_user


class PreferencesRepository(Protocol):
    """Persistence interface for user preferences."""

    def get_preferences(self, user_id: str) -> Preferences | None:
        """Return stored preferences, if any."""

    def save_preferences(self, user_id: str, preferences: Preferences) -> None:
        """Create or replace the stored preferences."""

    def delete_preferences(self, user_id: str) -> None:
        """Remove stored preferences."""


@dataclass
class PreferencesService:
    """Service for the selected baby, weight unit and timezone."""

    repository: PreferencesRepository
    default_timezone: str = "UTC"

    def get(self, user_id: str | None) -> Preferences:
        """Return preferences, falling back to defaults when unset."""
        uid = require_user(user_id)
        stored = self.repository.get_preferences(uid)
        return stored or Preferences(timezone=self.default_timezone)

    def update(
        self,
        user_id: str | None,
        *,
        weight_unit: WeightUnit | None = None,
        timezone: str | None = None,
    ) -> Preferences:
        """Change the weight unit and/or timezone."""
        uid = require_user(user_id)
        current = self.get(uid)
        if timezone is not None and not is_valid_timezone(timezone):
            raise ValueError(f"Unknown timezone: {timezone}")
        updated = replace(
            current,
            weight_unit=WeightUnit(weight_unit) if weight_unit else current.weight_unit,
            timezone=timezone or current.timezone,
        )
        self.repository.save_preferences(uid, updated)
        return updated

    def select_baby(self, user_id: str | None, baby_id: str | None) -> Preferences:
        """Remember the selected baby (None clears the selection)."""
        uid = require_user(user_id)
        updated = replace(self.get(uid), selected_baby_id=baby_id)
        self.repository.save_preferences(uid, updated)
        return updated

    def resolve_selected_baby(
        self, user_id: str | None, babies: list[BabySummary]
    ) -> str | None:
        """Return the saved baby if it still exists, else select the first one."""
        uid = require_user(user_id)
        saved = self.get(uid).selected_baby_id
        if saved is not None and any(baby.id == saved for baby in babies):
            return saved
        selected = babies[0].id if babies else None
        if selected != saved:
            self.select_baby(uid, selected)
        return selected

    def timezone(self, user_id: str | None) -> ZoneInfo:
        """Return the user's timezone for calendar-day bucketing."""
        return ZoneInfo(self.get(user_id).timezone)


def is_valid_timezone(value: str) -> bool:
    """Return True if the value names a known IANA timezone."""
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True
