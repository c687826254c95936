"""Supabase repository for user preferences."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from feedbridge.domain.preferences import Preferences
from feedbridge.domain.units import WeightUnit
from feedbridge.services.preferences import PreferencesRepository


@dataclass
class SupabasePreferencesRepository(PreferencesRepository):
    """Supabase implementation for user preferences."""

    client: Client

    def get_preferences(self, user_id: str) -> Preferences | None:
        """Return the stored preferences for a user."""
        response = (
            self.client.table("user_settings")
            .select("selected_baby_id, weight_unit, timezone")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        selected = row.get("selected_baby_id")
        return Preferences(
            selected_baby_id=str(selected) if selected else None,
            weight_unit=WeightUnit(row.get("weight_unit") or WeightUnit.KILOGRAMS),
            timezone=row.get("timezone") or "UTC",
        )

    def save_preferences(self, user_id: str, preferences: Preferences) -> None:
        """Create or update the user's preferences row."""
        self.client.table("user_settings").upsert(
            {
                "user_id": user_id,
                "selected_baby_id": preferences.selected_baby_id,
                "weight_unit": preferences.weight_unit.value,
                "timezone": preferences.timezone,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()

    def delete_preferences(self, user_id: str) -> None:
        """Delete the user's preferences row."""
        self.client.table("user_settings").delete().eq("user_id", user_id).execute()
