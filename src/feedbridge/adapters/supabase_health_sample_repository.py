"""Supabase repository for mirrored health samples."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from feedbridge.domain.health import HealthSample
from feedbridge.services.health_samples import HealthSampleRepository


@dataclass
class SupabaseHealthSampleRepository(HealthSampleRepository):
    """Supabase implementation keyed by (user_id, sample id)."""

    client: Client

    def upsert_sample(self, user_id: str, sample: HealthSample) -> None:
        """Insert or replace a sample row."""
        self.client.table("health_samples").upsert(
            {
                "id": sample.id,
                "user_id": user_id,
                "sample_type": sample.sample_type,
                "payload": sample.payload,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id,id",
        ).execute()

    def delete_sample(self, user_id: str, sample_id: str) -> None:
        """Delete one sample row."""
        self.client.table("health_samples").delete().eq("user_id", user_id).eq(
            "id", sample_id
        ).execute()

    def delete_all_samples(self, user_id: str) -> None:
        """Delete every sample row of a user."""
        self.client.table("health_samples").delete().eq("user_id", user_id).execute()
