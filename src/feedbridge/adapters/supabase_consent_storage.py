"""Supabase Storage bucket for consent documents."""

from dataclasses import dataclass

from supabase import Client

from feedbridge.services.consent import ConsentStorage


@dataclass
class SupabaseConsentStorage(ConsentStorage):
    """Uploads consent documents to a storage bucket."""

    client: Client
    bucket: str = "consent"

    def upload(self, path: str, content: bytes, content_type: str) -> None:
        """Upload an object to the bucket."""
        self.client.storage.from_(self.bucket).upload(
            path=path,
            file=content,
            file_options={"content-type": content_type},
        )
