"""Supabase repository for babies and their entries."""

from dataclasses import dataclass

from supabase import Client

from feedbridge.domain.babies import Baby, BabySummary
from feedbridge.domain.codec import (
    Document,
    decode_baby_summary,
    decode_entries,
    encode_baby,
    encode_entry,
)
from feedbridge.domain.entries import Entry, EntryKind, kind_of
from feedbridge.domain.errors import RemoteStoreError
from feedbridge.services.babies import BabyRepository

BABIES_TABLE = "babies"
ENTRY_TABLES = {
    EntryKind.FEED: "feed_entries",
    EntryKind.WEIGHT: "weight_entries",
    EntryKind.STOOL: "stool_entries",
    EntryKind.WET_DIAPER: "wet_diaper_entries",
    EntryKind.DEHYDRATION_CHECK: "dehydration_checks",
}


@dataclass
class SupabaseBabyRepository(BabyRepository):
    """Supabase implementation of users/{user}/babies/{baby}/{entries}."""

    client: Client

    def create_baby(self, user_id: str, baby: Baby) -> str:
        """Create a baby row and return its id."""
        response = (
            self.client.table(BABIES_TABLE)
            .insert({"user_id": user_id, **encode_baby(baby)})
            .execute()
        )
        if not response.data:
            raise RemoteStoreError("Failed to create baby")
        return str(response.data[0]["id"])

    def list_babies(self, user_id: str) -> list[BabySummary]:
        """Return every baby of a user."""
        response = (
            self.client.table(BABIES_TABLE)
            .select("id, name, date_of_birth")
            .eq("user_id", user_id)
            .order("date_of_birth", desc=False)
            .execute()
        )
        return [decode_baby_summary(row) for row in response.data or []]

    def get_baby(self, user_id: str, baby_id: str) -> BabySummary | None:
        """Return a baby by id."""
        row = fetch_baby_document(self.client, user_id, baby_id)
        if row is None:
            return None
        return decode_baby_summary(row)

    def delete_baby(self, user_id: str, baby_id: str) -> None:
        """Delete a baby row."""
        self.client.table(BABIES_TABLE).delete().eq("user_id", user_id).eq(
            "id", baby_id
        ).execute()

    def create_entry(self, user_id: str, baby_id: str, entry: Entry) -> str:
        """Create an entry row in the table of its kind and return its id."""
        kind = kind_of(entry)
        response = (
            self.client.table(ENTRY_TABLES[kind])
            .insert({"user_id": user_id, "baby_id": baby_id, **encode_entry(entry)})
            .execute()
        )
        if not response.data:
            raise RemoteStoreError(f"Failed to create {kind.value} entry")
        return str(response.data[0]["id"])

    def list_entries(self, user_id: str, baby_id: str, kind: EntryKind) -> list[Entry]:
        """Return every decoded entry of a kind."""
        return decode_entries(
            kind, fetch_entry_documents(self.client, user_id, baby_id, kind)
        )

    def list_entry_ids(self, user_id: str, baby_id: str, kind: EntryKind) -> list[str]:
        """Return the ids of every entry of a kind."""
        response = (
            self.client.table(ENTRY_TABLES[kind])
            .select("id")
            .eq("user_id", user_id)
            .eq("baby_id", baby_id)
            .execute()
        )
        return [str(row["id"]) for row in response.data or []]

    def delete_entry(
        self, user_id: str, baby_id: str, kind: EntryKind, entry_id: str
    ) -> None:
        """Delete one entry row."""
        self.client.table(ENTRY_TABLES[kind]).delete().eq("user_id", user_id).eq(
            "baby_id", baby_id
        ).eq("id", entry_id).execute()


def fetch_baby_document(client: Client, user_id: str, baby_id: str) -> Document | None:
    """Return the raw baby row, or None when it does not exist."""
    response = (
        client.table(BABIES_TABLE)
        .select("id, name, date_of_birth")
        .eq("user_id", user_id)
        .eq("id", baby_id)
        .limit(1)
        .execute()
    )
    if not response.data:
        return None
    return response.data[0]


def fetch_entry_documents(
    client: Client, user_id: str, baby_id: str, kind: EntryKind
) -> list[Document]:
    """Return the raw entry rows of a kind in insertion order."""
    response = (
        client.table(ENTRY_TABLES[kind])
        .select("*")
        .eq("user_id", user_id)
        .eq("baby_id", baby_id)
        .order("created_at", desc=False)
        .execute()
    )
    return list(response.data or [])
