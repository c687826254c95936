"""Storage of signed consent documents."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from feedbridge.services.babies import require_user

_logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


class ConsentStorage(Protocol):
    """Binary object storage for consent documents."""

    def upload(self, path: str, content: bytes, content_type: str) -> None:
        """Write an object at the given path."""


@dataclass
class ConsentService:
    """Stores consent PDFs under a timestamped path per user."""

    storage: ConsentStorage

    def store_consent(
        self, user_id: str | None, pdf: bytes, now: datetime | None = None
    ) -> str:
        """Upload a consent PDF and return its storage path."""
        uid = require_user(user_id)
        if not pdf:
            raise ValueError("Consent document is empty")
        stamp = (now or datetime.now(tz=UTC)).strftime("%Y-%m-%d_%H%M%S")
        path = f"{uid}/consent/{stamp}.pdf"
        try:
            self.storage.upload(path, pdf, PDF_CONTENT_TYPE)
        except Exception:
            _logger.exception("Could not store consent form")
            raise
        return path
