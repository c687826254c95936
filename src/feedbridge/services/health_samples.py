"""Mirroring of device health samples into the user's store."""

import logging
from dataclasses import dataclass
from typing import Protocol

from feedbridge.domain.health import HealthSample
from feedbridge.services.babies import require_user

_logger = logging.getLogger(__name__)


class HealthSampleRepository(Protocol):
    """Persistence interface for mirrored health samples."""

    def upsert_sample(self, user_id: str, sample: HealthSample) -> None:
        """Store a sample under its own id."""

    def delete_sample(self, user_id: str, sample_id: str) -> None:
        """Delete a sample by id."""

    def delete_all_samples(self, user_id: str) -> None:
        """Delete every sample of a user."""


@dataclass
class HealthSampleService:
    """Mirrors samples one document per sample id; failures are only logged."""

    repository: HealthSampleRepository

    def mirror_sample(self, user_id: str | None, sample: HealthSample) -> bool:
        """Store a sample. Returns False if the store rejected it."""
        uid = require_user(user_id)
        try:
            self.repository.upsert_sample(uid, sample)
        except Exception:
            _logger.exception("Could not store health sample %s", sample.id)
            return False
        return True

    def remove_sample(self, user_id: str | None, sample_id: str) -> bool:
        """Delete a mirrored sample. Returns False if the delete failed."""
        uid = require_user(user_id)
        try:
            self.repository.delete_sample(uid, sample_id)
        except Exception:
            _logger.exception("Could not remove health sample %s", sample_id)
            return False
        return True
