"""Account-level data removal."""

import logging
from dataclasses import dataclass

from feedbridge.services.babies import BabyService, require_user
from feedbridge.services.health_samples import HealthSampleRepository
from feedbridge.services.preferences import PreferencesRepository

_logger = logging.getLogger(__name__)


@dataclass
class AccountService:
    """Removes everything stored for a user when the account is deleted."""

    baby_service: BabyService
    health_sample_repository: HealthSampleRepository
    preferences_repository: PreferencesRepository

    def delete_account(self, user_id: str | None) -> int:
        """Delete all babies, mirrored samples and preferences of a user.

        Returns the number of babies removed.
        """
        uid = require_user(user_id)
        try:
            babies = self.baby_service.get_babies(uid)
            for baby in babies:
                self.baby_service.delete_baby(uid, baby.id)
            self.health_sample_repository.delete_all_samples(uid)
            self.preferences_repository.delete_preferences(uid)
        except Exception:
            _logger.exception("Could not delete user data for %s", uid)
            raise
        _logger.info("Deleted user data for %s (%s babies)", uid, len(babies))
        return len(babies)
