"""Supabase Auth identity resolution."""

import logging
from dataclasses import dataclass
from typing import Protocol

from supabase import Client

_logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    """Resolves an access token to a stable user id."""

    def resolve_user_id(self, access_token: str) -> str | None:
        """Return the user id for a token, or None if it is not valid."""


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Validates access tokens against Supabase Auth."""

    client: Client

    def resolve_user_id(self, access_token: str) -> str | None:
        """Return the Supabase user id for a token."""
        if not access_token:
            return None
        try:
            response = self.client.auth.get_user(access_token)
        except Exception:
            _logger.warning("Could not resolve access token", exc_info=True)
            return None
        if response is None or response.user is None:
            return None
        return str(response.user.id)
