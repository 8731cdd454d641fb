"""Supabase-backed access token verification."""

import logging
from dataclasses import dataclass

from supabase import AuthError, Client

from activity_tracker.services.auth import AuthClient

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthClient(AuthClient):
    """Resolves Supabase access tokens to user ids."""

    client: Client

    def get_user_id(self, access_token: str) -> str | None:
        """Return the token's user id, or None if Supabase rejects it."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError as exc:
            _logger.info("Rejected access token: %s", exc)
            return None
        if response is None or response.user is None:
            return None
        return str(response.user.id)
