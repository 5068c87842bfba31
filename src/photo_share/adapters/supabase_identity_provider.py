"""Supabase Auth-backed identity provider."""

import logging
from dataclasses import dataclass

from supabase import Client

from photo_share.services.identity import IdentityProvider

logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Resolves access tokens through Supabase Auth."""

    client: Client

    def resolve_user_id(self, access_token: str) -> str | None:
        """Return the Supabase user id for an access token."""
        try:
            response = self.client.auth.get_user(access_token)
        except Exception as exc:
            logger.warning("Rejected access token: %s", type(exc).__name__)
            return None
        if response is None or response.user is None:
            return None
        return str(response.user.id)
