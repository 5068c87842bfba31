"""Caller identity resolution."""

from dataclasses import dataclass
from typing import Protocol

from photo_share.domain.uploads import UploadContext

UNKNOWN_DEVICE = "unknown"


class IdentityProvider(Protocol):
    """Interface for resolving access tokens to user ids."""

    def resolve_user_id(self, access_token: str) -> str | None:
        """Return the user id for a valid access token."""


@dataclass
class IdentityService:
    """Builds the per-request upload context."""

    provider: IdentityProvider

    def resolve(
        self, access_token: str, device_id: str | None
    ) -> UploadContext | None:
        """Return the caller's context, or None when the token is invalid."""
        user_id = self.provider.resolve_user_id(access_token)
        if not user_id:
            return None
        return UploadContext(user_id=user_id, device_id=device_id or UNKNOWN_DEVICE)
