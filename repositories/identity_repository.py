"""
Identity resolution through Supabase Auth.

Resolves the caller's access token (JWT) to the authenticated campaign owner.
A missing, expired or invalid token resolves to no identity.
"""

from __future__ import annotations

import logging
from typing import Optional

from supabase import AuthError  # type: ignore[import-not-found]

from domain.identity import Identity
from repositories.client import Client, get_supabase_client

logger = logging.getLogger(__name__)


class SupabaseIdentityResolver:
    """Resolves one request's bearer token to an Identity."""

    def __init__(self, access_token: Optional[str], client: Optional[Client] = None) -> None:
        self._access_token = access_token
        self._client = client

    def get_current_identity(self) -> Optional[Identity]:
        if not self._access_token:
            return None

        client = self._client or get_supabase_client()
        try:
            response = client.auth.get_user(self._access_token)
        except AuthError as e:
            logger.info(
                "Access token rejected by Supabase Auth",
                extra={"reason": str(e)},
            )
            return None

        user = getattr(response, "user", None)
        if user is None:
            return None

        return Identity(user_id=str(user.id), email=getattr(user, "email", None))


__all__ = ["SupabaseIdentityResolver"]
