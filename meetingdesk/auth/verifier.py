"""Caller authentication: bearer token parsing and resolution to a user via Supabase Auth."""
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

import httpx
from supabase import AuthError, Client

from meetingdesk.guardrails.errors import Unauthorized

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Not authorized"


@dataclass(frozen=True)
class UserIdentity:
    user_id: str
    email: Optional[str] = None


class IdentityVerifier(Protocol):
    def verify(self, credential: Optional[str]) -> UserIdentity:
        ...


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an 'Authorization: Bearer <token>' header value, or None when the header is missing, empty, or uses another scheme."""
    if not (authorization or "").strip():
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


class SupabaseIdentityVerifier:
    """Resolves a session access token to a user with Supabase Auth (auth.get_user(jwt)). Any failure, including the identity service being unreachable, is reported as Unauthorized.
    Why available: The extraction endpoint must reject unauthenticated callers before spending a model request."""

    def __init__(self, client_factory: Callable[[], Client]):
        self._client_factory = client_factory

    def verify(self, credential: Optional[str]) -> UserIdentity:
        if not credential:
            raise Unauthorized(UNAUTHORIZED_MESSAGE)

        try:
            resp = self._client_factory().auth.get_user(credential)
        except (AuthError, httpx.HTTPError):
            logger.warning("identity_verification_failed", exc_info=True)
            raise Unauthorized(UNAUTHORIZED_MESSAGE)

        user = getattr(resp, "user", None) if resp is not None else None
        if user is None or not getattr(user, "id", None):
            raise Unauthorized(UNAUTHORIZED_MESSAGE)
        return UserIdentity(user_id=str(user.id), email=getattr(user, "email", None))
