import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from pydantic import BaseModel

from core.errors import AuthenticationError
from core.models.identity import Anonymous, Authenticated

logger = logging.getLogger(__name__)


class AuthUser(BaseModel):
    user_id: str
    email: str
    name: str
    metadata: dict[str, str]


class AuthProvider(ABC):
    @abstractmethod
    async def verify_token(self, token: str) -> AuthUser: ...

    @abstractmethod
    async def get_user(self, user_id: str) -> AuthUser: ...


def get_auth_provider() -> AuthProvider:
    from core.config import get_config

    config = get_config()
    clerk_secret = config.clerk_secret_key
    if not clerk_secret:
        raise ValueError("CLERK_SECRET_KEY not configured")

    from core.auth.clerk_provider import ClerkAuthProvider

    return ClerkAuthProvider(secret_key=clerk_secret)


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def resolve_requester(
    token: str | None,
    provider_factory: Callable[[], AuthProvider] = get_auth_provider,
) -> Authenticated | Anonymous:
    """Resolve an optional bearer token to a requester.

    No token means anonymous. A token that fails verification is also treated
    as anonymous, so read paths never error on a stale session.
    """
    if not token:
        return Anonymous()
    try:
        user = await provider_factory().verify_token(token)
    except AuthenticationError as e:
        logger.warning("Optional authentication failed, continuing as anonymous: %s", e.message)
        return Anonymous()
    return Authenticated(user_id=user.user_id)
