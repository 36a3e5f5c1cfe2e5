"""Authentication abstraction layer: resolves bearer tokens to requesters."""

from core.auth.clerk_provider import ClerkAuthProvider
from core.auth.interface import (
    AuthProvider,
    AuthUser,
    bearer_token,
    get_auth_provider,
    resolve_requester,
)

__all__ = [
    "AuthProvider",
    "AuthUser",
    "ClerkAuthProvider",
    "bearer_token",
    "get_auth_provider",
    "resolve_requester",
]
