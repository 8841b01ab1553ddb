"""Authentication: password hashing and the session holder."""

from socialhub.auth.session import (
    AuthError,
    AuthEvent,
    AuthUser,
    NotAuthenticatedError,
    SessionHolder,
    UserProfile,
)

__all__ = [
    "AuthError",
    "AuthEvent",
    "AuthUser",
    "NotAuthenticatedError",
    "SessionHolder",
    "UserProfile",
]
