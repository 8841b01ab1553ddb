"""Account passwords.

Hashes are argon2id strings stored in auth_identities.password_hash.
"""

from __future__ import annotations

import argon2
from argon2.exceptions import InvalidHashError, VerifyMismatchError

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 128

_hasher = argon2.PasswordHasher(type=argon2.Type.ID)


class PasswordStrengthError(ValueError):
    """Password rejected at sign-up."""


def check_password_strength(password: str) -> None:
    """Reject passwords shorter or longer than the allowed range.

    Raises:
        PasswordStrengthError: With a message suitable for the client
    """
    length = len(password)
    if not MIN_PASSWORD_LENGTH <= length <= MAX_PASSWORD_LENGTH:
        raise PasswordStrengthError(
            f"Password must be {MIN_PASSWORD_LENGTH}-{MAX_PASSWORD_LENGTH} characters"
        )


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a sign-in attempt against the stored hash."""
    try:
        return _hasher.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHashError):
        return False
