"""Tests for password hashing and strength checks."""

import pytest

from socialhub.auth.passwords import (
    MAX_PASSWORD_LENGTH,
    MIN_PASSWORD_LENGTH,
    PasswordStrengthError,
    check_password_strength,
    hash_password,
    verify_password,
)


class TestHashing:
    def test_hash_is_argon2id(self):
        hashed = hash_password("secret123")
        assert hashed.startswith("$argon2id$")
        assert hashed != hash_password("secret123")

    def test_verify(self):
        hashed = hash_password("secret123")
        assert verify_password("secret123", hashed)
        assert not verify_password("secret124", hashed)

    def test_garbage_hash_does_not_raise(self):
        assert verify_password("secret123", "not-a-hash") is False


class TestStrength:
    """Tests for check_password_strength."""

    @pytest.mark.parametrize("length", [MIN_PASSWORD_LENGTH, MAX_PASSWORD_LENGTH])
    def test_bounds_accepted(self, length):
        check_password_strength("x" * length)

    @pytest.mark.parametrize("length", [0, MIN_PASSWORD_LENGTH - 1, MAX_PASSWORD_LENGTH + 1])
    def test_out_of_range_rejected(self, length):
        with pytest.raises(PasswordStrengthError, match="characters"):
            check_password_strength("x" * length)
