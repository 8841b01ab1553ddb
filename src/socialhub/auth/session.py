"""Auth session holder.

Wraps sign-up/sign-in/sign-out against the record store and exposes the
current user and profile to every page:

    session = SessionHolder(get_client())
    session.sign_in("ana@example.com", "secret123")
    page = NotesPage(client, session)

Listeners registered with subscribe() hear SIGNED_IN / SIGNED_OUT.
"""

from __future__ import annotations

import secrets
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Callable

import structlog

from socialhub.auth.passwords import (
    PasswordStrengthError,
    check_password_strength,
    hash_password,
    verify_password,
)
from socialhub.db.client import DataClient, utc_now
from socialhub.db.errors import DataClientError
from socialhub.utils.validators import validate_email, validate_username

logger = structlog.get_logger(__name__)

# Profile fields a user may change themselves
EDITABLE_PROFILE_FIELDS = frozenset(
    {"full_name", "avatar_url", "bio", "website", "location", "birth_date", "is_private"}
)


class AuthError(Exception):
    """Sign-up or sign-in rejected."""


class NotAuthenticatedError(AuthError):
    """An operation needed a signed-in user."""


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


@dataclass
class AuthUser:
    """The authenticated identity."""

    id: str
    email: str


@dataclass
class UserProfile:
    """Public profile row for a user."""

    id: str
    username: str
    full_name: str | None
    avatar_url: str | None
    bio: str | None
    website: str | None
    location: str | None
    birth_date: str | None
    is_verified: bool
    is_private: bool
    follower_count: int
    following_count: int
    post_count: int
    created_at: str
    updated_at: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> UserProfile:
        return cls(
            id=row["id"],
            username=row["username"],
            full_name=row.get("full_name"),
            avatar_url=row.get("avatar_url"),
            bio=row.get("bio"),
            website=row.get("website"),
            location=row.get("location"),
            birth_date=row.get("birth_date"),
            is_verified=bool(row.get("is_verified", False)),
            is_private=bool(row.get("is_private", False)),
            follower_count=row.get("follower_count", 0),
            following_count=row.get("following_count", 0),
            post_count=row.get("post_count", 0),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


AuthListener = Callable[[AuthEvent, "AuthUser | None"], None]


class SessionHolder:
    """Current identity and profile, shared by all pages of one user."""

    def __init__(self, client: DataClient):
        self.client = client
        self.user: AuthUser | None = None
        self.profile: UserProfile | None = None
        self.token: str | None = None
        self._listeners: list[AuthListener] = []

    @property
    def user_id(self) -> str | None:
        return self.user.id if self.user else None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def require_user(self) -> AuthUser:
        """Return the current user or raise NotAuthenticatedError."""
        if self.user is None:
            raise NotAuthenticatedError("Not signed in")
        return self.user

    # ------------------------------------------------------------------
    # Sign up / in / out
    # ------------------------------------------------------------------

    def sign_up(
        self,
        email: str,
        password: str,
        username: str,
        full_name: str | None = None,
    ) -> str:
        """Create identity + profile, then sign in.

        Returns:
            The new session token

        Raises:
            AuthError: Invalid input, or email/username already taken
        """
        email = email.strip().lower()
        if not validate_email(email):
            raise AuthError("Invalid email format")
        if not validate_username(username):
            raise AuthError("Username must be 3-30 letters, digits, '_' or '.'")
        try:
            check_password_strength(password)
        except PasswordStrengthError as e:
            raise AuthError(str(e)) from e

        if self.client.table("users").select("id").eq("email", email).maybe_single():
            raise AuthError("Email already registered")
        if self.client.table("users").select("id").eq("username", username).maybe_single():
            raise AuthError(f"Username '{username}' is taken")

        try:
            profile = (
                self.client.table("users")
                .insert({"username": username, "email": email, "full_name": full_name})
                .single()
            )
            self.client.table("auth_identities").insert(
                {
                    "user_id": profile["id"],
                    "email": email,
                    "password_hash": hash_password(password),
                }
            ).execute()
        except DataClientError as e:
            logger.error("auth.sign_up_failed", email=email, error=str(e))
            raise AuthError("Could not create account") from e

        logger.info("auth.signed_up", user_id=profile["id"], username=username)
        return self.sign_in(email, password)

    def sign_in(self, email: str, password: str) -> str:
        """Verify credentials and open a session.

        Returns:
            Opaque session token (use with restore())

        Raises:
            AuthError: Wrong email or password
        """
        email = email.strip().lower()
        identity = (
            self.client.table("auth_identities").select().eq("email", email).maybe_single()
        )
        if identity is None or not verify_password(password, identity["password_hash"]):
            logger.info("auth.sign_in_rejected", email=email)
            raise AuthError("Invalid email or password")

        token = secrets.token_urlsafe(32)
        self.client.table("auth_sessions").insert(
            {"token": token, "user_id": identity["user_id"]}
        ).execute()

        self._set_session(token, AuthUser(id=identity["user_id"], email=email))
        logger.info("auth.signed_in", user_id=identity["user_id"])
        return token

    def restore(self, token: str) -> bool:
        """Rebuild the session from a token issued by sign_in().

        Returns:
            True if the token is valid
        """
        try:
            row = self.client.table("auth_sessions").select().eq("token", token).maybe_single()
            if row is None:
                return False
            identity = (
                self.client.table("auth_identities")
                .select("email")
                .eq("user_id", row["user_id"])
                .single()
            )
        except DataClientError as e:
            logger.error("auth.restore_failed", error=str(e))
            return False

        self._set_session(token, AuthUser(id=row["user_id"], email=identity["email"]))
        return True

    def sign_out(self) -> None:
        """Revoke the token and clear user/profile.

        A failed revoke is logged and leaves the session as it was.
        """
        if self.user is None:
            return
        try:
            if self.token:
                self.client.table("auth_sessions").delete().eq("token", self.token).execute()
        except DataClientError as e:
            logger.error("auth.sign_out_failed", user_id=self.user_id, error=str(e))
            return

        logger.info("auth.signed_out", user_id=self.user_id)
        self.user = None
        self.profile = None
        self.token = None
        self._notify(AuthEvent.SIGNED_OUT)

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def refresh_profile(self) -> UserProfile | None:
        if self.user is not None:
            self._fetch_profile(self.user.id)
        return self.profile

    def update_profile(self, **changes: Any) -> UserProfile | None:
        """Update editable profile fields of the current user.

        Unknown fields are ignored. Failures are logged and return None.
        """
        if self.user is None:
            return None
        values = {k: v for k, v in changes.items() if k in EDITABLE_PROFILE_FIELDS}
        if not values:
            return self.profile
        values["updated_at"] = utc_now()
        try:
            row = self.client.table("users").update(values).eq("id", self.user.id).single()
        except DataClientError as e:
            logger.error("auth.profile_update_failed", user_id=self.user.id, error=str(e))
            return None

        self.profile = UserProfile.from_row(row)
        return self.profile

    def _fetch_profile(self, user_id: str) -> None:
        try:
            row = self.client.table("users").select().eq("id", user_id).single()
        except DataClientError as e:
            logger.error("auth.profile_fetch_failed", user_id=user_id, error=str(e))
            return
        self.profile = UserProfile.from_row(row)

    # ------------------------------------------------------------------
    # Auth state listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register a listener for auth state changes.

        Returns:
            Callable that unsubscribes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_session(self, token: str, user: AuthUser) -> None:
        self.token = token
        self.user = user
        self._fetch_profile(user.id)
        self._notify(AuthEvent.SIGNED_IN)

    def _notify(self, event: AuthEvent) -> None:
        for listener in list(self._listeners):
            listener(event, self.user)
