"""Signed-in sessions for the Web API.

Keeps one SessionHolder per bearer token so requests from the same client
share the current user and profile.
"""

from __future__ import annotations

import asyncio

import structlog

from socialhub.auth.session import SessionHolder
from socialhub.db.client import DataClient
from socialhub.db.errors import DataClientError

logger = structlog.get_logger(__name__)


class SessionRegistry:
    """Token -> SessionHolder map.

    Tokens not seen by this process (e.g. after a restart) are restored
    from the store on first use. Cached tokens are checked against the
    store on every lookup, so a sign-out elsewhere takes effect at once.
    """

    def __init__(self):
        self._sessions: dict[str, SessionHolder] = {}
        self._lock = asyncio.Lock()

    async def register(self, session: SessionHolder) -> None:
        """Track a freshly signed-in session under its token."""
        if not session.token:
            return
        async with self._lock:
            self._sessions[session.token] = session
        logger.info("session_registered", user_id=session.user_id)

    async def resolve(self, client: DataClient, token: str) -> SessionHolder | None:
        """Get the session for a token, restoring it if needed.

        Args:
            client: Data client used to restore unknown tokens
            token: Bearer token from the request

        Returns:
            The signed-in session, or None if the token is invalid
        """
        async with self._lock:
            session = self._sessions.get(token)
        if session is not None and session.client is client:
            if _token_active(client, token):
                return session
            await self.discard(token)
            logger.info("session_revoked", user_id=session.user_id)
            return None

        session = SessionHolder(client)
        if not session.restore(token):
            return None

        async with self._lock:
            self._sessions[token] = session
        logger.debug("session_restored", user_id=session.user_id)
        return session

    async def discard(self, token: str) -> bool:
        """Forget a token.

        Returns:
            True if the token was tracked
        """
        async with self._lock:
            return self._sessions.pop(token, None) is not None

    async def count(self) -> int:
        async with self._lock:
            return len(self._sessions)


def _token_active(client: DataClient, token: str) -> bool:
    try:
        row = client.table("auth_sessions").select("token").eq("token", token).maybe_single()
    except DataClientError as e:
        logger.error("session_check_failed", error=str(e))
        return False
    return row is not None


# Global registry instance
_registry: SessionRegistry | None = None


def get_session_registry() -> SessionRegistry:
    """Get the global session registry."""
    global _registry
    if _registry is None:
        _registry = SessionRegistry()
    return _registry


def reset_session_registry() -> None:
    """Reset the session registry (for testing)."""
    global _registry
    _registry = None
