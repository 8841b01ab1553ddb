"""FastAPI dependencies: shared client and bearer-token sessions."""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException, status

from socialhub.auth.session import SessionHolder
from socialhub.db.client import DataClient, get_client
from socialhub.web.sessions import get_session_registry


def get_data_client() -> DataClient:
    return get_client()


def bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    """Extract the token from an "Authorization: Bearer <token>" header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def optional_session(
    token: str | None = Depends(bearer_token),
    client: DataClient = Depends(get_data_client),
) -> SessionHolder | None:
    """The caller's session, or None when anonymous or the token is invalid."""
    if token is None:
        return None
    return await get_session_registry().resolve(client, token)


async def current_session(
    session: SessionHolder | None = Depends(optional_session),
) -> SessionHolder:
    """The caller's session; 401 when not signed in."""
    if session is None or not session.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session
