"""Auth endpoints: sign-up, login, logout and the caller's profile."""

from fastapi import APIRouter, Depends, HTTPException, status

from socialhub.auth.session import AuthError, SessionHolder
from socialhub.db.client import DataClient
from socialhub.db.errors import DataClientError
from socialhub.web.dependencies import current_session, get_data_client
from socialhub.web.schemas import (
    LoginRequest,
    ProfileResponse,
    ProfileUpdate,
    SignUpRequest,
    TokenResponse,
)
from socialhub.web.sessions import get_session_registry

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _token_response(session: SessionHolder) -> TokenResponse:
    profile = session.profile
    return TokenResponse(
        token=session.token or "",
        user=ProfileResponse(**profile.to_dict()) if profile else None,
    )


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    body: SignUpRequest,
    client: DataClient = Depends(get_data_client),
) -> TokenResponse:
    """Create an account and sign in."""
    session = SessionHolder(client)
    try:
        session.sign_up(body.email, body.password, body.username, body.full_name)
    except AuthError as e:
        detail = str(e)
        code = (
            status.HTTP_409_CONFLICT
            if "already" in detail or "taken" in detail
            else status.HTTP_400_BAD_REQUEST
        )
        raise HTTPException(status_code=code, detail=detail) from e

    await get_session_registry().register(session)
    return _token_response(session)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    client: DataClient = Depends(get_data_client),
) -> TokenResponse:
    session = SessionHolder(client)
    try:
        session.sign_in(body.email, body.password)
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        ) from e
    except DataClientError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not open session",
        ) from e

    await get_session_registry().register(session)
    return _token_response(session)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(session: SessionHolder = Depends(current_session)) -> None:
    """Revoke the caller's token."""
    token = session.token
    session.sign_out()
    if token:
        await get_session_registry().discard(token)


@router.get("/me", response_model=ProfileResponse)
async def get_me(session: SessionHolder = Depends(current_session)) -> ProfileResponse:
    profile = session.refresh_profile()
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return ProfileResponse(**profile.to_dict())


@router.patch("/me", response_model=ProfileResponse)
async def update_me(
    body: ProfileUpdate,
    session: SessionHolder = Depends(current_session),
) -> ProfileResponse:
    """Update the caller's editable profile fields."""
    profile = session.update_profile(**body.model_dump(exclude_unset=True))
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not update profile",
        )
    return ProfileResponse(**profile.to_dict())
