"""Dashboard endpoint."""

from fastapi import APIRouter, Depends, HTTPException, status

from socialhub.auth.session import SessionHolder
from socialhub.db.client import DataClient
from socialhub.pages.dashboard import DashboardPage
from socialhub.web.dependencies import current_session, get_data_client
from socialhub.web.schemas import (
    ActivityResponse,
    DashboardResponse,
    DashboardStatsResponse,
)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    client: DataClient = Depends(get_data_client),
    session: SessionHolder = Depends(current_session),
) -> DashboardResponse:
    """Per-feature counts and the ten most recent activities."""
    page = DashboardPage(client, session)
    if not page.load():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not load dashboard",
        )
    return DashboardResponse(
        stats=DashboardStatsResponse(**page.stats.to_dict()),
        recent_activity=[ActivityResponse.model_validate(a) for a in page.activity],
    )
