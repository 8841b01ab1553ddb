"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from socialhub.db.client import DataClient, check_connection
from socialhub.web.dependencies import get_data_client
from socialhub.web.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(client: DataClient = Depends(get_data_client)) -> HealthResponse:
    """Check API health status."""
    report = check_connection(client)
    return HealthResponse(
        status="ok" if report.ok else "degraded",
        version="0.1.0",
        timestamp=datetime.now(timezone.utc).isoformat(),
        database=report.ok,
    )
