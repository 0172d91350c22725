"""
Health check routes.
"""
from fastapi import APIRouter

from .. import __version__
from ..models.responses import HealthResponse
from ..utils.timestamps import utc_timestamp

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness check.
    """
    return HealthResponse(
        status="ok",
        version=__version__,
        timestamp=utc_timestamp()
    )
