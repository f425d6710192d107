"""
Health check endpoint.
"""
from datetime import datetime, timezone

from fastapi import APIRouter

from src.domain.schemas import HealthResponse

router = APIRouter()

VERSION = "0.1.0"


@router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=VERSION,
    )
