"""
API response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str


class LandingResponse(BaseModel):
    """Payload served for the front page and language prefixes."""
    language: Optional[str] = Field(
        default=None,
        description="Base language the page is served in"
    )
    detected_locale: Optional[str] = Field(
        default=None,
        description="Locale negotiated for this request, when negotiation ran"
    )
