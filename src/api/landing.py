"""
Landing page endpoints for the front page and each language prefix.
"""
from typing import Optional

from fastapi import APIRouter, HTTPException, Request

from src.domain.schemas import LandingResponse
from src.i18n import LocaleNegotiator, LocaleTag

router = APIRouter()


def _negotiator(request: Request) -> LocaleNegotiator:
    return request.app.state.locale_negotiator


def _detected(request: Request) -> Optional[str]:
    """Locale negotiated by the middleware for this request, if any."""
    tag: Optional[LocaleTag] = getattr(request.state, "locale", None)
    return str(tag) if tag else None


@router.get("/", response_model=LandingResponse)
async def front_page(request: Request):
    """Front page, served in the default locale."""
    default = _negotiator(request).default_locale
    return LandingResponse(
        language=default.base if default else None,
        detected_locale=_detected(request),
    )


@router.get("/{language}", response_model=LandingResponse)
async def language_page(language: str, request: Request):
    """Landing page for a configured base language, e.g. "/ca"."""
    bases = {tag.base for tag in _negotiator(request).locales if tag}
    if language not in bases:
        raise HTTPException(status_code=404, detail=f"Language '{language}' is not available.")

    return LandingResponse(language=language, detected_locale=_detected(request))
