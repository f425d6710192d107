"""
Starlette middleware for first-visit locale detection and redirect.

Negotiates the client's locale once, remembers it in a cookie and, on the
front page only, sends clients whose best locale is not the default to the
matching language prefix (e.g. "/ca").
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Mapping, Optional, Sequence
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from src.i18n.locale import (
    LocaleConfigurationError,
    LocaleMatcher,
    LocaleTag,
    NegotiationResult,
    parse_locales,
)

logger = logging.getLogger(__name__)

DEFAULT_COOKIE_NAME = "Detected-Language"
DEFAULT_COOKIE_TTL = timedelta(hours=24)
ROOT_PATH = "/"


class Action(str, Enum):
    """Terminal outcome of a request's locale decision."""

    DELEGATE = "delegate"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class Decision:
    """What the middleware should do with one request."""

    action: Action
    result: Optional[NegotiationResult] = None
    location: Optional[str] = None

    @property
    def cookie_value(self) -> Optional[str]:
        """Value for the detection cookie, or None when nothing was negotiated."""
        return str(self.result.locale) if self.result else None


class LocaleNegotiator:
    """
    Shared, read-only negotiation state built once at startup.

    Holds the configured locale list and its matcher. Nothing is written
    after configure(), so one instance serves all concurrent requests.
    """

    def __init__(self, cookie_name: str = DEFAULT_COOKIE_NAME):
        self.cookie_name = cookie_name
        self._locales: tuple[Optional[LocaleTag], ...] = ()
        self._matcher: Optional[LocaleMatcher] = None

    @classmethod
    def from_identifiers(
        cls, identifiers: Sequence[str], cookie_name: str = DEFAULT_COOKIE_NAME
    ) -> "LocaleNegotiator":
        negotiator = cls(cookie_name=cookie_name)
        negotiator.configure(identifiers)
        return negotiator

    def configure(self, identifiers: Sequence[str]) -> None:
        """
        Parse the ordered locale list and build the matcher.

        Invalid identifiers are kept as ``None`` at their index. If none is
        valid, negotiation is disabled and every request is delegated.

        Args:
            identifiers: Ordered locale identifiers; the first valid one is the default

        Raises:
            LocaleConfigurationError: If the list is empty
        """
        if isinstance(identifiers, str) or not identifiers:
            raise LocaleConfigurationError("At least one locale must be configured")

        self._locales = tuple(parse_locales(identifiers))
        try:
            self._matcher = LocaleMatcher(self._locales)
        except LocaleConfigurationError:
            logger.error(
                f"None of the configured locales {list(identifiers)} is valid; "
                "locale detection disabled"
            )
            self._matcher = None
            return

        logger.info(
            f"Locale detection enabled for {[str(tag) for tag in self._locales if tag]}, "
            f"default '{self._matcher.default}'"
        )

    @property
    def locales(self) -> tuple[Optional[LocaleTag], ...]:
        """Parsed locales, index-aligned with the configured identifiers."""
        return self._locales

    @property
    def default_locale(self) -> Optional[LocaleTag]:
        return self._matcher.default if self._matcher else None

    @property
    def enabled(self) -> bool:
        return self._matcher is not None

    def negotiate(self, accept_language: Optional[str]) -> Optional[NegotiationResult]:
        if self._matcher is None:
            return None
        return self._matcher.match_header(accept_language)

    def decide(
        self,
        path: str,
        accept_language: Optional[str],
        cookies: Mapping[str, str],
    ) -> Decision:
        """
        Decide how to handle a request.

        A request already carrying the detection cookie is delegated without
        negotiation, whatever the cookie's value. Otherwise the locale is
        negotiated, and a front-page request whose locale is not the default
        is redirected to "/<base language>".
        """
        if self.cookie_name in cookies:
            return Decision(action=Action.DELEGATE)

        result = self.negotiate(accept_language)
        if result is None:
            return Decision(action=Action.DELEGATE)

        if path != ROOT_PATH or result.is_default:
            return Decision(action=Action.DELEGATE, result=result)

        return Decision(
            action=Action.REDIRECT,
            result=result,
            location=f"/{result.locale.base}",
        )


class LocaleRedirectMiddleware(BaseHTTPMiddleware):
    """
    Middleware to detect the client locale and redirect first visits.

    Per request:
    1. Detection cookie present -> pass through untouched
    2. Negotiate from Accept-Language and set the detection cookie (24h)
    3. Front page with a non-default locale -> 307 to "/<base language>"
    4. Anything else -> pass through, cookie added to the downstream response

    The negotiated tag is also stored in request.state.locale.
    """

    def __init__(
        self,
        app: ASGIApp,
        locales: Sequence[str] = ("en",),
        cookie_name: str = DEFAULT_COOKIE_NAME,
        cookie_ttl: timedelta = DEFAULT_COOKIE_TTL,
        negotiator: Optional[LocaleNegotiator] = None,
    ) -> None:
        super().__init__(app)
        self.negotiator = negotiator or LocaleNegotiator.from_identifiers(
            locales, cookie_name=cookie_name
        )
        self.cookie_ttl = cookie_ttl

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            decision = self.negotiator.decide(
                request.url.path,
                request.headers.get("Accept-Language"),
                request.cookies,
            )
        except Exception:
            # Locale detection must never break the request itself
            logger.exception(f"Locale negotiation failed for {request.url.path}")
            return await call_next(request)

        if decision.result is not None:
            request.state.locale = decision.result.locale

        if decision.action == Action.REDIRECT:
            logger.debug(
                f"Redirecting {request.url.path} to {decision.location} "
                f"({decision.result.confidence.value} match)"
            )
            response = RedirectResponse(decision.location, status_code=307)
        else:
            response = await call_next(request)

        if decision.cookie_value is not None:
            self._set_cookie(response, decision.cookie_value)
        return response

    def _set_cookie(self, response: Response, value: str) -> None:
        response.set_cookie(
            key=self.negotiator.cookie_name,
            value=value,
            expires=datetime.now(timezone.utc) + self.cookie_ttl,
        )
