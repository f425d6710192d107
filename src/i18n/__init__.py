"""
Internationalization (i18n) module for the Locale Redirect service.

This module provides:
- Locale tag parsing and Accept-Language negotiation
- Middleware for first-visit locale detection and redirect
"""

from src.i18n.locale import (
    LocaleTag,
    Preference,
    Confidence,
    NegotiationResult,
    LocaleMatcher,
    LocaleError,
    InvalidLocaleError,
    LocaleConfigurationError,
    parse_accept_language,
    parse_locales,
)
from src.i18n.middleware import (
    Action,
    Decision,
    LocaleNegotiator,
    LocaleRedirectMiddleware,
)

__all__ = [
    "LocaleTag",
    "Preference",
    "Confidence",
    "NegotiationResult",
    "LocaleMatcher",
    "LocaleError",
    "InvalidLocaleError",
    "LocaleConfigurationError",
    "parse_accept_language",
    "parse_locales",
    "Action",
    "Decision",
    "LocaleNegotiator",
    "LocaleRedirectMiddleware",
]
