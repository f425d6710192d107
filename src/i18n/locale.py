"""
Locale tags and Accept-Language negotiation.

Provides:
- LocaleTag, a normalized BCP-47 language tag
- parse_accept_language() for ranked client preferences
- LocaleMatcher for picking the best configured locale
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Optional, Sequence
import logging

from babel.core import get_global, parse_locale

logger = logging.getLogger(__name__)

WILDCARD = "*"


class LocaleError(ValueError):
    """Base exception for locale-related errors."""
    pass


class InvalidLocaleError(LocaleError):
    """Identifier is not a valid language tag."""
    pass


class LocaleConfigurationError(LocaleError):
    """The configured locale list is unusable."""
    pass


@dataclass(frozen=True)
class LocaleTag:
    """A parsed language tag such as ``en``, ``ca-ES`` or ``zh-Hant-TW``."""

    language: str
    territory: Optional[str] = None
    script: Optional[str] = None
    variant: Optional[str] = None

    @classmethod
    def parse(cls, identifier: str) -> "LocaleTag":
        """
        Parse a locale identifier.

        Both BCP-47 (``pt-BR``) and POSIX (``pt_BR``) separators are accepted.
        Case is normalized: language lower, script title, territory upper,
        variant lower. Extension and private-use subtags are discarded.

        Args:
            identifier: Locale identifier string

        Returns:
            Parsed LocaleTag

        Raises:
            InvalidLocaleError: If the identifier is not a valid tag
        """
        if not isinstance(identifier, str):
            raise InvalidLocaleError(f"Locale identifier must be a string, got {identifier!r}")

        normalized = identifier.strip().replace("_", "-")
        # Babel treats these as charset/modifier markers, not tag syntax
        if not normalized or "." in normalized or "@" in normalized:
            raise InvalidLocaleError(f"Invalid locale identifier: {identifier!r}")

        # Extensions and private use (-u-..., -x-...) do not affect matching
        subtags = normalized.split("-")
        for index, subtag in enumerate(subtags[1:], start=1):
            if len(subtag) == 1:
                subtags = subtags[:index]
                break

        try:
            language, territory, script, variant = parse_locale("-".join(subtags), sep="-")[:4]
        except ValueError as e:
            raise InvalidLocaleError(f"Invalid locale identifier {identifier!r}: {e}") from e

        if not 2 <= len(language) <= 8 or len(language) == 4:
            raise InvalidLocaleError(f"Invalid language subtag in {identifier!r}")

        return cls(
            language=language,
            territory=territory,
            script=script,
            variant=variant.lower() if variant else None,
        )

    @property
    def base(self) -> str:
        """Primary language subtag, stripped of script and region."""
        return self.language

    def __str__(self) -> str:
        parts = [self.language, self.script, self.territory, self.variant]
        return "-".join(part for part in parts if part)


@dataclass(frozen=True)
class Preference:
    """A single ranked entry of an Accept-Language header."""

    tag: Optional[LocaleTag]
    quality: float = 1.0

    @property
    def is_wildcard(self) -> bool:
        return self.tag is None


class Confidence(str, Enum):
    """How closely the negotiated locale matches the client preference."""

    EXACT = "exact"
    HIGH = "high"
    LOW = "low"
    NO = "no"


@dataclass(frozen=True)
class NegotiationResult:
    """Outcome of matching one request's preferences."""

    locale: LocaleTag
    confidence: Confidence
    is_default: bool

    @property
    def is_exact_match(self) -> bool:
        return self.confidence == Confidence.EXACT


def parse_accept_language(header: Optional[str]) -> list[Preference]:
    """
    Parse an Accept-Language header into ranked preferences.

    Malformed entries are skipped rather than rejected, so a broken header
    degrades to "no preference". Entries with ``q=0`` are dropped.

    Args:
        header: Raw header value (e.g. "ca-ES,ca;q=0.9,en;q=0.8")

    Returns:
        Preferences sorted by descending quality, header order kept for ties
    """
    if not header:
        return []

    preferences = []
    for entry in header.split(","):
        entry = entry.strip()
        if not entry:
            continue

        code, *params = [part.strip() for part in entry.split(";")]
        quality = 1.0
        valid = True
        for param in params:
            name, _, value = param.partition("=")
            if name.strip().lower() != "q":
                continue
            try:
                quality = float(value)
            except ValueError:
                valid = False
                break
            if quality != quality:  # NaN
                valid = False
                break
            quality = min(max(quality, 0.0), 1.0)

        if not valid:
            logger.debug(f"Ignoring Accept-Language entry with bad weight: {entry!r}")
            continue
        if quality == 0.0:
            continue

        if code == WILDCARD:
            preferences.append(Preference(tag=None, quality=quality))
            continue

        try:
            tag = LocaleTag.parse(code)
        except InvalidLocaleError:
            logger.debug(f"Ignoring unparseable Accept-Language entry: {entry!r}")
            continue
        preferences.append(Preference(tag=tag, quality=quality))

    # sorted() is stable, so equal weights keep header order
    return sorted(preferences, key=lambda p: p.quality, reverse=True)


def parse_locales(identifiers: Sequence[str]) -> list[Optional[LocaleTag]]:
    """
    Parse configured identifiers, keeping positions of invalid ones.

    An identifier that fails to parse is logged and stored as ``None`` at the
    same index, so the result stays aligned with the input list.
    """
    locales: list[Optional[LocaleTag]] = []
    for index, identifier in enumerate(identifiers):
        try:
            locales.append(LocaleTag.parse(identifier))
        except InvalidLocaleError as e:
            logger.warning(f"Skipping configured locale #{index}: {e}")
            locales.append(None)
    return locales


@lru_cache(maxsize=256)
def maximize(tag: LocaleTag) -> LocaleTag:
    """
    Fill in the likely script and region of a tag from CLDR data.

    Explicit subtags are kept; only missing ones are added, e.g.
    "zh-TW" -> "zh-Hant-TW", "pt" -> "pt-Latn-BR". Variants are dropped.
    Languages unknown to CLDR are returned without variant, otherwise as is.
    """
    likely_subtags = get_global("likely_subtags")
    language, script, territory = tag.language, tag.script, tag.territory

    keys = []
    if script and territory:
        keys.append(f"{language}_{script}_{territory}")
    if territory:
        keys.append(f"{language}_{territory}")
        if not script:
            keys.append(f"und_{territory}")
    if script:
        keys.append(f"{language}_{script}")
    keys.append(language)

    for key in keys:
        value = likely_subtags.get(key)
        if not value:
            continue
        likely_language, likely_territory, likely_script = parse_locale(value)[:3]
        # und_* entries name the region's main language, which may not be ours
        if likely_language != language:
            continue
        script = script or likely_script
        territory = territory or likely_territory
        break

    return LocaleTag(language=language, territory=territory, script=script)


class LocaleMatcher:
    """
    Read-only best-match lookup over an ordered list of supported locales.

    List order is priority: earlier entries win ties, and the first valid
    entry is the default returned when nothing overlaps. Placeholder
    (``None``) entries are never matched.
    """

    def __init__(self, locales: Sequence[Optional[LocaleTag]]):
        self._locales = tuple(locales)
        self._supported = tuple(tag for tag in self._locales if tag is not None)
        if not self._supported:
            raise LocaleConfigurationError("No valid locale to match against")
        self._maximized = tuple(maximize(tag) for tag in self._supported)

    @property
    def locales(self) -> tuple[Optional[LocaleTag], ...]:
        return self._locales

    @property
    def default(self) -> LocaleTag:
        return self._supported[0]

    def best_match(self, preferences: Sequence[Preference]) -> NegotiationResult:
        """
        Pick the configured locale that best satisfies ranked preferences.

        Tags are compared after filling in likely script and region (so
        "zh-TW" reads as "zh-Hant-TW" and "pt" as "pt-Latn-BR"). For each
        preference in order the closest configured locale wins:

        1. identical tag (EXACT)
        2. same language, script and region once maximized (HIGH)
        3. same language and script (HIGH)
        4. same base language only (LOW)

        A wildcard accepts the default. With no usable preference the
        default is returned.
        """
        for preference in preferences:
            if preference.is_wildcard:
                return self._result(self.default, Confidence.HIGH)

            tag = preference.tag
            if tag in self._supported:
                return self._result(tag, Confidence.EXACT)

            wanted = maximize(tag)
            same_region = same_script = same_base = None
            for supported, likely in zip(self._supported, self._maximized):
                if likely.language != wanted.language:
                    continue
                if likely.script == wanted.script:
                    if likely.territory == wanted.territory:
                        same_region = same_region or supported
                    same_script = same_script or supported
                same_base = same_base or supported

            if same_region:
                return self._result(same_region, Confidence.HIGH)
            if same_script:
                return self._result(same_script, Confidence.HIGH)
            if same_base:
                return self._result(same_base, Confidence.LOW)

        return self._result(self.default, Confidence.NO)

    def match_header(self, header: Optional[str]) -> NegotiationResult:
        return self.best_match(parse_accept_language(header))

    def _result(self, tag: LocaleTag, confidence: Confidence) -> NegotiationResult:
        return NegotiationResult(
            locale=tag,
            confidence=confidence,
            is_default=tag == self.default,
        )
