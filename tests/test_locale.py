"""
Tests for locale tag parsing, Accept-Language parsing and matching.
"""
import pytest

from src.i18n.locale import (
    Confidence,
    InvalidLocaleError,
    LocaleConfigurationError,
    LocaleMatcher,
    LocaleTag,
    maximize,
    parse_accept_language,
    parse_locales,
)

LANGS = ["en", "ca", "es", "hu", "ru", "fr", "pt", "eo", "oc"]


@pytest.fixture
def matcher():
    return LocaleMatcher(parse_locales(LANGS))


class TestLocaleTag:
    def test_parses_simple_language(self):
        tag = LocaleTag.parse("en")
        assert tag.language == "en"
        assert tag.territory is None
        assert str(tag) == "en"

    @pytest.mark.parametrize(
        "identifier,expected",
        [
            ("ca-ES", "ca-ES"),
            ("ca_es", "ca-ES"),
            ("PT-br", "pt-BR"),
            ("zh-hant-tw", "zh-Hant-TW"),
            ("es-419", "es-419"),
            ("ca-ES-valencia", "ca-ES-valencia"),
            ("CA_es_VALENCIA", "ca-ES-valencia"),
        ],
    )
    def test_normalizes_case_and_separator(self, identifier, expected):
        assert str(LocaleTag.parse(identifier)) == expected

    def test_base_strips_region_and_script(self):
        assert LocaleTag.parse("ca-ES").base == "ca"
        assert LocaleTag.parse("zh-Hant-TW").base == "zh"

    @pytest.mark.parametrize(
        "identifier",
        ["", "   ", "e", "123", "en-", "x-private", "en_US.UTF-8", "de@euro", "*"],
    )
    def test_rejects_invalid_identifiers(self, identifier):
        with pytest.raises(InvalidLocaleError):
            LocaleTag.parse(identifier)

    @pytest.mark.parametrize(
        "identifier,expected",
        [
            ("de-DE-u-co-phonebk", "de-DE"),
            ("en-US-x-private-extra", "en-US"),
            ("sr-Latn-RS-t-sr-cyrl", "sr-Latn-RS"),
            ("fr-x-foo", "fr"),
        ],
    )
    def test_discards_extensions_and_private_use(self, identifier, expected):
        assert str(LocaleTag.parse(identifier)) == expected

    def test_invalid_locale_error_is_value_error(self):
        with pytest.raises(ValueError):
            LocaleTag.parse("not a locale")


class TestParseLocales:
    def test_keeps_order(self):
        locales = parse_locales(LANGS)
        assert [str(tag) for tag in locales] == LANGS

    def test_invalid_entries_keep_their_position(self):
        locales = parse_locales(["en", "!!", "fr"])
        assert len(locales) == 3
        assert str(locales[0]) == "en"
        assert locales[1] is None
        assert str(locales[2]) == "fr"


class TestParseAcceptLanguage:
    def test_empty_header(self):
        assert parse_accept_language(None) == []
        assert parse_accept_language("") == []

    def test_orders_by_quality(self):
        prefs = parse_accept_language("fr;q=0.5, ca-ES, en;q=0.8")
        assert [str(p.tag) for p in prefs] == ["ca-ES", "en", "fr"]
        assert [p.quality for p in prefs] == [1.0, 0.8, 0.5]

    def test_ties_keep_header_order(self):
        prefs = parse_accept_language("hu;q=0.7,ru;q=0.7,pt;q=0.7")
        assert [str(p.tag) for p in prefs] == ["hu", "ru", "pt"]

    def test_skips_malformed_entries(self):
        prefs = parse_accept_language("en;q=abc, ??, , fr;q=0.4")
        assert [str(p.tag) for p in prefs] == ["fr"]

    def test_drops_zero_quality(self):
        prefs = parse_accept_language("ca;q=0, es")
        assert [str(p.tag) for p in prefs] == ["es"]

    def test_wildcard(self):
        prefs = parse_accept_language("*;q=0.1")
        assert len(prefs) == 1
        assert prefs[0].is_wildcard


class TestLocaleMatcher:
    def test_no_preference_yields_default(self, matcher):
        result = matcher.match_header("")
        assert str(result.locale) == "en"
        assert result.is_default
        assert result.confidence == Confidence.NO

    def test_regional_variant_matches_base_language(self, matcher):
        result = matcher.match_header("ca-ES,ca;q=0.9")
        assert str(result.locale) == "ca"
        assert not result.is_default
        assert result.confidence == Confidence.HIGH
        assert not result.is_exact_match

    def test_exact_match(self, matcher):
        result = matcher.match_header("hu")
        assert str(result.locale) == "hu"
        assert result.is_exact_match

    def test_default_preferred_first(self, matcher):
        result = matcher.match_header("en,ca-ES,ca;q=0.9")
        assert str(result.locale) == "en"
        assert result.is_default

    def test_quality_beats_header_order(self, matcher):
        result = matcher.match_header("ru;q=0.3,fr;q=0.9")
        assert str(result.locale) == "fr"

    def test_no_overlap_falls_back_to_default(self, matcher):
        result = matcher.match_header("ja-JP,ko;q=0.8")
        assert str(result.locale) == "en"
        assert result.confidence == Confidence.NO

    def test_wildcard_yields_default(self, matcher):
        result = matcher.match_header("ja, *;q=0.5")
        assert str(result.locale) == "en"

    def test_malformed_header_degrades_to_default(self, matcher):
        result = matcher.match_header(";;;,q=,=")
        assert str(result.locale) == "en"

    def test_earlier_configured_locale_wins_ties(self):
        matcher = LocaleMatcher(parse_locales(["en", "fr-CA", "fr-BE"]))
        result = matcher.match_header("fr-CH")
        assert str(result.locale) == "fr-CA"
        assert result.confidence == Confidence.HIGH

    def test_bare_language_prefers_likely_region(self):
        matcher = LocaleMatcher(parse_locales(["en", "pt-PT", "pt-BR"]))
        assert str(matcher.match_header("pt").locale) == "pt-BR"
        assert str(matcher.match_header("pt-PT").locale) == "pt-PT"

    def test_region_implies_script(self):
        matcher = LocaleMatcher(parse_locales(["en", "zh-Hans", "zh-Hant"]))
        assert str(matcher.match_header("zh-TW").locale) == "zh-Hant"
        assert str(matcher.match_header("zh-CN").locale) == "zh-Hans"
        assert str(matcher.match_header("zh").locale) == "zh-Hans"

    def test_other_script_is_low_confidence_fallback(self):
        matcher = LocaleMatcher(parse_locales(["en", "sr-Latn"]))
        result = matcher.match_header("sr-Cyrl")
        assert str(result.locale) == "sr-Latn"
        assert result.confidence == Confidence.LOW

    def test_extension_tags_still_match(self):
        matcher = LocaleMatcher(parse_locales(["en", "de"]))
        result = matcher.match_header("de-DE-u-co-phonebk")
        assert str(result.locale) == "de"
        assert not result.is_default

    def test_private_use_tag_keeps_its_rank(self):
        prefs = parse_accept_language("de-DE-x-foo,fr;q=0.1")
        assert [str(p.tag) for p in prefs] == ["de-DE", "fr"]

    def test_default_skips_invalid_first_entry(self):
        matcher = LocaleMatcher(parse_locales(["??", "fr", "en"]))
        assert str(matcher.default) == "fr"
        assert matcher.locales[0] is None

    def test_requires_a_valid_locale(self):
        with pytest.raises(LocaleConfigurationError):
            LocaleMatcher([None, None])


class TestMaximize:
    @pytest.mark.parametrize(
        "identifier,expected",
        [
            ("pt", "pt-Latn-BR"),
            ("zh-TW", "zh-Hant-TW"),
            ("zh-Hant", "zh-Hant-TW"),
            ("fr-CA", "fr-Latn-CA"),
            ("ca-ES-valencia", "ca-Latn-ES"),
        ],
    )
    def test_fills_likely_subtags(self, identifier, expected):
        assert str(maximize(LocaleTag.parse(identifier))) == expected

    def test_keeps_explicit_subtags(self):
        assert str(maximize(LocaleTag.parse("sr-Latn"))) == "sr-Latn-RS"
        assert str(maximize(LocaleTag.parse("en-GB"))) == "en-Latn-GB"
