"""
Unit tests for code normalization, reference data and query helpers.
"""

import math
from datetime import date, datetime

import pytest
from pydantic import ValidationError

from mercosur_trade.errors import InvalidInputError, TradeDataError
from mercosur_trade.services.countries import (
    BLOCS,
    COUNTRY_NAMES,
    MERCOSUR_MEMBERS,
    clamp_limit,
    country_name,
    country_refs,
    days_since,
    escape_fts5_query,
    has_any_code,
    normalize_code,
    normalize_codes,
    to_iso_date,
)
from mercosur_trade.services.metadata import ResponseMeta, build_meta


class TestNormalizeCode:

    def test_strip_and_uppercase(self):
        assert normalize_code(" br ") == "BR"

    def test_three_letter_code_allowed(self):
        assert normalize_code("eur") == "EUR"

    @pytest.mark.parametrize("bad", ["", "B", "BRAZ", "B1", "%", "B R"])
    def test_malformed_codes(self, bad):
        with pytest.raises(InvalidInputError) as exc_info:
            normalize_code(bad, "source_country")
        assert exc_info.value.field == "source_country"

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            normalize_code("1")
        assert issubclass(InvalidInputError, TradeDataError)

    def test_dedupe_keeps_first_seen_order(self):
        assert normalize_codes(["uy", "BR", "uy", "br"]) == ["UY", "BR"]


class TestReferenceData:

    def test_country_name(self):
        assert country_name("br") == "Brazil"

    def test_unknown_code_falls_back(self):
        assert country_name("EU") == "EU"
        assert "EU" not in COUNTRY_NAMES

    def test_country_refs(self):
        assert country_refs(["AR", "EU"]) == [
            {"code": "AR", "name": "Argentina"},
            {"code": "EU", "name": "EU"},
        ]

    def test_blocs(self):
        assert set(BLOCS) == {"mercosur", "pacific_alliance", "prosur"}
        assert BLOCS["mercosur"]["members"] == list(MERCOSUR_MEMBERS)


class TestHasAnyCode:

    def test_exact_token(self):
        assert has_any_code("BR,AR,UY,PY", ["AR"]) is True

    def test_no_substring_match(self):
        assert has_any_code("BRA,ARG", ["BR"]) is False

    def test_spaces_are_ignored(self):
        assert has_any_code("BR, AR", ["AR"]) is True

    def test_empty_list(self):
        assert has_any_code(None, ["AR"]) is False
        assert has_any_code("", ["AR"]) is False


class TestQueryHelpers:

    @pytest.mark.parametrize("value,expected", [
        (None, 10),
        (5, 5),
        (0, 1),
        (-3, 1),
        (500, 50),
        ("7", 7),
        ("abc", 10),
        (math.nan, 10),
        (math.inf, 10),
    ])
    def test_clamp_limit(self, value, expected):
        assert clamp_limit(value) == expected

    def test_escape_fts5_query(self):
        assert escape_fts5_query("data (flows)") == 'data "("flows")"'
        assert escape_fts5_query("plain words") == "plain words"

    def test_to_iso_date(self):
        assert to_iso_date(date(2026, 1, 5)) == "2026-01-05"
        assert len(to_iso_date()) == 10

    def test_days_since(self):
        assert days_since("2026-01-15", datetime(2026, 1, 20)) == 5
        assert days_since("2026-01-15T10:00:00+00:00", datetime(2026, 1, 20, 12)) == 5

    def test_days_since_never_negative(self):
        assert days_since("2026-02-01", datetime(2026, 1, 1)) == 0

    @pytest.mark.parametrize("value", [None, "", "not a date"])
    def test_days_since_unparseable(self, value):
        assert days_since(value, datetime(2026, 1, 1)) is None


class TestResponseMeta:

    def test_build_meta(self):
        meta = build_meta()

        assert set(meta) == {"disclaimer", "data_age", "server", "version"}
        assert meta["server"] == "mercosur-trade-mcp"
        assert meta["data_age"] == to_iso_date()

    def test_overrides(self):
        assert build_meta(data_age="2026-01-01")["data_age"] == "2026-01-01"

    def test_strict_types(self):
        with pytest.raises(ValidationError):
            ResponseMeta(disclaimer="x", data_age="2026-01-01", server="s", version=1)
