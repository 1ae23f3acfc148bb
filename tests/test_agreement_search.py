"""
Tests for full-text search and provision lookup.
"""

import pytest

from mercosur_trade.errors import InvalidInputError
from mercosur_trade.services.agreement_search import (
    _build_query_strategies,
    get_provision,
    search_agreements,
)


class TestSearchAgreements:
    """FTS5 search over provisions."""

    def test_basic_search(self, session):
        result = search_agreements(session, "comercio")

        assert result["query"] == "comercio"
        assert 0 < result["count"] <= 10
        assert len(result["results"]) == result["count"]
        first = result["results"][0]
        for key in ("agreement_id", "article_ref", "snippet", "agreement_title", "parties", "rank"):
            assert key in first
        assert "_meta" in result
        assert "_metadata" not in result

    def test_limit_is_respected(self, session):
        result = search_agreements(session, "comercio", limit=3)
        assert result["count"] == 3

    def test_limit_is_clamped(self, session):
        assert search_agreements(session, "comercio", limit=0)["count"] == 1
        assert search_agreements(session, "comercio", limit=500)["count"] <= 50

    def test_results_ordered_by_rank(self, session):
        ranks = [row["rank"] for row in search_agreements(session, "comercio", limit=20)["results"]]
        assert ranks == sorted(ranks)

    def test_snippet_highlights_match(self, session):
        result = search_agreements(session, "Mercado", topic="customs_union")

        assert result["count"] == 3
        assert {row["agreement_id"] for row in result["results"]} == {"treaty-of-asuncion", "protocol-ouro-preto"}
        assert all(">>>" in row["snippet"] for row in result["results"])

    def test_topic_filter(self, session):
        result = search_agreements(session, "datos", topic="data_flows", limit=50)
        assert all(row["topic"] == "data_flows" for row in result["results"])

    def test_country_filter_keeps_parties_only(self, session):
        result = search_agreements(session, "datos", countries=["mx"], limit=50)

        assert result["count"] > 0
        assert all("MX" in row["parties"].split(",") for row in result["results"])
        assert result["filters"]["countries"] == ["mx"]

    def test_empty_country_list_is_echoed_without_filtering(self, session):
        filtered = search_agreements(session, "comercio", countries=[], limit=50)
        unfiltered = search_agreements(session, "comercio", limit=50)

        assert filtered["filters"]["countries"] == []
        assert unfiltered["filters"]["countries"] is None
        assert filtered["count"] == unfiltered["count"]

    def test_country_filter_exact_token(self, session):
        result = search_agreements(session, "comercio", countries=["EU"], limit=50)

        assert result["count"] > 0
        assert {row["agreement_id"] for row in result["results"]} == {"mercosur-eu-association"}

    def test_empty_query(self, session):
        result = search_agreements(session, "   ")

        assert result["count"] == 0
        assert result["results"] == []
        assert "empty" in result["message"]

    def test_special_characters_only(self, session):
        result = search_agreements(session, "((*))")

        assert result["count"] == 0
        assert "special characters" in result["message"]

    def test_syntax_error_falls_back_to_quoted_tokens(self, session):
        """An unbalanced quote is invalid FTS5; the quoted-token retry answers it."""
        result = search_agreements(session, 'Mercado"', topic="customs_union")
        assert result["count"] == 3

    def test_fts_operator_characters_do_not_raise(self, session):
        result = search_agreements(session, "Mercado: (Comun)^", topic="customs_union")
        assert isinstance(result["count"], int)

    def test_malformed_country_raises(self, session):
        with pytest.raises(InvalidInputError):
            search_agreements(session, "comercio", countries=["Brazil"])


class TestQueryStrategies:

    def test_plain_query_has_quoted_fallback(self):
        assert _build_query_strategies("data flows") == ["data flows", '"data" "flows"']

    def test_special_characters_are_quoted(self):
        assert _build_query_strategies("a:b")[0] == 'a":"b'

    def test_no_duplicate_strategy(self):
        assert _build_query_strategies('"data"') == ['"data"']


class TestGetProvision:
    """Single article lookup."""

    def test_found(self, session):
        result = get_provision(session, "treaty-of-asuncion", "1")

        assert result["found"] is True
        provision = result["provision"]
        assert provision["title"] == "Constitucion del Mercado Comun"
        assert provision["agreement_title"] == "Treaty of Asuncion"
        assert provision["year"] == 1991
        assert provision["parties"] == "BR,AR,UY,PY"
        assert provision["topic"] == "customs_union"

    def test_dotted_article_ref(self, session):
        result = get_provision(session, "pa-additional-protocol", "13.2")
        assert result["found"] is True

    def test_inputs_are_trimmed(self, session):
        assert get_provision(session, " treaty-of-asuncion ", " 2 ")["found"] is True

    def test_not_found(self, session):
        result = get_provision(session, "treaty-of-asuncion", "99")

        assert result["found"] is False
        assert result["message"] == 'No provision found for article "99" in agreement "treaty-of-asuncion".'

    @pytest.mark.parametrize("agreement_id,article", [("", "1"), ("treaty-of-asuncion", "  ")])
    def test_blank_input_raises(self, session, agreement_id, article):
        with pytest.raises(InvalidInputError):
            get_provision(session, agreement_id, article)
