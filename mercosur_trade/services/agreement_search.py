"""
Agreement text lookups: full-text search and single-provision retrieval.

Search is delegated to the SQLite FTS5 index over provisions (BM25 `rank`
ordering and `snippet()` highlighting are the engine's own).
"""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from mercosur_trade.errors import InvalidInputError
from mercosur_trade.services.countries import (
    clamp_limit,
    escape_fts5_query,
    has_any_code,
    normalize_codes,
)
from mercosur_trade.services.metadata import build_meta
from mercosur_trade.web.db.models import Agreement, Provision

logger = logging.getLogger(__name__)

_WORD = re.compile(r"\w+", re.UNICODE)

SEARCH_SQL = """
    SELECT p.id, p.agreement_id, p.article_ref, p.title, p.chapter, p.topic,
           snippet(provisions_fts, 0, '>>>', '<<<', '...', 48) AS snippet,
           a.title AS agreement_title, a.parties,
           rank
    FROM provisions_fts
    JOIN provisions p ON p.id = provisions_fts.rowid
    JOIN agreements a ON a.id = p.agreement_id
    WHERE provisions_fts MATCH :query
"""


def _build_query_strategies(query: str) -> List[str]:
    """
    FTS5 match expressions to try, in order.

    1. The query with FTS5 operator characters quoted (keeps AND/OR/NEAR/phrases)
    2. Every word token quoted, implicit AND (survives any punctuation)
    """
    strategies = [escape_fts5_query(query)]
    tokens = _WORD.findall(query)
    if tokens:
        quoted = " ".join(f'"{token}"' for token in tokens)
        if quoted not in strategies:
            strategies.append(quoted)
    return strategies


def _empty_search(query: str, countries, topic, message: str) -> Dict[str, Any]:
    return {
        "query": query,
        "filters": {"countries": countries, "topic": topic},
        "count": 0,
        "results": [],
        "message": message,
        "_meta": build_meta(),
    }


def search_agreements(
    session: Session,
    query: str,
    countries: Optional[Sequence[str]] = None,
    topic: Optional[str] = None,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Full-text search across agreement provisions.

    Args:
        session: SQLAlchemy session on the relation store
        query: Search text, e.g. "data localization"
        countries: Optional party filter (any requested code must be a party)
        topic: Optional exact topic filter, e.g. "data_flows"
        limit: Max results (default 10, clamped to 1..50)

    Returns:
        Dict with query, filters, count and ranked results with snippets.
    """
    topic = topic or None
    countries = list(countries) if countries is not None else None

    if not query or not query.strip():
        return _empty_search(query, countries, topic, "Search query is empty. Provide one or more search terms.")
    if not _WORD.search(query):
        return _empty_search(
            query, countries, topic,
            "Search query contains only special characters. Provide one or more search terms.",
        )

    codes = normalize_codes(countries) if countries else []
    limit = clamp_limit(limit)

    sql = SEARCH_SQL
    params: Dict[str, Any] = {"limit": limit}
    if topic:
        sql += " AND p.topic = :topic"
        params["topic"] = topic
    sql += " ORDER BY rank LIMIT :limit"

    rows = None
    last_error = None
    for match_query in _build_query_strategies(query):
        try:
            rows = session.execute(text(sql), {**params, "query": match_query}).mappings().all()
            break
        except OperationalError as e:
            logger.info("FTS query failed, trying fallback strategy: %r (%s)", match_query, e.orig)
            last_error = e
            session.rollback()

    if rows is None:
        raise InvalidInputError(f"Could not parse search query {query!r}: {last_error.orig}", field="query")

    results = [dict(row) for row in rows]

    # Post-filter by party countries (exact token match on the parties list)
    if codes:
        results = [row for row in results if has_any_code(row.get("parties"), codes)]

    return {
        "query": query,
        "filters": {"countries": countries, "topic": topic},
        "count": len(results),
        "results": results,
        "_meta": build_meta(),
    }


def get_provision(session: Session, agreement_id: str, article: str) -> Dict[str, Any]:
    """
    Retrieve one article of an agreement.

    Args:
        session: SQLAlchemy session on the relation store
        agreement_id: e.g. "treaty-of-asuncion"
        article: Article reference, e.g. "1", "13.2", "Annex I"
    """
    if not isinstance(agreement_id, str) or not agreement_id.strip():
        raise InvalidInputError("agreement_id is required.", field="agreement_id")
    if not isinstance(article, str) or not article.strip():
        raise InvalidInputError("article is required.", field="article")
    agreement_id = agreement_id.strip()
    article = article.strip()

    stmt = (
        select(Provision, Agreement)
        .join(Agreement, Agreement.id == Provision.agreement_id)
        .where(Provision.agreement_id == agreement_id, Provision.article_ref == article)
    )
    row = session.execute(stmt).first()

    if row is None:
        return {
            "found": False,
            "agreement_id": agreement_id,
            "article": article,
            "message": f'No provision found for article "{article}" in agreement "{agreement_id}".',
            "_metadata": build_meta(),
        }

    provision, agreement = row
    return {
        "found": True,
        "provision": {
            **provision.as_dict(),
            "agreement_title": agreement.title,
            "official_name": agreement.official_name,
            "year": agreement.year,
            "agreement_status": agreement.status,
            "source_url": agreement.source_url,
            "parties": agreement.parties,
        },
        "_metadata": build_meta(),
    }
