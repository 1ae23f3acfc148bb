"""
Symmetric Relation Resolver

Answers "what applies between country A and country B" over relation tables
that are keyed by an ORDERED pair but describe an UNORDERED (bilateral) fact.

Three lookup modes:

1. Single-row, direction-preferring (data transfer rules)
   - Try (A, B); if absent try (B, A)
   - A hit on the second attempt sets reversed_lookup=True: the framework
     text was authored for the opposite direction
   - At most one row is returned

2. Multi-row union (mutual recognition)
   - One query over both directions: (A, B) OR (B, A)
   - Optional exact, case-sensitive domain filter
   - Ordered by domain for deterministic output

3. Membership scan (digital trade obligations)
   - A row applies when its party list contains ANY requested code
   - Party lists are stored comma-joined ("BR,AR,UY,PY"); matching is
     delimiter-aware so "AR" never matches inside a longer token
   - Each row appears once regardless of how many codes it matches

Every result is a plain dict envelope. Absence is a normal result
(found=False plus a message naming the display names); structurally invalid
input raises InvalidInputError.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import String, and_, func, literal, or_, select
from sqlalchemy.orm import Session

from mercosur_trade.errors import InvalidInputError
from mercosur_trade.services.countries import (
    country_name,
    country_refs,
    normalize_code,
    normalize_codes,
)
from mercosur_trade.services.metadata import build_meta
from mercosur_trade.web.db.models import (
    Agreement,
    DataTransferRule,
    DigitalTradeObligation,
    MutualRecognition,
)

logger = logging.getLogger(__name__)

EMPTY_COUNTRIES_MESSAGE = "At least one country code is required."


# ============================================================================
# Envelope helpers
# ============================================================================

def _pair_fields(first_key: str, first: str, second_key: str, second: str) -> Dict[str, str]:
    """Echo two normalized codes with their display names."""
    return {
        first_key: first,
        f"{first_key}_name": country_name(first),
        second_key: second,
        f"{second_key}_name": country_name(second),
    }


# ============================================================================
# Mode 1: single-row, direction-preferring
# ============================================================================

def _find_transfer_rule(session: Session, first: str, second: str) -> Optional[DataTransferRule]:
    stmt = select(DataTransferRule).where(
        DataTransferRule.source_country == first,
        DataTransferRule.dest_country == second,
    )
    return session.execute(stmt).scalars().first()


def get_data_transfer_rules(session: Session, source_country: str, dest_country: str) -> Dict[str, Any]:
    """
    Bilateral data transfer framework between two jurisdictions.

    Args:
        session: SQLAlchemy session on the relation store
        source_country: Source code (any case), e.g. "br"
        dest_country: Destination code (any case), e.g. "EU"

    Returns:
        Envelope with found, normalized codes and names, and either
        reversed_lookup + rules, or a not-found message.
    """
    src = normalize_code(source_country, "source_country")
    dst = normalize_code(dest_country, "dest_country")

    rule = _find_transfer_rule(session, src, dst)
    reversed_lookup = False
    if rule is None:
        rule = _find_transfer_rule(session, dst, src)
        reversed_lookup = rule is not None

    pair = _pair_fields("source_country", src, "dest_country", dst)

    if rule is None:
        logger.debug("No data transfer rules for %s<->%s", src, dst)
        return {
            "found": False,
            **pair,
            "message": (
                f"No data transfer rules found between "
                f"{country_name(src)} and {country_name(dst)}."
            ),
            "_metadata": build_meta(),
        }

    return {
        "found": True,
        **pair,
        "reversed_lookup": reversed_lookup,
        "rules": rule.as_dict(),
        "_metadata": build_meta(),
    }


# ============================================================================
# Mode 2: multi-row union over both directions
# ============================================================================

def get_mutual_recognition(
    session: Session,
    country_a: str,
    country_b: str,
    domain: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Mutual recognition arrangements between two countries.

    Args:
        session: SQLAlchemy session on the relation store
        country_a: First code (any case)
        country_b: Second code (any case)
        domain: Optional exact domain filter, e.g. "customs_procedures"
            (case-sensitive, not normalized)

    Returns:
        Envelope with count + agreements, or a not-found message that
        mentions the domain when one was given.
    """
    a = normalize_code(country_a, "country_a")
    b = normalize_code(country_b, "country_b")
    domain = domain or None

    stmt = (
        select(MutualRecognition, Agreement.title)
        .outerjoin(Agreement, Agreement.id == MutualRecognition.agreement_id)
        .where(
            or_(
                and_(MutualRecognition.country_a == a, MutualRecognition.country_b == b),
                and_(MutualRecognition.country_a == b, MutualRecognition.country_b == a),
            )
        )
    )
    if domain is not None:
        stmt = stmt.where(MutualRecognition.domain == domain)
    stmt = stmt.order_by(MutualRecognition.domain, MutualRecognition.id)

    agreements = [
        {**record.as_dict(), "agreement_title": agreement_title}
        for record, agreement_title in session.execute(stmt).all()
    ]

    pair = _pair_fields("country_a", a, "country_b", b)

    if not agreements:
        domain_msg = f' in domain "{domain}"' if domain else ""
        return {
            "found": False,
            **pair,
            "domain": domain,
            "message": (
                f"No mutual recognition agreements found between "
                f"{country_name(a)} and {country_name(b)}{domain_msg}."
            ),
            "_meta": build_meta(),
        }

    return {
        "found": True,
        **pair,
        "domain": domain,
        "count": len(agreements),
        "agreements": agreements,
        "_meta": build_meta(),
    }


# ============================================================================
# Mode 3: membership scan over a denormalized party list
# ============================================================================

def _party_list_contains(code: str):
    """SQL predicate: ',' || countries || ',' LIKE '%,CODE,%' (spaces ignored)."""
    padded = (
        literal(",", String)
        + func.replace(DigitalTradeObligation.countries, " ", "", type_=String)
        + literal(",", String)
    )
    # Codes are validated as letters only, so no LIKE wildcards can leak in.
    return padded.like(f"%,{code},%")


def check_digital_trade_obligations(session: Session, countries: Sequence[str]) -> Dict[str, Any]:
    """
    Digital trade obligations applying to any of the given countries.

    Args:
        session: SQLAlchemy session on the relation store
        countries: Non-empty list of codes (any case); duplicates collapse

    Returns:
        Envelope with countries as [{code, name}] and count + obligations,
        or a not-found message listing the display names.

    Raises:
        InvalidInputError: countries missing, not a list, empty, or malformed
    """
    if isinstance(countries, (str, bytes)) or (countries is not None and not isinstance(countries, Sequence)):
        raise InvalidInputError("countries must be a list of country codes.", field="countries")
    if not countries:
        raise InvalidInputError(EMPTY_COUNTRIES_MESSAGE, field="countries")

    codes = normalize_codes(countries)

    stmt = (
        select(DigitalTradeObligation, Agreement.title)
        .outerjoin(Agreement, Agreement.id == DigitalTradeObligation.agreement_id)
        .where(or_(*[_party_list_contains(code) for code in codes]))
        .order_by(
            DigitalTradeObligation.agreement_id,
            DigitalTradeObligation.chapter,
            DigitalTradeObligation.id,
        )
    )

    obligations: List[Dict[str, Any]] = [
        {**record.as_dict(), "agreement_title": agreement_title}
        for record, agreement_title in session.execute(stmt).all()
    ]

    if not obligations:
        names = ", ".join(country_name(code) for code in codes)
        return {
            "found": False,
            "countries": country_refs(codes),
            "message": f"No digital trade obligations found for {names}.",
            "_meta": build_meta(),
        }

    return {
        "found": True,
        "countries": country_refs(codes),
        "count": len(obligations),
        "obligations": obligations,
        "_meta": build_meta(),
    }
