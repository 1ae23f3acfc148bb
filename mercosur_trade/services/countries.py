"""
Country and trade bloc reference data, plus small query helpers.

Display-name resolution is non-authoritative: unknown codes (e.g. "EU")
resolve to the code itself and never block a query.
"""

import math
import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from mercosur_trade.errors import InvalidInputError

DEFAULT_LIMIT = 10
MAX_LIMIT = 50

# ============================================================================
# Trade Bloc Membership
# ============================================================================

MERCOSUR_MEMBERS = ("BR", "AR", "UY", "PY")  # Estados Partes
MERCOSUR_ASSOCIATES = ("CL", "CO", "EC", "PE", "GY", "SR")  # Estados Asociados
PACIFIC_ALLIANCE = ("CL", "CO", "MX", "PE")
PROSUR_MEMBERS = ("AR", "BR", "CL", "CO", "EC", "GY", "PE", "PY", "SR", "UY")

ALL_COUNTRIES = tuple(dict.fromkeys(
    MERCOSUR_MEMBERS + MERCOSUR_ASSOCIATES + PACIFIC_ALLIANCE + PROSUR_MEMBERS + ("MX", "BO", "VE")
))

COUNTRY_NAMES = {
    "AR": "Argentina",
    "BO": "Bolivia",
    "BR": "Brazil",
    "CL": "Chile",
    "CO": "Colombia",
    "EC": "Ecuador",
    "GY": "Guyana",
    "MX": "Mexico",
    "PE": "Peru",
    "PY": "Paraguay",
    "SR": "Suriname",
    "UY": "Uruguay",
    "VE": "Venezuela",
}

BLOCS = {
    "mercosur": {
        "id": "mercosur",
        "name": "Mercosur",
        "full_name": "Mercado Comun del Sur (Southern Common Market)",
        "members": list(MERCOSUR_MEMBERS),
        "associates": list(MERCOSUR_ASSOCIATES),
    },
    "pacific_alliance": {
        "id": "pacific_alliance",
        "name": "Pacific Alliance",
        "full_name": "Alianza del Pacifico",
        "members": list(PACIFIC_ALLIANCE),
        "associates": [],
    },
    "prosur": {
        "id": "prosur",
        "name": "PROSUR",
        "full_name": "Forum for the Progress and Development of South America",
        "members": list(PROSUR_MEMBERS),
        "associates": [],
    },
}

# ISO alpha-2 plus short synthetic codes such as "EU"
_CODE_PATTERN = re.compile(r"^[A-Z]{2,3}$")

# Characters with special meaning in FTS5 query syntax
_FTS5_SPECIAL = re.compile(r"[()^*:]")


# ============================================================================
# Code normalization
# ============================================================================

def normalize_code(value: Any, field: str = "country") -> str:
    """
    Canonicalize an entity code: strip, uppercase, validate shape.

    Raises:
        InvalidInputError: if the value is not a 2-3 letter code
    """
    if not isinstance(value, str):
        raise InvalidInputError(f"{field} must be a string country code.", field=field)
    code = value.strip().upper()
    if not _CODE_PATTERN.match(code):
        raise InvalidInputError(
            f"Invalid {field} code {value!r}: expected a 2-3 letter code such as 'BR' or 'EU'.",
            field=field,
        )
    return code


def normalize_codes(values: Iterable[Any], field: str = "countries") -> List[str]:
    """Normalize a list of codes, dropping duplicates but keeping first-seen order."""
    return list(dict.fromkeys(normalize_code(value, field) for value in values))


def country_name(code: str) -> str:
    """Resolve a display name from a code, falling back to the code itself."""
    code = code.upper()
    return COUNTRY_NAMES.get(code, code)


def country_refs(codes: Iterable[str]) -> List[Dict[str, str]]:
    """[{"code": "BR", "name": "Brazil"}, ...]"""
    return [{"code": code, "name": country_name(code)} for code in codes]


def has_any_code(denormalized: Optional[str], codes: Iterable[str]) -> bool:
    """Exact token membership test against a comma-joined code list."""
    if not denormalized:
        return False
    tokens = {token.strip().upper() for token in denormalized.split(",")}
    return any(code in tokens for code in codes)


# ============================================================================
# Query helpers
# ============================================================================

def clamp_limit(limit: Any, fallback: int = DEFAULT_LIMIT) -> int:
    """Clamp a limit value to [1, MAX_LIMIT], defaulting to fallback."""
    try:
        value = float(limit)
    except (TypeError, ValueError):
        value = fallback
    if not math.isfinite(value):
        value = fallback
    return min(max(int(value), 1), MAX_LIMIT)


def escape_fts5_query(query: str) -> str:
    """Quote characters that have special meaning in FTS5 queries."""
    return _FTS5_SPECIAL.sub(lambda match: f'"{match.group(0)}"', query)


def to_iso_date(value: Optional[date] = None) -> str:
    """Return YYYY-MM-DD for the given or current date."""
    return (value or date.today()).isoformat()[:10]


def days_since(date_value: Optional[str], now: Optional[datetime] = None) -> Optional[int]:
    """Whole days since an ISO date string, or None if missing/unparseable."""
    if not date_value:
        return None
    try:
        then = datetime.fromisoformat(date_value)
    except ValueError:
        return None
    now = now or datetime.now()
    if then.tzinfo is not None:
        then = then.replace(tzinfo=None)
    if now.tzinfo is not None:
        now = now.replace(tzinfo=None)
    return max(0, (now - then).days)
