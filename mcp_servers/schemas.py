"""
Pydantic Schemas for Tool Result Validation

These schemas check the envelope of every tool result before it is sent to
the client: found flags, counts, normalized codes and the metadata block.
Payload fields beyond the envelope are allowed through unchanged.

Uses strict mode to prevent silent coercion (e.g., "true" -> True, "3" -> 3).
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from mercosur_trade.services.metadata import ResponseMeta


# ============================================================================
# Shared Pieces
# ============================================================================

class Envelope(BaseModel):
    """Base for tool results: strict types on declared fields, extras allowed."""
    model_config = ConfigDict(strict=True, extra="allow", populate_by_name=True)


class CountryRef(BaseModel):
    model_config = ConfigDict(strict=True)

    code: str
    name: str


# ============================================================================
# Relation Lookups
# ============================================================================

class DataTransferRulesResult(Envelope):
    """Single-row lookup; reversed_lookup and rules are present only when found.

    Example:
        {
            "found": true,
            "source_country": "EU", "source_country_name": "EU",
            "dest_country": "AR", "dest_country_name": "Argentina",
            "reversed_lookup": true,
            "rules": {"adequacy_status": "adequacy", ...},
            "_metadata": {...}
        }
    """
    found: bool
    source_country: str
    source_country_name: str
    dest_country: str
    dest_country_name: str
    reversed_lookup: Optional[bool] = None
    rules: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
    meta: ResponseMeta = Field(alias="_metadata")


class MutualRecognitionResult(Envelope):
    found: bool
    country_a: str
    country_b: str
    domain: Optional[str] = None
    count: Optional[int] = None
    agreements: Optional[List[Dict[str, Any]]] = None
    message: Optional[str] = None
    meta: ResponseMeta = Field(alias="_meta")


class DigitalTradeObligationsResult(Envelope):
    found: bool
    countries: List[CountryRef]
    count: Optional[int] = None
    obligations: Optional[List[Dict[str, Any]]] = None
    message: Optional[str] = None
    meta: ResponseMeta = Field(alias="_meta")


# ============================================================================
# Catalogue Lookups
# ============================================================================

class SearchResult(Envelope):
    query: str
    filters: Dict[str, Any]
    count: int
    results: List[Dict[str, Any]]
    message: Optional[str] = None
    meta: ResponseMeta = Field(alias="_meta")


class ProvisionResult(Envelope):
    found: bool
    provision: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
    meta: ResponseMeta = Field(alias="_metadata")


class TradeBlocResult(Envelope):
    found: bool
    bloc: Any
    agreements: Optional[Dict[str, Any]] = None
    provisions_count: Optional[int] = None
    message: Optional[str] = None
    meta: ResponseMeta = Field(alias="_meta")


class SourcesResult(Envelope):
    sources: List[Dict[str, Any]]
    totals: Dict[str, int]
    meta: ResponseMeta = Field(alias="_meta")


class AboutResult(Envelope):
    name: str
    version: str
    statistics: Dict[str, int]
    tools: List[str]
    meta: ResponseMeta = Field(alias="_metadata")


class FreshnessResult(Envelope):
    checked_at: str
    stale_threshold_days: int
    stale_count: int
    total_sources: int
    sources: List[Dict[str, Any]]
    meta: ResponseMeta = Field(alias="_metadata")


RESULT_SCHEMAS = {
    "get_data_transfer_rules": DataTransferRulesResult,
    "get_mutual_recognition": MutualRecognitionResult,
    "check_digital_trade_obligations": DigitalTradeObligationsResult,
    "search_agreements": SearchResult,
    "get_provision": ProvisionResult,
    "get_trade_bloc_rules": TradeBlocResult,
    "list_sources": SourcesResult,
    "about": AboutResult,
    "check_data_freshness": FreshnessResult,
}


# ============================================================================
# Validation Functions
# ============================================================================

def validate_tool_result(tool_name: str, result: dict) -> tuple[bool, Optional[Envelope], Optional[str]]:
    """
    Validate a tool result against its envelope schema.

    Args:
        tool_name: Name of the tool that produced the result
        result: The dict returned by the service function

    Returns:
        (is_valid, validated_result, error_message)
    """
    schema = RESULT_SCHEMAS.get(tool_name)
    if schema is None:
        return False, None, f"No schema registered for tool {tool_name!r}"

    try:
        validated = schema.model_validate(result)
        return True, validated, None
    except Exception as e:
        return False, None, str(e)
