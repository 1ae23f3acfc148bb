#!/usr/bin/env python
"""
Mercosur Trade MCP Server

Serves the LATAM trade agreements database (Mercosur, Pacific Alliance,
PROSUR) as MCP tools:
- Full-text search over agreement provisions, single-article lookup
- Bilateral data transfer rules and mutual recognition between countries
- Digital trade obligations for a set of countries
- Trade bloc structure, data sources, server info and data freshness

The database is opened read-only once per process; every tool call uses a
short-lived session and returns a plain JSON object. Invalid input is
reported as a tool error; "nothing found" is a normal result with
found=false and a message.

Usage:
    # Run as MCP server (stdio)
    python -m mcp_servers.trade_server

    # Remote deployment
    python -m mcp_servers.trade_server --transport streamable-http --port 8000

    # Add to an MCP client
    claude mcp add --transport stdio mercosur-trade \
      --env MERCOSUR_TRADE_DB_PATH=/path/to/database.db \
      -- python -m mcp_servers.trade_server
"""

import argparse
import logging
import os
import sys
import time
from typing import Any, Callable, Dict, List, Optional

# Load environment before importing config
from dotenv import load_dotenv
load_dotenv()

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from mercosur_trade.config import DB_ENV_VAR, LOG_FORMAT, LOG_LEVEL
from mercosur_trade.errors import InvalidInputError, StoreUnavailableError
from mercosur_trade.logging_utils import configure_logging, log_tool_call, log_tool_error
from mercosur_trade.services import agreement_search, catalogue, freshness, relation_resolver, trade_blocs
from mercosur_trade.web.db import close_store, get_store

from .config import MCP_HOST, MCP_PORT, MCP_TRANSPORT, SERVER_NAME, TRANSPORTS
from .schemas import validate_tool_result

logger = logging.getLogger(__name__)

# Initialize FastMCP Server
mcp = FastMCP(SERVER_NAME)


def _run_tool(tool_name: str, service_fn: Callable[..., Dict[str, Any]], **inputs) -> Dict[str, Any]:
    """
    Run one service call on a fresh session, with logging and error mapping.

    InvalidInputError and StoreUnavailableError become ToolError so the
    client sees an error result instead of a crashed request.
    """
    start = time.perf_counter()
    try:
        with get_store().session() as session:
            result = service_fn(session, **inputs)
    except (InvalidInputError, StoreUnavailableError) as e:
        log_tool_error(tool_name, inputs, e, (time.perf_counter() - start) * 1000)
        raise ToolError(str(e)) from e

    is_valid, _, error = validate_tool_result(tool_name, result)
    if not is_valid:
        logger.warning("Result of %s failed schema validation: %s", tool_name, error)

    log_tool_call(tool_name, inputs, result, (time.perf_counter() - start) * 1000)
    return result


# ============================================================================
# Tools
# ============================================================================

@mcp.tool()
def search_agreements(
    query: str,
    countries: Optional[List[str]] = None,
    topic: Optional[str] = None,
    limit: Optional[int] = None
) -> dict:
    """
    Full-text search across Mercosur, Pacific Alliance and PROSUR agreement provisions.

    Supports FTS5 syntax: quoted phrases, AND / OR / NOT. Results are ranked by
    relevance and carry a highlighted snippet.

    Args:
        query: Search text, e.g. "data localization" or "comercio electronico"
        countries: Optional ISO codes; only agreements with any of these parties are kept
        topic: Optional topic, e.g. "data_flows", "e_commerce", "dispute_resolution"
        limit: Max results (default 10, max 50)

    Returns:
        dict with query, filters, count and results[] (agreement_id, article_ref,
        title, snippet, agreement_title, parties, rank)
    """
    return _run_tool(
        "search_agreements", agreement_search.search_agreements,
        query=query, countries=countries, topic=topic, limit=limit,
    )


@mcp.tool()
def get_provision(agreement_id: str, article: str) -> dict:
    """
    Retrieve the full text of one article of a trade agreement.

    Args:
        agreement_id: Agreement id, e.g. "treaty-of-asuncion", "pa-additional-protocol"
        article: Article reference, e.g. "1", "13.2"

    Returns:
        dict with found and the provision (content, chapter, topic, agreement details)
    """
    return _run_tool(
        "get_provision", agreement_search.get_provision,
        agreement_id=agreement_id, article=article,
    )


@mcp.tool()
def get_data_transfer_rules(source_country: str, dest_country: str) -> dict:
    """
    Cross-border data transfer framework between two jurisdictions.

    The lookup is symmetric: if no rule is stored for source -> dest, the
    reverse direction is used and reversed_lookup is set to true (the
    framework text was written for the opposite direction).

    Args:
        source_country: ISO code of the exporting country, e.g. "BR" (or "EU")
        dest_country: ISO code of the importing country, e.g. "AR"

    Returns:
        dict with found, codes and names, reversed_lookup and rules
        (framework, adequacy_status, transfer_mechanisms, restrictions, legal_basis)
    """
    return _run_tool(
        "get_data_transfer_rules", relation_resolver.get_data_transfer_rules,
        source_country=source_country, dest_country=dest_country,
    )


@mcp.tool()
def get_mutual_recognition(country_a: str, country_b: str, domain: Optional[str] = None) -> dict:
    """
    Mutual recognition arrangements between two countries, in either direction.

    Args:
        country_a: ISO code, e.g. "BR"
        country_b: ISO code, e.g. "AR"
        domain: Optional exact domain, e.g. "customs_procedures", "product_standards",
            "professional_qualifications", "data_protection"

    Returns:
        dict with found, count and agreements[] ordered by domain
    """
    return _run_tool(
        "get_mutual_recognition", relation_resolver.get_mutual_recognition,
        country_a=country_a, country_b=country_b, domain=domain,
    )


@mcp.tool()
def get_trade_bloc_rules(bloc: str) -> dict:
    """
    Membership, agreements and structure of a trade bloc.

    Args:
        bloc: "mercosur", "pacific_alliance" or "prosur"

    Returns:
        dict with the bloc (members, associates), its agreements and provision count
    """
    return _run_tool("get_trade_bloc_rules", trade_blocs.get_trade_bloc_rules, bloc=bloc)


@mcp.tool()
def check_digital_trade_obligations(countries: List[str]) -> dict:
    """
    Digital trade / e-commerce obligations that apply to any of the given countries.

    Args:
        countries: One or more ISO codes, e.g. ["BR", "CL"]

    Returns:
        dict with countries (code + name), count and obligations[]
    """
    return _run_tool(
        "check_digital_trade_obligations", relation_resolver.check_digital_trade_obligations,
        countries=countries,
    )


@mcp.tool()
def list_sources() -> dict:
    """List data sources with authority, item counts and last fetch dates."""
    return _run_tool("list_sources", catalogue.list_sources)


@mcp.tool()
def about() -> dict:
    """Server information: version, coverage statistics, tools and publisher."""
    return _run_tool("about", catalogue.about)


@mcp.tool()
def check_data_freshness() -> dict:
    """Data age per source with stale flags (older than 90 days)."""
    return _run_tool("check_data_freshness", freshness.check_data_freshness)


TOOL_HANDLERS: Dict[str, Callable[..., dict]] = {
    "search_agreements": search_agreements,
    "get_provision": get_provision,
    "get_data_transfer_rules": get_data_transfer_rules,
    "get_mutual_recognition": get_mutual_recognition,
    "get_trade_bloc_rules": get_trade_bloc_rules,
    "check_digital_trade_obligations": check_digital_trade_obligations,
    "list_sources": list_sources,
    "about": about,
    "check_data_freshness": check_data_freshness,
}


def call_tool(name: str, arguments: Optional[Dict[str, Any]] = None) -> dict:
    """
    Dispatch a tool by name (same path the MCP client takes).

    Raises:
        ValueError: unknown tool name
        ToolError: invalid input or missing database
    """
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        raise ValueError(f"Unknown tool: {name}")
    return handler(**(arguments or {}))


# ============================================================================
# Entry point
# ============================================================================

def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Mercosur trade agreements MCP server")
    parser.add_argument("--transport", choices=TRANSPORTS, default=MCP_TRANSPORT,
                        help="MCP transport (default: stdio)")
    parser.add_argument("--host", default=MCP_HOST, help="Bind host for streamable-http")
    parser.add_argument("--port", type=int, default=MCP_PORT, help="Bind port for streamable-http")
    parser.add_argument("--db-path", default=None,
                        help=f"SQLite database path (default: ${DB_ENV_VAR} or data/database.db)")
    args = parser.parse_args(argv)

    configure_logging(LOG_LEVEL, LOG_FORMAT)

    if args.db_path:
        os.environ[DB_ENV_VAR] = args.db_path

    try:
        get_store()
    except StoreUnavailableError as e:
        logger.error(str(e))
        sys.exit(1)

    if args.transport == "streamable-http":
        mcp.settings.host = args.host
        mcp.settings.port = args.port

    logger.info("Starting %s (%s transport)", SERVER_NAME, args.transport)
    try:
        mcp.run(transport=args.transport)
    finally:
        close_store()


# Entry point for running as MCP server
if __name__ == "__main__":
    main()
