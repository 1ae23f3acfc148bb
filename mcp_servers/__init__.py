"""
MCP (Model Context Protocol) Servers for the Mercosur Trade Agreements Database

This package contains the MCP server that exposes the read-only LATAM trade
agreements database (Mercosur, Pacific Alliance, PROSUR) as tools.

Servers:
    - trade_server: agreement search, data transfer rules, mutual
      recognition, digital trade obligations, bloc rules, sources, freshness
"""

from .config import MCP_HOST, MCP_PORT, MCP_TRANSPORT, SERVER_NAME, SERVER_VERSION

__all__ = ["MCP_HOST", "MCP_PORT", "MCP_TRANSPORT", "SERVER_NAME", "SERVER_VERSION"]
