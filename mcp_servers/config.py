"""
MCP Server Configuration

Transport settings for the Mercosur trade MCP server. Server identity and
database location live in mercosur_trade.config.
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from mercosur_trade.config import SERVER_NAME, SERVER_VERSION, TRANSPORTS, get_db_path

# Transport Selection
# - stdio: local MCP clients (desktop apps, IDEs) - default
# - streamable-http: remote deployments behind an HTTP endpoint
MCP_TRANSPORT = os.environ.get("MCP_TRANSPORT", "stdio")
MCP_HOST = os.environ.get("MCP_HOST", "127.0.0.1")
MCP_PORT = int(os.environ.get("MCP_PORT", "8000"))

__all__ = [
    "SERVER_NAME",
    "SERVER_VERSION",
    "get_db_path",
    "TRANSPORTS",
    "MCP_TRANSPORT",
    "MCP_HOST",
    "MCP_PORT",
]
