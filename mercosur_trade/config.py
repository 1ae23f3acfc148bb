"""
Application configuration.

Server identity, database location and response metadata constants shared by
the services, the MCP server and the health web app. Values can be overridden
through environment variables (a local .env file is loaded first).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

REPO_ROOT = Path(__file__).resolve().parent.parent

# Server identity (reported in every response's metadata block)
SERVER_NAME = "mercosur-trade-mcp"
SERVER_VERSION = "0.1.0"
SERVER_DESCRIPTION = (
    "Mercosur and LATAM trade agreements MCP - cross-border data transfers, "
    "mutual recognition, digital trade obligations."
)

# Database location (read-only at serve time)
DB_ENV_VAR = "MERCOSUR_TRADE_DB_PATH"
DEFAULT_DB_PATH = REPO_ROOT / "data" / "database.db"


def get_db_path() -> str:
    """Resolve the database path from the environment at call time."""
    return os.environ.get(DB_ENV_VAR) or str(DEFAULT_DB_PATH)


# Supported MCP transports
TRANSPORTS = ("stdio", "streamable-http")

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FORMAT = os.environ.get("LOG_FORMAT", "json")  # "json" or "text"

# Freshness
STALE_THRESHOLD_DAYS = 90

# Response metadata
DISCLAIMER = (
    "Reference tool only. Not legal or trade advice. Verify against official "
    "treaty texts and consult qualified trade counsel."
)

# Publisher information (about tool, health endpoint)
PUBLISHER = "Ansvar Systems AB"
LICENSE = "Apache-2.0"
REPOSITORY_URL = "https://github.com/Ansvar-Systems/mercosur-trade-mcp"
NETWORK = {
    "name": "Ansvar MCP Network",
    "directory": "https://ansvar.ai/mcp",
}
