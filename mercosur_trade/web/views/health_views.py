"""
Health Views.
Liveness and version information for deployments and the MCP network directory.
"""

import os
import platform
import time
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError, version as package_version

from flask import Blueprint, current_app, jsonify
from sqlalchemy import func, select

from mercosur_trade.config import REPOSITORY_URL, SERVER_NAME, SERVER_VERSION, TRANSPORTS
from mercosur_trade.errors import StoreUnavailableError
from mercosur_trade.web.db import get_store
from mercosur_trade.web.db.models import Source

bp = Blueprint("health", __name__)

CAPABILITIES = [
    "search_agreements",
    "data_transfer_rules",
    "mutual_recognition",
    "digital_trade_obligations",
    "trade_bloc_rules",
]

# Process start, reported as build_timestamp when no build date is available
_BUILD_TIMESTAMP = datetime.now(timezone.utc).isoformat()


def _git_sha() -> str:
    sha = os.environ.get("GIT_COMMIT_SHA", "")
    return sha[:7] if sha else "unknown"


def _data_freshness() -> dict:
    try:
        store = get_store()
        meta = store.metadata()
        with store.session() as session:
            source_count = session.execute(select(func.count()).select_from(Source)).scalar_one()
    except StoreUnavailableError:
        return {"last_ingested": "pending", "source_count": 0}
    return {
        "last_ingested": meta.get("build_date", "pending"),
        "source_count": source_count,
    }


def _health_payload() -> dict:
    return {
        "status": "ok",
        "server": SERVER_NAME,
        "version": SERVER_VERSION,
        "git_sha": _git_sha(),
        "uptime_seconds": int(time.time() - current_app.config["STARTED_AT"]),
        "build_timestamp": os.environ.get("BUILD_TIMESTAMP", _BUILD_TIMESTAMP),
        "data_freshness": _data_freshness(),
        "capabilities": list(CAPABILITIES),
        "tier": "free",
    }


@bp.route("/health", methods=["GET"])
def health():
    """Liveness plus data freshness."""
    return jsonify(_health_payload())


@bp.route("/health/version", methods=["GET"])
def health_version():
    """Health payload plus runtime and transport details."""
    try:
        mcp_sdk_version = package_version("mcp")
    except PackageNotFoundError:
        mcp_sdk_version = "unknown"

    return jsonify({
        **_health_payload(),
        "python_version": platform.python_version(),
        "transport": list(TRANSPORTS),
        "mcp_sdk_version": mcp_sdk_version,
        "repo_url": REPOSITORY_URL,
        "report_issue_url": f"{REPOSITORY_URL}/issues/new",
    })
