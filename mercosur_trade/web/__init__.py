"""
Flask application factory.

The web app only serves health/version endpoints for deployments; the MCP
tools themselves are served by mcp_servers/trade_server.py. The same
factory gives the database builder an app context for db.create_all().
"""

import os
import time
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask

from mercosur_trade.config import get_db_path
from mercosur_trade.web.db import db


def create_app(config_overrides: Optional[Dict[str, Any]] = None) -> Flask:
    app = Flask(__name__)

    default_uri = f"sqlite:///{Path(get_db_path()).resolve().as_posix()}"
    app.config.update({
        "SQLALCHEMY_DATABASE_URI": os.environ.get("SQLALCHEMY_DATABASE_URI", default_uri),
        "SQLALCHEMY_TRACK_MODIFICATIONS": False,
    })
    if config_overrides:
        app.config.update(config_overrides)

    app.config.setdefault("STARTED_AT", time.time())

    db.init_app(app)

    from mercosur_trade.web.views import health_views
    app.register_blueprint(health_views.bp)

    return app
