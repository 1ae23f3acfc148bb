"""
Database handles.

- db: Flask-SQLAlchemy extension used by the web app and the database builder
- TradeStore: process-scoped read-only handle used by the MCP tools
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

from .store import TradeStore, get_store, close_store  # noqa: E402

__all__ = ["db", "TradeStore", "get_store", "close_store"]
