"""
Pytest fixtures for the Mercosur trade tests.

Provides:
- A database built once per session from the shipped seed data
- Read-only store and session fixtures
- Process-wide store pointed at the test database (MCP tools, health views)
- Flask app and test client fixtures
"""

import os
import sys
from datetime import date

import pytest

# Add the repo root to the Python path
repo_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if repo_dir not in sys.path:
    sys.path.insert(0, repo_dir)

# Fixed build date so freshness assertions are deterministic
BUILD_DATE = date(2026, 1, 15)


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def db_path(tmp_path_factory):
    """Build the seed database once for the whole test session."""
    from mercosur_trade.ingestion import build_database

    path = tmp_path_factory.mktemp("data") / "database.db"
    build_database(str(path), build_date=BUILD_DATE)
    return str(path)


@pytest.fixture(scope="session")
def store(db_path):
    """Read-only store on the session database."""
    from mercosur_trade.web.db import TradeStore

    store = TradeStore(db_path)
    yield store
    store.close()


@pytest.fixture
def session(store):
    """Short-lived session, as a tool call would get."""
    with store.session() as session:
        yield session


@pytest.fixture
def global_store(db_path, monkeypatch):
    """Point the process-wide store (get_store) at the session database."""
    from mercosur_trade.config import DB_ENV_VAR
    from mercosur_trade.web.db import close_store

    monkeypatch.setenv(DB_ENV_VAR, db_path)
    close_store()
    yield db_path
    close_store()


@pytest.fixture
def missing_store(tmp_path, monkeypatch):
    """Point the process-wide store at a database file that does not exist."""
    from mercosur_trade.config import DB_ENV_VAR
    from mercosur_trade.web.db import close_store

    monkeypatch.setenv(DB_ENV_VAR, str(tmp_path / "missing.db"))
    close_store()
    yield
    close_store()


# ============================================================================
# Flask App Fixtures
# ============================================================================

@pytest.fixture
def app(global_store):
    """Create Flask application for testing."""
    from mercosur_trade.web import create_app

    app = create_app({"TESTING": True})
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
