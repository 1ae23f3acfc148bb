"""
Read-only relation store.

The MCP server holds one TradeStore for the lifetime of the process: opened
on first use, closed on shutdown. Every tool call gets a short-lived session
from it. The SQLite file is opened with mode=ro so nothing at serve time can
write to it.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional
from urllib.parse import quote

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from mercosur_trade.config import get_db_path
from mercosur_trade.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


def readonly_sqlite_url(db_path: str) -> str:
    """Build a SQLAlchemy URL that opens an existing SQLite file read-only."""
    resolved = Path(db_path).resolve().as_posix()
    return f"sqlite:///file:{quote(resolved)}?mode=ro&uri=true"


class TradeStore:
    """Process-scoped read-only handle to the trade agreements database."""

    def __init__(self, db_path: str):
        path = Path(db_path)
        if not path.is_file():
            raise StoreUnavailableError(
                f"Database not found at {db_path}. Run scripts/build_db.py first."
            )
        self.db_path = str(path)
        self.engine = create_engine(
            readonly_sqlite_url(self.db_path),
            connect_args={"check_same_thread": False},
        )
        self._session_factory = sessionmaker(bind=self.engine, autoflush=False)
        logger.info("Opened trade store (read-only): %s", self.db_path)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session for one request; always closed afterwards."""
        session = self._session_factory()
        try:
            yield session
        finally:
            session.close()

    def metadata(self) -> dict:
        """Return the db_metadata key/value pairs."""
        with self.session() as session:
            rows = session.execute(text("SELECT key, value FROM db_metadata")).all()
        return {key: value for key, value in rows}

    def close(self) -> None:
        self.engine.dispose()
        logger.info("Closed trade store: %s", self.db_path)


# ============================================================================
# Process-scoped handle
# ============================================================================

# Global store reference (opened lazily)
_store: Optional[TradeStore] = None


def get_store(db_path: Optional[str] = None) -> TradeStore:
    """Open (once) and return the process-wide store."""
    global _store
    if _store is None:
        _store = TradeStore(db_path or get_db_path())
    return _store


def close_store() -> None:
    """Release the process-wide store (shutdown, tests)."""
    global _store
    if _store is not None:
        _store.close()
        _store = None
