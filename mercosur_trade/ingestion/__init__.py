"""
Seed data ingestion: builds the read-only SQLite database served by the MCP tools.
"""

from .build_db import BuildReport, build_database

__all__ = ["BuildReport", "build_database"]
