"""Database connection management.

Handles SQLite connection setup, PRAGMA configuration, and the context
manager protocol.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

logger = logging.getLogger("storecoll.database")

__all__ = ["ConnectionBase"]


class ConnectionBase:
    """Base class providing SQLite connection setup and lifecycle.

    Enables foreign keys (link rows cascade with their collection) and WAL
    mode. Calls _ensure_schema(), which SchemaMixin provides via multiple
    inheritance.
    """

    SCHEMA_VERSION = 2

    conn: sqlite3.Connection
    db_path: Path

    def __init__(self, db_path: Path) -> None:
        """Open the database, creating or migrating the schema.

        Args:
            db_path: Path to SQLite database file.
        """
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self.conn = sqlite3.connect(str(db_path))
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")
        self.conn.execute("PRAGMA journal_mode = WAL")

        self._ensure_schema()

    def commit(self) -> None:
        """Commit current transaction."""
        self.conn.commit()

    def rollback(self) -> None:
        """Discard uncommitted changes."""
        self.conn.rollback()

    def close(self) -> None:
        """Close database connection."""
        self.conn.close()

    def __enter__(self) -> ConnectionBase:
        return self

    def __exit__(self, exc_type: Any, *args: Any) -> None:
        """Commit on success, roll back on error, then close."""
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
        self.close()
