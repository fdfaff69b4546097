"""Database schema creation and migrations.

Creates the schema from schema.sql on first open and migrates databases
written by older releases (v1 had no draft flag and no sales metric).
"""

from __future__ import annotations

import logging
import sqlite3
import time
from pathlib import Path

from storecollections.utils.i18n import t

logger = logging.getLogger("storecoll.database")

__all__ = ["SchemaMixin"]


class SchemaMixin:
    """Mixin providing schema creation and migration logic.

    Requires ConnectionBase attributes: conn, SCHEMA_VERSION.
    """

    def _ensure_schema(self) -> None:
        """Create or migrate database schema."""
        current_version = self._get_schema_version()

        if current_version == 0:
            self._create_schema()
            self._set_schema_version(self.SCHEMA_VERSION)
        elif current_version < self.SCHEMA_VERSION:
            self._migrate(current_version, self.SCHEMA_VERSION)

    def _get_schema_version(self) -> int:
        """Get current database schema version, 0 for a fresh file."""
        try:
            cursor = self.conn.execute("SELECT MAX(version) FROM schema_version")
            result = cursor.fetchone()
            return result[0] if result[0] is not None else 0
        except sqlite3.OperationalError:
            return 0

    def _set_schema_version(self, version: int, description: str | None = None) -> None:
        self.conn.execute(
            """
            INSERT OR REPLACE INTO schema_version (version, applied_at, description)
            VALUES (?, ?, ?)
            """,
            (version, int(time.time()), description or t("logs.db.schema_created")),
        )
        self.conn.commit()

    def _create_schema(self) -> None:
        """Create initial database schema from SQL file."""
        schema_path = Path(__file__).parent / "schema.sql"
        try:
            schema_sql = schema_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.error(t("logs.db.schema_not_found", path=str(schema_path)))
            raise

        try:
            self.conn.executescript(schema_sql)
            self.conn.commit()
            logger.info(t("logs.db.schema_created"))
        except sqlite3.Error as e:
            logger.error(t("logs.db.schema_error", error=str(e)))
            raise

    def _migrate(self, from_version: int, to_version: int) -> None:
        """Migrate database schema step by step.

        Args:
            from_version: Current schema version.
            to_version: Target schema version.
        """
        logger.info(t("logs.db.migrating", old=from_version, new=to_version))

        if from_version < 2:
            self._migrate_to_v2()
            self._set_schema_version(2, "draft flag + sales metric")

    def _add_column(self, table: str, column_sql: str) -> None:
        try:
            self.conn.execute(f"ALTER TABLE {table} ADD COLUMN {column_sql}")
        except sqlite3.OperationalError:
            pass  # Column already exists

    def _migrate_to_v2(self) -> None:
        """Migrate to schema v2: collections.is_draft + products.units_sold."""
        self._add_column("collections", "is_draft INTEGER NOT NULL DEFAULT 0")
        self._add_column("products", "units_sold INTEGER NOT NULL DEFAULT 0")
        self.conn.commit()
        logger.info(t("logs.db.migrated", version=2))
