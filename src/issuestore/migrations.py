"""Schema migration framework for issuestore.

Migrations are version-keyed functions that transform the database schema
into the version they are registered under. Each migration receives a raw
sqlite3.Connection and should be idempotent (IF NOT EXISTS / IF EXISTS).

The schema version lives in a single-row ``schema_version`` table. The
migration runner:
  1. Reads the stored version (0 when the table does not exist yet)
  2. Applies each pending migration in ascending target-version order
  3. Stamps the new version inside the same transaction as the migration
  4. Rolls back and stops on the first failure, so the database stays at
     the last successfully stamped version

Adding a new migration:
  1. Increment CURRENT_SCHEMA_VERSION in db_schema.py
  2. Add a function here: def migrate_to_v<N>(conn) -> None
  3. Register it in MIGRATIONS: N: migrate_to_v<N>
  4. Update SCHEMA_SQL in db_schema.py to match the post-migration state
  5. Add a test in tests/test_migrations.py

Already-applied steps are never edited; new behaviour goes in a new step.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Protocol

from issuestore.db_base import StorageFault
from issuestore.db_schema import SCHEMA_VERSION_SQL

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Migration function protocol
# ---------------------------------------------------------------------------


class MigrationFn(Protocol):
    """Protocol for migration functions."""

    def __call__(self, conn: sqlite3.Connection) -> None: ...


# ---------------------------------------------------------------------------
# Migration registry
#
# Keys are the version being migrated TO. Version 1 is the baseline created
# by SCHEMA_SQL and has no step.
#
# Example: {2: migrate_to_v2} means "if the stored version is 1, run this to get to 2"
# ---------------------------------------------------------------------------

MIGRATIONS: dict[int, MigrationFn] = {
    # 2: migrate_to_v2,
}


class MigrationError(StorageFault):
    """Raised when a migration step (or the baseline stamp) fails."""

    def __init__(self, from_version: int, to_version: int, cause: Exception) -> None:
        self.from_version = from_version
        self.to_version = to_version
        self.cause = cause
        super().__init__(f"Migration v{from_version} → v{to_version} failed: {cause}")


# ---------------------------------------------------------------------------
# Version marker
# ---------------------------------------------------------------------------


def read_schema_version(conn: sqlite3.Connection) -> int:
    """Return the stored schema version, or 0 for a never-migrated database.

    Raises StorageFault when the version table exists but cannot be read.
    """
    try:
        exists = conn.execute("SELECT 1 FROM sqlite_master WHERE type='table' AND name='schema_version'").fetchone()
        if exists is None:
            return 0
        row = conn.execute("SELECT version FROM schema_version LIMIT 1").fetchone()
        return 0 if row is None else int(row[0])
    except (sqlite3.Error, TypeError, ValueError) as exc:
        msg = f"Failed to read schema version: {exc}"
        raise StorageFault(msg) from exc


def stamp_version(conn: sqlite3.Connection, version: int) -> None:
    """Write *version* into the single version row. Caller owns the transaction."""
    conn.execute("INSERT OR REPLACE INTO schema_version (rowid, version) VALUES (1, ?)", (version,))


def stamp_baseline(conn: sqlite3.Connection, version: int) -> None:
    """Create the version table on a fresh database and stamp *version*.

    Table creation and stamp commit together or not at all.
    """
    try:
        conn.execute("BEGIN IMMEDIATE")
        conn.execute(SCHEMA_VERSION_SQL)
        stamp_version(conn, version)
        conn.commit()
    except sqlite3.Error as exc:
        conn.rollback()
        raise MigrationError(0, version, exc) from exc
    logger.info("Stamped fresh database at schema v%d", version, extra={"op": "migrate"})


# ---------------------------------------------------------------------------
# Migration runner
# ---------------------------------------------------------------------------


def apply_pending_migrations(conn: sqlite3.Connection, target_version: int) -> int:
    """Apply all pending migrations from the stored version up to target_version.

    Args:
        conn: Open SQLite connection with the version table already present.
        target_version: Normally CURRENT_SCHEMA_VERSION from db_schema.py.

    Returns:
        Number of migrations applied (0 if already up to date).

    Raises:
        MigrationError: If a step is missing or fails (DB left at the last
            successfully stamped version), or the database is newer than
            target_version (downgrade is not supported).
    """
    current = read_schema_version(conn)

    if current == target_version:
        return 0

    if current > target_version:
        msg = f"Database schema v{current} is newer than this version of issuestore (expects v{target_version}). Downgrade is not supported."
        raise MigrationError(current, target_version, ValueError(msg))

    applied = 0
    for version in range(current + 1, target_version + 1):
        migration = MIGRATIONS.get(version)
        if migration is None:
            msg = (
                f"No migration registered for v{version - 1} → v{version}. "
                f"Database is at v{version - 1}, target is v{target_version}. "
                f"Register the migration in issuestore.migrations.MIGRATIONS."
            )
            raise MigrationError(version - 1, version, KeyError(msg))

        logger.info("Applying migration v%d → v%d ...", version - 1, version, extra={"op": "migrate"})
        try:
            conn.execute("BEGIN IMMEDIATE")
            migration(conn)
            stamp_version(conn, version)
            conn.commit()
            applied += 1
            logger.info("Migration v%d → v%d complete.", version - 1, version, extra={"op": "migrate"})
        except Exception as exc:
            conn.rollback()
            raise MigrationError(version - 1, version, exc) from exc

    return applied


# ---------------------------------------------------------------------------
# SQLite migration helpers
#
# These handle the quirks of SQLite's limited ALTER TABLE support.
# ---------------------------------------------------------------------------


def add_column(
    conn: sqlite3.Connection,
    table: str,
    column: str,
    col_type: str = "TEXT",
    default: str | None = "''",
) -> None:
    """Add a column to a table (idempotent).

    Args:
        conn: SQLite connection.
        table: Table name.
        column: New column name.
        col_type: SQL type (TEXT, INTEGER, REAL, BLOB).
        default: DEFAULT value as a SQL literal (e.g., "''" or "0" or "NULL").
                 If None, no DEFAULT clause is added.

    Note: SQLite requires a DEFAULT for ADD COLUMN with NOT NULL.
    """
    existing = {row[1] for row in conn.execute(f"PRAGMA table_info({table})").fetchall()}
    if column in existing:
        return

    default_clause = f" DEFAULT {default}" if default is not None else ""
    conn.execute(f"ALTER TABLE {table} ADD COLUMN {column} {col_type}{default_clause}")


def add_index(
    conn: sqlite3.Connection,
    index_name: str,
    table: str,
    columns: list[str],
    *,
    unique: bool = False,
) -> None:
    """Create an index (idempotent via IF NOT EXISTS)."""
    unique_kw = "UNIQUE " if unique else ""
    cols = ", ".join(columns)
    conn.execute(f"CREATE {unique_kw}INDEX IF NOT EXISTS {index_name} ON {table}({cols})")
