"""Core database operations for issuestore.

Single source of truth for all SQLite operations; the CLI imports from this
module. No daemon, no server, just one SQLite file and one connection per
``IssueDB``.

Convention-based discovery: each project has a `.issuestore/` directory
containing `issues.db` (SQLite) and `config.json` (page size, default user).
"""

from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from issuestore.db_base import StorageFault
from issuestore.db_issues import IssuesMixin
from issuestore.db_meta import MetaMixin
from issuestore.db_schema import CURRENT_SCHEMA_VERSION, SCHEMA_SQL
from issuestore.migrations import apply_pending_migrations, read_schema_version, stamp_baseline
from issuestore.types.core import IssueDict, IssueStatus, IssueTag, ProjectConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Convention-based discovery
# ---------------------------------------------------------------------------

STORE_DIR_NAME = ".issuestore"
DB_FILENAME = "issues.db"
CONFIG_FILENAME = "config.json"

DEFAULT_PAGE_SIZE = 10
BUSY_TIMEOUT_MS = 5000


def find_store_root(start: Path | None = None) -> Path:
    """Walk up from start (default cwd) looking for .issuestore/ directory.

    Returns the .issuestore/ directory path (not the project root).
    """
    current = (start or Path.cwd()).resolve()
    for parent in [current, *current.parents]:
        candidate = parent / STORE_DIR_NAME
        if candidate.is_dir():
            return candidate
    msg = f"No {STORE_DIR_NAME}/ directory found in {current} or any parent"
    raise FileNotFoundError(msg)


def read_config(store_dir: Path) -> ProjectConfig:
    """Read .issuestore/config.json. Returns defaults if missing or corrupt."""
    defaults = ProjectConfig(version=1, page_size=DEFAULT_PAGE_SIZE)
    config_path = store_dir / CONFIG_FILENAME
    if not config_path.exists():
        return defaults
    try:
        result: ProjectConfig = json.loads(config_path.read_text())
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Failed to read %s, using defaults: %s", config_path, exc)
        return defaults
    if not isinstance(result, dict):
        logger.warning("Ignoring non-object config in %s", config_path)
        return defaults
    return result


def write_config(store_dir: Path, config: dict[str, Any] | ProjectConfig) -> None:
    """Write .issuestore/config.json."""
    config_path = store_dir / CONFIG_FILENAME
    config_path.write_text(json.dumps(config, indent=2) + "\n")


def get_page_size(store_dir: Path) -> int:
    """Return the configured list page size. Defaults to 10."""
    size = read_config(store_dir).get("page_size", DEFAULT_PAGE_SIZE)
    if isinstance(size, bool) or not isinstance(size, int) or size < 1:
        logger.warning("Invalid page_size %r in config, falling back to %d", size, DEFAULT_PAGE_SIZE)
        return DEFAULT_PAGE_SIZE
    return size


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class Issue:
    id: int
    name: str
    detail: str
    tag: IssueTag
    status: IssueStatus
    user_id: str

    def to_dict(self) -> IssueDict:
        return {
            "id": self.id,
            "name": self.name,
            "detail": self.detail,
            "tag": int(self.tag),
            "status": int(self.status),
            "user_id": self.user_id,
        }


# ---------------------------------------------------------------------------
# IssueDB
# ---------------------------------------------------------------------------


class IssueDB(IssuesMixin, MetaMixin):
    """One SQLite connection plus the issue operations that run on it."""

    def __init__(self, db_path: str | Path, *, check_same_thread: bool = True) -> None:
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None
        self._check_same_thread = check_same_thread

    @classmethod
    def from_project(cls, project_path: Path | None = None) -> IssueDB:
        """Create an opened IssueDB by discovering .issuestore/ from project_path (or cwd)."""
        store_dir = find_store_root(project_path)
        db = cls(store_dir / DB_FILENAME)
        db.open()
        return db

    def __enter__(self) -> IssueDB:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            msg = f"Database {self.db_path} is not open; call open() first"
            raise StorageFault(msg)
        return self._conn

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    # -- Lifecycle -----------------------------------------------------------

    def open(self) -> bool:
        """Open (or create) the database, ensure the issue table, and migrate.

        Calling open() on an already-open store is a no-op. Any failure
        raises StorageFault and leaves the store closed.
        """
        if self._conn is not None:
            return True

        conn: sqlite3.Connection | None = None
        try:
            conn = sqlite3.connect(
                str(self.db_path),
                isolation_level="DEFERRED",
                check_same_thread=self._check_same_thread,
                timeout=BUSY_TIMEOUT_MS / 1000,
            )
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_MS}")
            conn.executescript(SCHEMA_SQL)
        except sqlite3.Error as exc:
            if conn is not None:
                conn.close()
            msg = f"Failed to open database {self.db_path}: {exc}"
            raise StorageFault(msg) from exc

        self._conn = conn
        try:
            self.migrate()
        except StorageFault:
            self.close()
            raise

        logger.info("Opened %s at schema v%d", self.db_path, self.current_version(), extra={"op": "open"})
        return True

    def current_version(self) -> int:
        """Return the stored schema version (0 for a never-migrated database)."""
        return read_schema_version(self.conn)

    def migrate(self) -> int:
        """Bring the schema up to CURRENT_SCHEMA_VERSION.

        A fresh database gets the version table and a baseline stamp; an older
        one gets each pending step in order. Returns the number of steps run.
        """
        if self.current_version() == 0:
            stamp_baseline(self.conn, CURRENT_SCHEMA_VERSION)
            return 0
        return apply_pending_migrations(self.conn, CURRENT_SCHEMA_VERSION)

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # -- Row materialisation -------------------------------------------------

    def _build_issue(self, row: sqlite3.Row) -> Issue:
        """Materialise a row. Out-of-range tag or status values raise StorageFault."""
        try:
            tag = IssueTag(row["tag"])
            status = IssueStatus(row["status"])
        except ValueError as exc:
            msg = f"Issue #{row['id']} holds an invalid value: {exc}"
            raise StorageFault(msg) from exc
        return Issue(
            id=row["id"],
            name=row["name"],
            detail=row["detail"],
            tag=tag,
            status=status,
            user_id=row["user_id"],
        )
