"""Database schema definitions for issuestore.

Contains the canonical SQL for the issue table, the version-marker table,
and the current schema version constant.
"""

from __future__ import annotations

SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS issue (
    id       INTEGER PRIMARY KEY AUTOINCREMENT,
    tag      INTEGER NOT NULL,
    status   INTEGER NOT NULL,
    name     TEXT NOT NULL,
    detail   TEXT NOT NULL,
    user_id  TEXT NOT NULL,

    CHECK (tag BETWEEN 0 AND 2),
    CHECK (status BETWEEN 0 AND 3)
);

CREATE INDEX IF NOT EXISTS idx_issue_tag_status ON issue(tag, status);
"""

# Single row, rowid 1. Absent on a database that has never been migrated.
SCHEMA_VERSION_SQL = """\
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER NOT NULL
);
"""

CURRENT_SCHEMA_VERSION = 1
