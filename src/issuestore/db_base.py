"""Shared utilities, errors, and Protocol for DB mixins."""

from __future__ import annotations

import contextlib
import logging
import os
import sqlite3
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from issuestore.core import Issue

logger = logging.getLogger(__name__)


class StorageFault(Exception):
    """The database cannot be opened, prepared, read, or written.

    Fatal to the calling sequence: the store must not be used after a fault
    raised while opening or migrating.
    """


@contextlib.contextmanager
def storage_errors(conn: sqlite3.Connection, action: str) -> Iterator[None]:
    """Translate sqlite3 errors raised inside the block into StorageFault.

    Any open transaction is rolled back first, so a failed mutation leaves
    no partial write behind. Busy-timeout exhaustion lands here too.
    """
    try:
        yield
    except sqlite3.Error as exc:
        if conn.in_transaction:
            with contextlib.suppress(sqlite3.Error):
                conn.rollback()
        logger.error("%s failed: %s", action, exc, extra={"op": action, "error": str(exc)})
        msg = f"{action} failed: {exc}"
        raise StorageFault(msg) from exc


class DBMixinProtocol(Protocol):
    """Shared attributes and methods that DB mixins access via self.

    Mixins inherit this Protocol so mypy can type-check self.conn,
    self.list_issues(), etc. without ``type: ignore`` on every call.
    Actual implementations are provided by IssueDB at composition time.
    """

    db_path: Path
    _conn: sqlite3.Connection | None

    @property
    def conn(self) -> sqlite3.Connection: ...

    def current_version(self) -> int: ...

    def list_issues(self, tag: Any = None, status: Any = None) -> list[Issue]: ...


def write_atomic(path: Path, content: str) -> None:
    """Write content to path atomically via temp file + os.replace()."""
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp.write_text(content, encoding="utf-8")
        os.replace(tmp, path)
    except BaseException:
        with contextlib.suppress(OSError):
            tmp.unlink()
        raise
