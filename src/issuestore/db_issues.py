"""IssuesMixin: issue CRUD and filtered listing.

All methods access ``self.conn`` and ``self._build_issue()`` via Python's
MRO when composed into ``IssueDB``. Validation always runs before the
connection is touched.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import TYPE_CHECKING, Any

from issuestore.db_base import DBMixinProtocol, StorageFault, storage_errors
from issuestore.types.core import IssueStatus
from issuestore.validation import validate_new_issue, validate_status, validate_tag

if TYPE_CHECKING:
    from issuestore.core import Issue

logger = logging.getLogger(__name__)

ISSUE_COLUMNS = "id, tag, status, name, detail, user_id"


class IssuesMixin(DBMixinProtocol):
    """Issue CRUD and filtered listing.

    Inherits ``DBMixinProtocol`` for type-safe access to shared attributes.
    Actual implementations provided by ``IssueDB`` at composition time via MRO.
    """

    if TYPE_CHECKING:

        def _build_issue(self, row: sqlite3.Row) -> Issue: ...

    # -- Create --------------------------------------------------------------

    def create_issue(self, name: str, detail: str, tag: int, user_id: str) -> int:
        """Insert a new issue in the Proposed state and return its id.

        Raises ValidationError (nothing written) when a field is out of bounds.
        """
        name, detail, issue_tag, user_id = validate_new_issue(name, detail, tag, user_id)

        with storage_errors(self.conn, "create_issue"):
            cursor = self.conn.execute(
                "INSERT INTO issue (tag, status, name, detail, user_id) VALUES (?, ?, ?, ?, ?)",
                (int(issue_tag), int(IssueStatus.PROPOSED), name, detail, user_id),
            )
            self.conn.commit()

        issue_id = cursor.lastrowid
        if issue_id is None:  # pragma: no cover
            msg = "INSERT did not produce a lastrowid"
            raise StorageFault(msg)
        logger.info(
            "Created issue #%d",
            issue_id,
            extra={"op": "create_issue", "issue_id": issue_id, "args_data": {"tag": int(issue_tag), "user_id": user_id}},
        )
        return issue_id

    # -- Read ----------------------------------------------------------------

    def get_issue(self, issue_id: int) -> Issue | None:
        """Return the issue with *issue_id*, or None when no row matches."""
        with storage_errors(self.conn, "get_issue"):
            row = self.conn.execute(f"SELECT {ISSUE_COLUMNS} FROM issue WHERE id = ?", (issue_id,)).fetchone()
        if row is None:
            logger.debug("Issue #%s not found", issue_id, extra={"op": "get_issue", "issue_id": issue_id})
            return None
        return self._build_issue(row)

    def list_issues(self, tag: Any = None, status: Any = None) -> list[Issue]:
        """Return every issue matching the given filters, in id order.

        Each filter is optional and independent; supplying both ANDs them.
        """
        conditions: list[str] = []
        params: list[Any] = []

        if tag is not None:
            conditions.append("tag = ?")
            params.append(int(validate_tag(tag)))
        if status is not None:
            conditions.append("status = ?")
            params.append(int(validate_status(status)))

        where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
        with storage_errors(self.conn, "list_issues"):
            rows = self.conn.execute(f"SELECT {ISSUE_COLUMNS} FROM issue{where} ORDER BY id", params).fetchall()

        logger.debug("Listed %d issues", len(rows), extra={"op": "list_issues", "args_data": {"tag": tag, "status": status}})
        return [self._build_issue(r) for r in rows]

    # -- Mutate --------------------------------------------------------------

    def update_status(self, issue_id: int, status: int) -> bool:
        """Set the status of one issue. Returns False if the id does not exist.

        Only the status column changes. DELETED is stored like any other
        status; it does not remove the row.
        """
        new_status = validate_status(status)

        with storage_errors(self.conn, "update_status"):
            cursor = self.conn.execute("UPDATE issue SET status = ? WHERE id = ?", (int(new_status), issue_id))
            self.conn.commit()

        if cursor.rowcount == 0:
            logger.info("Status update skipped: issue #%s not found", issue_id, extra={"op": "update_status", "issue_id": issue_id})
            return False
        logger.info(
            "Issue #%s status -> %s",
            issue_id,
            new_status.label,
            extra={"op": "update_status", "issue_id": issue_id},
        )
        return True

    def delete_issue(self, issue_id: int) -> bool:
        """Physically remove one issue. Returns False if the id does not exist."""
        with storage_errors(self.conn, "delete_issue"):
            cursor = self.conn.execute("DELETE FROM issue WHERE id = ?", (issue_id,))
            self.conn.commit()

        if cursor.rowcount == 0:
            logger.info("Delete skipped: issue #%s not found", issue_id, extra={"op": "delete_issue", "issue_id": issue_id})
            return False
        logger.info("Deleted issue #%s", issue_id, extra={"op": "delete_issue", "issue_id": issue_id})
        return True
