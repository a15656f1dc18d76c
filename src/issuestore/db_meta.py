"""MetaMixin: statistics and JSON export.

All methods access ``self.conn`` and ``self.list_issues()`` via Python's
MRO when composed into ``IssueDB``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from issuestore.db_base import DBMixinProtocol, StorageFault, storage_errors, write_atomic
from issuestore.types.core import IssueStatus, IssueTag, StatsResult

logger = logging.getLogger(__name__)


class MetaMixin(DBMixinProtocol):
    """Statistics and JSON export.

    Inherits ``DBMixinProtocol`` for type-safe access to shared attributes.
    Actual implementations provided by ``IssueDB`` at composition time via MRO.
    """

    # -- Stats ---------------------------------------------------------------

    def get_stats(self) -> StatsResult:
        """Counts per tag and per status; every name is present, zero-filled."""
        with storage_errors(self.conn, "get_stats"):
            tag_rows = self.conn.execute("SELECT tag, COUNT(*) AS n FROM issue GROUP BY tag").fetchall()
            status_rows = self.conn.execute("SELECT status, COUNT(*) AS n FROM issue GROUP BY status").fetchall()

        by_tag = {tag.label: 0 for tag in IssueTag}
        by_status = {status.label: 0 for status in IssueStatus}
        try:
            for row in tag_rows:
                by_tag[IssueTag(row["tag"]).label] = row["n"]
            for row in status_rows:
                by_status[IssueStatus(row["status"]).label] = row["n"]
        except ValueError as exc:
            msg = f"get_stats failed: stored issue holds an invalid value: {exc}"
            raise StorageFault(msg) from exc

        return StatsResult(
            total=sum(by_tag.values()),
            by_tag=by_tag,
            by_status=by_status,
            schema_version=self.current_version(),
        )

    # -- Export --------------------------------------------------------------

    def export_json(self, tag: Any = None, status: Any = None) -> str:
        """Serialize the filtered issue list as a pretty-printed JSON array."""
        issues = self.list_issues(tag, status)
        return json.dumps([issue.to_dict() for issue in issues], indent=2)

    def export_json_file(self, output_path: str | Path, tag: Any = None, status: Any = None) -> int:
        """Write the filtered issue list to *output_path*. Returns the issue count."""
        issues = self.list_issues(tag, status)
        path = Path(output_path)
        write_atomic(path, json.dumps([issue.to_dict() for issue in issues], indent=2) + "\n")
        logger.info("Exported %d issues to %s", len(issues), path, extra={"op": "export"})
        return len(issues)
