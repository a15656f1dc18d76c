#!/usr/bin/env python3
"""Triaging incoming reports with issuestore.

This example opens a throwaway store, files a handful of reports, approves
or rejects them, removes a duplicate, and prints the remaining backlog a
page at a time.

Key concepts shown:
  - Opening a store with IssueDB as a context manager
  - create_issue() always starting issues as Proposed
  - Combining tag and status filters in list_issues()
  - update_status() versus delete_issue() (DELETED is just a status)
  - Paging a materialised list with paginate()

How to run:
    python docs/examples/triage.py
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from issuestore import IssueDB, IssueStatus, IssueTag
from issuestore.pagination import paginate


def file_reports(db: IssueDB) -> dict[str, int]:
    reports = [
        ("Crash when saving empty file", "Stack trace attached.", IssueTag.BUG),
        ("Dark mode", "", IssueTag.FEATURE),
        ("Faster startup", "Cold start takes 4s.", IssueTag.ENHANCEMENT),
        ("Crash when saving empty file (dup)", "Same as the first one.", IssueTag.BUG),
        ("Export to CSV", "For the monthly report.", IssueTag.FEATURE),
    ]
    ids = {}
    for name, detail, tag in reports:
        ids[name] = db.create_issue(name, detail, tag, user_id="reporter-1")
        print(f"  Filed #{ids[name]} [{tag.label}] {name}")
    return ids


def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        with IssueDB(Path(tmp) / "issues.db") as db:
            db.open()
            print("Filing reports:")
            ids = file_reports(db)

            db.update_status(ids["Dark mode"], IssueStatus.APPROVED)
            db.update_status(ids["Export to CSV"], IssueStatus.REJECTED)
            db.delete_issue(ids["Crash when saving empty file (dup)"])

            print("\nApproved features:")
            for issue in db.list_issues(tag=IssueTag.FEATURE, status=IssueStatus.APPROVED):
                print(f"  #{issue.id} {issue.name}")

            print("\nBacklog, two per page:")
            backlog = db.list_issues(status=IssueStatus.PROPOSED)
            page = paginate(backlog, 1, 2)
            while True:
                print(f"  Page {page.current_page} of {page.total_pages}")
                for issue in page.items:
                    print(f"    #{issue.id} {issue.name}")
                if not page.has_next:
                    break
                page = paginate(backlog, page.current_page + 1, 2)

            print(f"\nStats: {db.get_stats()}")


if __name__ == "__main__":
    main()
