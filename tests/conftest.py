"""Shared pytest fixtures for issuestore tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from issuestore.core import DB_FILENAME, STORE_DIR_NAME, IssueDB, write_config
from issuestore.types.core import IssueStatus, IssueTag


@pytest.fixture
def db(tmp_path: Path) -> Generator[IssueDB, None, None]:
    """Fresh, opened IssueDB for each test."""
    d = IssueDB(tmp_path / "issues.db")
    d.open()
    yield d
    d.close()


@pytest.fixture
def populated_db(db: IssueDB) -> IssueDB:
    """IssueDB pre-populated with a mixed set of five issues.

    Creates:
    - bug:         BUG, Proposed
    - approved:    FEATURE, Approved
    - proposed:    FEATURE, Proposed
    - rejected:    ENHANCEMENT, Rejected
    - soft:        FEATURE, Deleted (status only; the row still exists)
    """
    ids = {
        "bug": db.create_issue("Crash on save", "Stack trace attached", IssueTag.BUG, "100"),
        "approved": db.create_issue("Dark mode", "", IssueTag.FEATURE, "101"),
        "proposed": db.create_issue("CSV export", "Monthly report", IssueTag.FEATURE, "102"),
        "rejected": db.create_issue("Faster startup", "Cold start is slow", IssueTag.ENHANCEMENT, "103"),
        "soft": db.create_issue("Plugin API", "Third-party hooks", IssueTag.FEATURE, "104"),
    }
    db.update_status(ids["approved"], IssueStatus.APPROVED)
    db.update_status(ids["rejected"], IssueStatus.REJECTED)
    db.update_status(ids["soft"], IssueStatus.DELETED)
    # Store IDs for easy access in tests
    db._test_ids: dict[str, int] = ids  # type: ignore[attr-defined]
    return db


@pytest.fixture
def store_project(tmp_path: Path) -> Path:
    """A tmp directory set up as an issuestore project (.issuestore/ with config + db).

    Returns the project root (parent of .issuestore/).
    """
    store_dir = tmp_path / STORE_DIR_NAME
    store_dir.mkdir()
    write_config(store_dir, {"version": 1, "page_size": 10})

    with IssueDB(store_dir / DB_FILENAME) as d:
        d.open()

    return tmp_path


@pytest.fixture
def cli_runner() -> CliRunner:
    """Click CLI test runner."""
    return CliRunner()
