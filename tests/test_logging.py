"""Tests for structured logging."""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import threading
from pathlib import Path

from issuestore.core import IssueDB
from issuestore.logging import setup_logging


def _records(tmp_path: Path) -> list[dict[str, object]]:
    for handler in logging.getLogger("issuestore").handlers:
        handler.flush()
    text = (tmp_path / "issuestore.log").read_text().strip()
    return [json.loads(line) for line in text.splitlines()]


class TestSetupLogging:
    def test_creates_log_file(self, tmp_path: Path) -> None:
        logger = setup_logging(tmp_path)
        logger.info("test_message", extra={"op": "test", "args_data": {"key": "val"}})
        record = _records(tmp_path)[-1]
        assert record["msg"] == "test_message"
        assert record["op"] == "test"
        assert record["args"] == {"key": "val"}
        assert record["level"] == "INFO"

    def test_optional_fields(self, tmp_path: Path) -> None:
        logger = setup_logging(tmp_path)
        logger.info("formatted", extra={"issue_id": 7, "duration_ms": 42.5})
        record = _records(tmp_path)[-1]
        assert record["issue_id"] == 7
        assert record["duration_ms"] == 42.5
        assert "error" not in record

    def test_exception_recorded(self, tmp_path: Path) -> None:
        logger = setup_logging(tmp_path)
        try:
            raise RuntimeError("kaboom")
        except RuntimeError:
            logger.exception("failed")
        assert _records(tmp_path)[-1]["exception"] == "kaboom"

    def test_idempotent_setup(self, tmp_path: Path) -> None:
        logger1 = setup_logging(tmp_path)
        logger2 = setup_logging(tmp_path)
        assert logger1 is logger2
        assert len(logger1.handlers) == 1

    def test_new_directory_replaces_handler(self, tmp_path: Path) -> None:
        first = tmp_path / "a"
        second = tmp_path / "b"
        first.mkdir()
        second.mkdir()
        setup_logging(first)
        logger = setup_logging(second)
        assert len(logger.handlers) == 1
        assert logger.handlers[0].baseFilename == os.path.abspath(str(second / "issuestore.log"))  # type: ignore[attr-defined]

    def test_no_duplicate_handlers_under_concurrency(self, tmp_path: Path) -> None:
        results: list[logging.Logger] = []
        barrier = threading.Barrier(4)

        def call_setup() -> None:
            barrier.wait()
            results.append(setup_logging(tmp_path))

        threads = [threading.Thread(target=call_setup) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 4
        assert all(r is results[0] for r in results)
        logger = logging.getLogger("issuestore")
        file_handlers = [
            h
            for h in logger.handlers
            if isinstance(h, logging.handlers.RotatingFileHandler)
            and h.baseFilename == os.path.abspath(str(tmp_path / "issuestore.log"))
        ]
        assert len(file_handlers) == 1, f"Expected 1 handler, got {len(file_handlers)}"

    def test_store_operations_are_logged(self, tmp_path: Path) -> None:
        setup_logging(tmp_path)
        with IssueDB(tmp_path / "issues.db") as db:
            db.open()
            issue_id = db.create_issue("Logged", "", 0, "u")
            db.update_status(issue_id, 1)
            db.delete_issue(issue_id)
        ops = [(r.get("op"), r.get("issue_id")) for r in _records(tmp_path)]
        assert ("create_issue", issue_id) in ops
        assert ("update_status", issue_id) in ops
        assert ("delete_issue", issue_id) in ops

    def teardown_method(self) -> None:
        """Clean up the issuestore logger handlers between tests."""
        logger = logging.getLogger("issuestore")
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)
