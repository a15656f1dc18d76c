"""Tests for filtered listing: tag/status filters, ordering, and the open→create→delete scenario."""

from __future__ import annotations

from pathlib import Path

import pytest

from issuestore.core import IssueDB
from issuestore.types.core import IssueStatus, IssueTag
from issuestore.validation import ValidationError


class TestListFilters:
    def test_no_filter_returns_everything(self, populated_db: IssueDB) -> None:
        ids = populated_db._test_ids  # type: ignore[attr-defined]
        assert [i.id for i in populated_db.list_issues()] == sorted(ids.values())

    def test_tag_filter_ignores_status(self, populated_db: IssueDB) -> None:
        ids = populated_db._test_ids  # type: ignore[attr-defined]
        result = populated_db.list_issues(tag=1, status=None)
        # Approved, Proposed and Deleted-status features all match.
        assert {i.id for i in result} == {ids["approved"], ids["proposed"], ids["soft"]}
        assert all(i.tag is IssueTag.FEATURE for i in result)

    def test_status_filter_ignores_tag(self, populated_db: IssueDB) -> None:
        ids = populated_db._test_ids  # type: ignore[attr-defined]
        result = populated_db.list_issues(status=IssueStatus.PROPOSED)
        assert {i.id for i in result} == {ids["bug"], ids["proposed"]}

    def test_both_filters_are_anded(self, populated_db: IssueDB) -> None:
        ids = populated_db._test_ids  # type: ignore[attr-defined]
        result = populated_db.list_issues(tag=IssueTag.FEATURE, status=IssueStatus.PROPOSED)
        assert [i.id for i in result] == [ids["proposed"]]

    def test_positional_filters(self, populated_db: IssueDB) -> None:
        ids = populated_db._test_ids  # type: ignore[attr-defined]
        assert [i.id for i in populated_db.list_issues(2, 2)] == [ids["rejected"]]

    def test_no_match_returns_empty_list(self, populated_db: IssueDB) -> None:
        result = populated_db.list_issues(tag=IssueTag.BUG, status=IssueStatus.APPROVED)
        assert result == []
        assert isinstance(result, list)

    def test_empty_store_returns_empty_list(self, db: IssueDB) -> None:
        assert db.list_issues() == []

    def test_deleted_status_rows_are_listed(self, populated_db: IssueDB) -> None:
        ids = populated_db._test_ids  # type: ignore[attr-defined]
        result = populated_db.list_issues(status=IssueStatus.DELETED)
        assert [i.id for i in result] == [ids["soft"]]

    @pytest.mark.parametrize(("tag", "status"), [(3, None), (None, 4), (-1, 0), ("bug", None)])
    def test_out_of_domain_filters_rejected(self, db: IssueDB, tag: object, status: object) -> None:
        with pytest.raises(ValidationError):
            db.list_issues(tag=tag, status=status)

    def test_results_are_fully_materialised(self, populated_db: IssueDB) -> None:
        result = populated_db.list_issues()
        populated_db.close()
        # Rows are plain dataclasses; nothing is read lazily from a cursor.
        assert len(result) == 5
        assert result[0].name == "Crash on save"


class TestOrdering:
    def test_ordered_by_id(self, populated_db: IssueDB) -> None:
        ids = [i.id for i in populated_db.list_issues()]
        assert ids == sorted(ids)

    def test_order_stable_across_calls(self, populated_db: IssueDB) -> None:
        first = [i.id for i in populated_db.list_issues(tag=IssueTag.FEATURE)]
        populated_db.update_status(first[0], IssueStatus.REJECTED)
        second = [i.id for i in populated_db.list_issues(tag=IssueTag.FEATURE)]
        assert first == second


class TestScenario:
    def test_open_create_list_delete(self, tmp_path: Path) -> None:
        with IssueDB(tmp_path / "fresh.db") as db:
            assert db.open() is True
            created = [db.create_issue(f"Issue {tag}", "", tag, "u") for tag in (0, 1, 2)]

            listed = db.list_issues()
            assert [i.id for i in listed] == created
            assert [i.id for i in db.list_issues(None, None)] == created

            second = created[1]
            assert db.delete_issue(second) is True

            remaining = db.list_issues()
            assert len(remaining) == 2
            assert second not in [i.id for i in remaining]
            assert [i.id for i in remaining] == [created[0], created[2]]
            assert db.get_issue(second) is None
