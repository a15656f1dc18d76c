# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
# NEVER import from core.py, db_base.py, or any mixin (circular imports).
"""Typed value contracts for the issuestore core and CLI layers."""

from __future__ import annotations

from issuestore.types.core import (
    DETAIL_PREVIEW_LEN,
    MAX_DETAIL_LEN,
    MAX_NAME_LEN,
    MAX_USER_ID_LEN,
    STATUS_NAMES,
    TAG_NAMES,
    IssueDict,
    IssueStatus,
    IssueTag,
    ProjectConfig,
    StatsResult,
)

__all__ = [
    "DETAIL_PREVIEW_LEN",
    "MAX_DETAIL_LEN",
    "MAX_NAME_LEN",
    "MAX_USER_ID_LEN",
    "STATUS_NAMES",
    "TAG_NAMES",
    "IssueDict",
    "IssueStatus",
    "IssueTag",
    "ProjectConfig",
    "StatsResult",
]
