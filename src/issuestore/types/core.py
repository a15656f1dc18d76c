"""Enumerations, field limits, and TypedDicts shared by every layer."""

from __future__ import annotations

from enum import IntEnum
from typing import TypedDict

# ---------------------------------------------------------------------------
# Field limits (characters, not bytes)
# ---------------------------------------------------------------------------

MAX_NAME_LEN = 255
MAX_DETAIL_LEN = 2000
MAX_USER_ID_LEN = 63

# Truncation length for list previews of an issue's detail text.
DETAIL_PREVIEW_LEN = 100


class IssueTag(IntEnum):
    BUG = 0
    FEATURE = 1
    ENHANCEMENT = 2

    @property
    def label(self) -> str:
        return TAG_NAMES[self]


class IssueStatus(IntEnum):
    PROPOSED = 0
    APPROVED = 1
    REJECTED = 2
    # Settable like any other status. Removing a row is delete_issue()'s job.
    DELETED = 3

    @property
    def label(self) -> str:
        return STATUS_NAMES[self]


TAG_NAMES: dict[int, str] = {
    IssueTag.BUG: "Bug",
    IssueTag.FEATURE: "Feature",
    IssueTag.ENHANCEMENT: "Enhancement",
}

STATUS_NAMES: dict[int, str] = {
    IssueStatus.PROPOSED: "Proposed",
    IssueStatus.APPROVED: "Approved",
    IssueStatus.REJECTED: "Rejected",
    IssueStatus.DELETED: "Deleted",
}


class ProjectConfig(TypedDict, total=False):
    """Shape of .issuestore/config.json."""

    version: int
    page_size: int
    user_id: str


class IssueDict(TypedDict):
    id: int
    name: str
    detail: str
    tag: int
    status: int
    user_id: str


class StatsResult(TypedDict):
    """Aggregate counts returned by ``get_stats()``."""

    total: int
    by_tag: dict[str, int]
    by_status: dict[str, int]
    schema_version: int
