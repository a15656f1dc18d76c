"""issuestore: a small SQLite-backed store for bug, feature, and enhancement reports."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("issuestore")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from issuestore.core import Issue, IssueDB
from issuestore.db_base import StorageFault
from issuestore.types.core import IssueStatus, IssueTag
from issuestore.validation import ValidationError

__all__ = [
    "Issue",
    "IssueDB",
    "IssueStatus",
    "IssueTag",
    "StorageFault",
    "ValidationError",
    "__version__",
]
