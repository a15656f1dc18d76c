"""Field validation for every store entry point.

Pure functions with no click or sqlite3 dependencies. Everything here runs
before the database is touched, so a rejected call never writes a row.
"""

from __future__ import annotations

from typing import Any

from issuestore.types.core import (
    MAX_DETAIL_LEN,
    MAX_NAME_LEN,
    MAX_USER_ID_LEN,
    IssueStatus,
    IssueTag,
)


class ValidationError(ValueError):
    """A caller-supplied field violates a length or enum-domain constraint."""

    def __init__(self, field: str, message: str, *, limit: int | str | None = None) -> None:
        self.field = field
        self.limit = limit
        super().__init__(f"{field}: {message}")


def validate_text(value: Any, field: str, *, max_len: int, allow_empty: bool = False) -> str:
    """Return *value* unchanged if it is a string within bounds.

    Over-long values are rejected, never truncated.
    """
    if not isinstance(value, str):
        raise ValidationError(field, "must be a string", limit=max_len)
    if not value and not allow_empty:
        raise ValidationError(field, "must not be empty", limit=max_len)
    if len(value) > max_len:
        raise ValidationError(
            field,
            f"must be at most {max_len} characters (got {len(value)})",
            limit=max_len,
        )
    return value


def _validate_enum(value: Any, field: str, enum_cls: type[IssueTag] | type[IssueStatus]) -> Any:
    lo, hi = min(enum_cls), max(enum_cls)
    domain = f"{int(lo)}..{int(hi)}"
    # bool is an int subclass; True/False are never a meaningful tag or status.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, f"must be an integer in {domain}", limit=domain)
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(field, f"must be in {domain}, got {value}", limit=domain) from None


def validate_tag(value: Any) -> IssueTag:
    result: IssueTag = _validate_enum(value, "tag", IssueTag)
    return result


def validate_status(value: Any) -> IssueStatus:
    result: IssueStatus = _validate_enum(value, "status", IssueStatus)
    return result


def validate_new_issue(name: Any, detail: Any, tag: Any, user_id: Any) -> tuple[str, str, IssueTag, str]:
    """Validate every field of a new issue, in column order.

    Raises ValidationError on the first violation.
    """
    return (
        validate_text(name, "name", max_len=MAX_NAME_LEN),
        validate_text(detail, "detail", max_len=MAX_DETAIL_LEN, allow_empty=True),
        validate_tag(tag),
        validate_text(user_id, "user_id", max_len=MAX_USER_ID_LEN),
    )
