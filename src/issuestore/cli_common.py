"""Shared CLI helpers for ``cli.py`` and the ``cli_commands/*.py`` modules.

Provides ``get_db()``, tag/status option parsing, and output helpers so the
command modules can share them without circular imports.
"""

from __future__ import annotations

import json as json_mod
import logging
import sys
from typing import Any, NoReturn

import click

from issuestore.core import (
    DB_FILENAME,
    STORE_DIR_NAME,
    IssueDB,
    find_store_root,
    read_config,
)
from issuestore.db_base import StorageFault
from issuestore.logging import setup_logging
from issuestore.types.core import DETAIL_PREVIEW_LEN, IssueStatus, IssueTag

DEFAULT_USER_ID = "cli"

# Accepted spellings for --tag / --status: the numeric value or the lowercase name.
TAG_CHOICES: dict[str, IssueTag] = {str(int(t)): t for t in IssueTag} | {t.name.lower(): t for t in IssueTag}
STATUS_CHOICES: dict[str, IssueStatus] = {str(int(s)): s for s in IssueStatus} | {s.name.lower(): s for s in IssueStatus}

tag_choice = click.Choice(list(TAG_CHOICES), case_sensitive=False)
status_choice = click.Choice(list(STATUS_CHOICES), case_sensitive=False)


def parse_tag(value: str | None) -> IssueTag | None:
    return None if value is None else TAG_CHOICES[value.lower()]


def parse_status(value: str | None) -> IssueStatus | None:
    return None if value is None else STATUS_CHOICES[value.lower()]


def get_db() -> IssueDB:
    """Discover .issuestore/ and return an opened IssueDB."""
    try:
        store_dir = find_store_root()
    except FileNotFoundError:
        click.echo(f"No {STORE_DIR_NAME}/ found. Run 'issuestore init' first.", err=True)
        sys.exit(1)
    ctx = click.get_current_context(silent=True)
    obj = ctx.obj if ctx is not None and isinstance(ctx.obj, dict) else {}
    setup_logging(store_dir, obj.get("log_level", logging.INFO))
    db = IssueDB(store_dir / DB_FILENAME)
    try:
        db.open()
    except StorageFault as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    return db


def resolve_user_id(ctx: click.Context, db: IssueDB) -> str:
    """--user-id wins, then config.json ``user_id``, then ``cli``."""
    explicit: str | None = ctx.obj.get("user_id")
    if explicit is not None:
        return explicit
    configured = read_config(db.db_path.parent).get("user_id")
    return configured if isinstance(configured, str) and configured else DEFAULT_USER_ID


def fail(message: str, *, as_json: bool = False) -> NoReturn:
    """Report an error in the requested format and exit 1."""
    if as_json:
        click.echo(json_mod.dumps({"error": message}))
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def require_positive_id(issue_id: int, *, as_json: bool = False) -> None:
    if issue_id <= 0:
        fail("Issue ID must be a positive number.", as_json=as_json)


def preview_detail(text: str, limit: int = DETAIL_PREVIEW_LEN) -> str:
    """Truncate *text* to *limit* characters, marking the cut with '...'."""
    return text if len(text) <= limit else text[:limit] + "..."


def echo_json(payload: Any) -> None:
    click.echo(json_mod.dumps(payload, indent=2, default=str))
