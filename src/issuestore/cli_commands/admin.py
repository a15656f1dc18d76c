"""CLI commands for admin: init, status."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from issuestore import __version__
from issuestore.cli_common import echo_json, get_db
from issuestore.core import (
    DB_FILENAME,
    DEFAULT_PAGE_SIZE,
    STORE_DIR_NAME,
    IssueDB,
    write_config,
)
from issuestore.db_base import StorageFault


@click.command()
@click.option("--page-size", default=DEFAULT_PAGE_SIZE, type=click.IntRange(min=1), help="Issues per list page")
@click.option("--user-id", "default_user", default=None, help="Default creator id for new issues")
def init(page_size: int, default_user: str | None) -> None:
    """Initialize .issuestore/ in the current directory."""
    cwd = Path.cwd()
    store_dir = cwd / STORE_DIR_NAME

    if store_dir.exists():
        click.echo(f"{STORE_DIR_NAME}/ already exists in {cwd}")
    else:
        store_dir.mkdir()
        config: dict[str, object] = {"version": 1, "page_size": page_size}
        if default_user:
            config["user_id"] = default_user
        write_config(store_dir, config)
        click.echo(f"Initialized {STORE_DIR_NAME}/ in {cwd}")

    # Opening creates the table and stamps the schema version; re-running
    # init on an existing store just applies any pending migrations.
    try:
        with IssueDB(store_dir / DB_FILENAME) as db:
            db.open()
    except StorageFault as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"  Database: {store_dir / DB_FILENAME}")


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def status(as_json: bool) -> None:
    """Show store location, schema version, and issue counts."""
    with get_db() as db:
        stats = db.get_stats()
        db_path = db.db_path

    if as_json:
        echo_json({"version": __version__, "database": str(db_path), **stats})
        return

    click.echo(f"issuestore {__version__}")
    click.echo(f"Database:        {db_path}")
    click.echo(f"Schema version:  v{stats['schema_version']}")
    click.echo(f"Total issues:    {stats['total']}")
    click.echo("\nBy tag:")
    for name, count in stats["by_tag"].items():
        click.echo(f"  {name:<12} {count}")
    click.echo("\nBy status:")
    for name, count in stats["by_status"].items():
        click.echo(f"  {name:<12} {count}")
