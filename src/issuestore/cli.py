"""CLI for the issuestore issue tracker.

Convention-based: discovers .issuestore/ by walking up from cwd.

Usage:
    issuestore init                                  # Initialize .issuestore/ in cwd
    issuestore new "Crash on save" --tag=bug -d ...  # Create issue
    issuestore get <id>                              # Show issue details
    issuestore list --tag=feature --status=proposed  # List issues (paginated)
    issuestore set-status <id> approved              # Change status
    issuestore delete <id>                           # Remove issue
    issuestore export --tag=bug -o bugs.json         # Export as JSON
    issuestore status                                # Schema version and counts
"""

from __future__ import annotations

import logging

import click

from issuestore import __version__
from issuestore.cli_commands import admin, issues


@click.group()
@click.version_option(version=__version__, prog_name="issuestore")
@click.option("--user-id", default=None, help="Creator id recorded on new issues (default: config user_id, then 'cli')")
@click.option("--debug", is_flag=True, help="Also log reads (DEBUG) to .issuestore/issuestore.log")
@click.pass_context
def cli(ctx: click.Context, user_id: str | None, debug: bool) -> None:
    """issuestore: track bug, feature, and enhancement reports."""
    ctx.ensure_object(dict)
    ctx.obj["user_id"] = user_id
    ctx.obj["log_level"] = logging.DEBUG if debug else logging.INFO


cli.add_command(admin.init)
cli.add_command(admin.status)
cli.add_command(issues.new)
cli.add_command(issues.get)
cli.add_command(issues.list_cmd)
cli.add_command(issues.set_status)
cli.add_command(issues.delete)
cli.add_command(issues.export)


if __name__ == "__main__":
    cli()
