"""CLI commands for issue CRUD: new, get, list, set-status, delete, export."""

from __future__ import annotations

from pathlib import Path

import click

from issuestore.cli_common import (
    echo_json,
    fail,
    get_db,
    parse_status,
    parse_tag,
    preview_detail,
    require_positive_id,
    resolve_user_id,
    status_choice,
    tag_choice,
)
from issuestore.core import Issue, get_page_size
from issuestore.pagination import paginate
from issuestore.types.core import IssueStatus, IssueTag
from issuestore.validation import ValidationError


def _echo_issue(issue: Issue) -> None:
    click.echo(f"ID:      #{issue.id}")
    click.echo(f"Name:    {issue.name}")
    click.echo(f"Tag:     {issue.tag.label}")
    click.echo(f"Status:  {issue.status.label}")
    click.echo(f"User:    {issue.user_id}")
    if issue.detail:
        click.echo("")
        click.echo(issue.detail)


def _filter_description(tag: IssueTag | None, status: IssueStatus | None) -> str:
    parts = []
    if tag is not None:
        parts.append(f"Tag: {tag.label}")
    if status is not None:
        parts.append(f"Status: {status.label}")
    return ", ".join(parts)


@click.command("new")
@click.argument("name")
@click.option("--detail", "-d", default="", help="Issue detail (up to 2000 characters)")
@click.option("--tag", "-t", type=tag_choice, default="bug", show_default=True, help="bug/feature/enhancement or 0-2")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def new(ctx: click.Context, name: str, detail: str, tag: str, as_json: bool) -> None:
    """Create a new issue in the Proposed state."""
    with get_db() as db:
        user_id = resolve_user_id(ctx, db)
        try:
            issue_id = db.create_issue(name, detail, parse_tag(tag), user_id)
        except ValidationError as e:
            fail(str(e), as_json=as_json)
        if as_json:
            issue = db.get_issue(issue_id)
            echo_json(issue.to_dict() if issue else {"id": issue_id})
        else:
            click.echo(f"Created #{issue_id}: {name}")


@click.command("get")
@click.argument("issue_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def get(issue_id: int, as_json: bool) -> None:
    """Show one issue."""
    require_positive_id(issue_id, as_json=as_json)
    with get_db() as db:
        issue = db.get_issue(issue_id)
        if issue is None:
            fail(f"No issue found with ID #{issue_id}", as_json=as_json)
        if as_json:
            echo_json(issue.to_dict())
            return
        _echo_issue(issue)


@click.command("list")
@click.option("--tag", "-t", type=tag_choice, default=None, help="Filter by tag")
@click.option("--status", "-s", type=status_choice, default=None, help="Filter by status")
@click.option("--page", "-p", default=1, type=int, help="Page number (1-based)")
@click.option("--page-size", default=None, type=click.IntRange(min=1), help="Issues per page (default: from config)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_cmd(tag: str | None, status: str | None, page: int, page_size: int | None, as_json: bool) -> None:
    """List issues, optionally filtered by tag and/or status."""
    tag_filter = parse_tag(tag)
    status_filter = parse_status(status)
    with get_db() as db:
        issues = db.list_issues(tag_filter, status_filter)
        result = paginate(issues, page, page_size or get_page_size(db.db_path.parent))

    if as_json:
        echo_json(
            {
                "items": [i.to_dict() for i in result.items],
                "total_count": result.total_count,
                "total_pages": result.total_pages,
                "current_page": result.current_page,
                "has_next": result.has_next,
                "has_previous": result.has_previous,
            }
        )
        return

    filters = _filter_description(tag_filter, status_filter)
    if filters:
        click.echo(f"Filters: {filters}")
    if not result.items:
        click.echo("No issues found matching the criteria.")
        return
    for issue in result.items:
        click.echo(f"#{issue.id} [{issue.tag.label}] [{issue.status.label}] {issue.name}")
        if issue.detail:
            click.echo(f"    {preview_detail(issue.detail)}")
        click.echo(f"    by {issue.user_id}")
    click.echo(f"\nPage {result.current_page} of {result.total_pages} | Total: {result.total_count} issues")


@click.command("set-status")
@click.argument("issue_id", type=int)
@click.argument("status", type=status_choice)
def set_status(issue_id: int, status: str) -> None:
    """Change the status of an issue."""
    require_positive_id(issue_id)
    new_status = parse_status(status)
    with get_db() as db:
        if not db.update_status(issue_id, new_status):
            fail(f"Failed to update issue #{issue_id}. The issue may not exist.")
    click.echo(f"Updated #{issue_id} to status: {new_status.label}")


@click.command("delete")
@click.argument("issue_id", type=int)
def delete(issue_id: int) -> None:
    """Permanently remove an issue."""
    require_positive_id(issue_id)
    with get_db() as db:
        if not db.delete_issue(issue_id):
            fail(f"Failed to delete issue #{issue_id}. The issue may not exist.")
    click.echo(f"Deleted #{issue_id}")


@click.command("export")
@click.option("--tag", "-t", type=tag_choice, default=None, help="Filter by tag")
@click.option("--status", "-s", type=status_choice, default=None, help="Filter by status")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write to file instead of stdout")
def export(tag: str | None, status: str | None, output: Path | None) -> None:
    """Export issues as a JSON array."""
    with get_db() as db:
        if output is None:
            click.echo(db.export_json(parse_tag(tag), parse_status(status)))
            return
        count = db.export_json_file(output, parse_tag(tag), parse_status(status))
    click.echo(f"Exported {count} issues to {output}")
