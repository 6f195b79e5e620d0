"""Pull request CLI commands."""

from __future__ import annotations

import json
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from sqlalchemy.exc import SQLAlchemyError

from reviewkeeper.assignment import PullRequestView
from reviewkeeper.cli import abort
from reviewkeeper.errors import ReviewError

app = typer.Typer(help="Pull request commands")
console = Console()


def _render(view: PullRequestView, title: str, border_style: str = "green") -> None:
    reviewers = ", ".join(view.assigned_reviewers) or "[dim]none[/dim]"
    body = (
        f"[bold]ID:[/bold] {view.pull_request_id}\n"
        f"[bold]Name:[/bold] {view.pull_request_name}\n"
        f"[bold]Author:[/bold] {view.author_id}\n"
        f"[bold]Status:[/bold] {view.status}\n"
        f"[bold]Reviewers:[/bold] {reviewers}"
    )
    if view.merged_at is not None:
        body += f"\n[bold]Merged:[/bold] {view.merged_at.isoformat()}"
    console.print(Panel(body, title=title, border_style=border_style))


@app.command()
def create(
    pull_request_id: Annotated[str, typer.Argument(help="Pull request ID")],
    name: Annotated[str, typer.Argument(help="Pull request title")],
    author_id: Annotated[
        str,
        typer.Option("--author", "-a", help="Author user ID"),
    ],
) -> None:
    """Open a pull request and assign reviewers from the author's team."""
    from reviewkeeper.main import get_app_context

    ctx = get_app_context()

    try:
        view = ctx.run(
            lambda: ctx.assigner().create_pull_request(pull_request_id, name, author_id)
        )
    except (ReviewError, SQLAlchemyError) as e:
        raise abort(console, e) from e

    _render(view, "Pull Request Created")


@app.command()
def show(
    pull_request_id: Annotated[str, typer.Argument(help="Pull request ID")],
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (panel or json)"),
    ] = "panel",
) -> None:
    """Show a pull request and its reviewers."""
    from reviewkeeper.main import get_app_context

    ctx = get_app_context()

    try:
        view = ctx.run(lambda: ctx.lifecycle().get_pull_request(pull_request_id))
    except (ReviewError, SQLAlchemyError) as e:
        raise abort(console, e) from e

    if format == "json":
        typer.echo(json.dumps(view.model_dump(mode="json"), indent=2))
    else:
        _render(view, "Pull Request", border_style="cyan")


@app.command()
def merge(
    pull_request_id: Annotated[str, typer.Argument(help="Pull request ID")],
) -> None:
    """Merge a pull request (merging twice is a no-op)."""
    from reviewkeeper.main import get_app_context

    ctx = get_app_context()

    try:
        view = ctx.run(lambda: ctx.lifecycle().merge_pull_request(pull_request_id))
    except (ReviewError, SQLAlchemyError) as e:
        raise abort(console, e) from e

    _render(view, "Pull Request Merged", border_style="blue")


@app.command()
def reassign(
    pull_request_id: Annotated[str, typer.Argument(help="Pull request ID")],
    old_reviewer_id: Annotated[str, typer.Argument(help="Reviewer to replace")],
) -> None:
    """Replace one reviewer with another active member of their team."""
    from reviewkeeper.main import get_app_context

    ctx = get_app_context()

    try:
        result = ctx.run(
            lambda: ctx.reassigner().reassign_reviewer(pull_request_id, old_reviewer_id)
        )
    except (ReviewError, SQLAlchemyError) as e:
        raise abort(console, e) from e

    console.print(
        f"[green]Replaced[/green] {old_reviewer_id} [green]with[/green] {result.replaced_by}"
    )
    _render(result.pr, "Pull Request")
