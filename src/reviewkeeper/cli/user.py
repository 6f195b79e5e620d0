"""User CLI commands."""

from __future__ import annotations

import json
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from reviewkeeper.cli import abort
from reviewkeeper.errors import ReviewError

app = typer.Typer(help="User commands")
console = Console()


@app.command()
def reviews(
    user_id: Annotated[str, typer.Argument(help="User ID")],
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (table or json)"),
    ] = "table",
) -> None:
    """List pull requests the user is currently reviewing."""
    from reviewkeeper.main import get_app_context

    ctx = get_app_context()

    try:
        result = ctx.run(lambda: ctx.membership().get_user_reviews(user_id))
    except (ReviewError, SQLAlchemyError) as e:
        raise abort(console, e) from e

    if format == "json":
        typer.echo(json.dumps(result.model_dump(), indent=2))
        return

    if not result.pull_requests:
        console.print(f"[yellow]{user_id} has no reviews[/yellow]")
        return

    table = Table(title=f"Reviews for {user_id}")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Author")
    table.add_column("Status", style="magenta")

    for pr in result.pull_requests:
        table.add_row(pr.pull_request_id, pr.pull_request_name, pr.author_id, pr.status)

    console.print(table)


@app.command("set-active")
def set_active(
    user_id: Annotated[str, typer.Argument(help="User ID")],
    active: Annotated[
        bool,
        typer.Option("--active/--inactive", help="New active flag"),
    ] = True,
) -> None:
    """Activate or deactivate a user.

    Deactivating a team member also reassigns their open reviews.
    """
    from reviewkeeper.main import get_app_context

    ctx = get_app_context()

    try:
        user = ctx.run(lambda: ctx.membership().set_is_active(user_id, active))
    except (ReviewError, SQLAlchemyError) as e:
        raise abort(console, e) from e

    state = "[green]active[/green]" if user.is_active else "[dim]inactive[/dim]"
    console.print(f"{user.user_id} ({user.username}) is now {state}")
