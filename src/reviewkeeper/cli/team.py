"""Team management CLI commands."""

from __future__ import annotations

import json
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from reviewkeeper.assignment import TeamMember, TeamView
from reviewkeeper.cli import abort
from reviewkeeper.errors import ReviewError

app = typer.Typer(help="Team management commands")
console = Console()


def _parse_member(value: str) -> TeamMember:
    user_id, sep, username = value.partition(":")
    if not sep or not user_id or not username:
        console.print(f"[red]Invalid member:[/red] {value}. Expected USER_ID:USERNAME")
        raise typer.Exit(code=1)
    return TeamMember(user_id=user_id, username=username)


def _print_team(team: TeamView) -> None:
    table = Table(title=f"Team {team.team_name}")
    table.add_column("User ID", style="cyan", no_wrap=True)
    table.add_column("Username", style="bold")
    table.add_column("Active")

    for member in team.members:
        active = "[green]yes[/green]" if member.is_active else "[dim]no[/dim]"
        table.add_row(member.user_id, member.username, active)

    console.print(table)


@app.command()
def add(
    team_name: Annotated[str, typer.Argument(help="Team name")],
    members: Annotated[
        list[str],
        typer.Option(
            "--member",
            "-m",
            help="Member as USER_ID:USERNAME (repeatable)",
        ),
    ] = [],  # noqa: B006
) -> None:
    """Create a team and add or move its members."""
    from reviewkeeper.main import get_app_context

    ctx = get_app_context()
    parsed = [_parse_member(value) for value in members]

    try:
        team = ctx.run(lambda: ctx.membership().add_team(team_name, parsed))
    except (ReviewError, SQLAlchemyError) as e:
        raise abort(console, e) from e

    console.print(f"[green]Team {team.team_name} created[/green]")
    _print_team(team)


@app.command()
def show(
    team_name: Annotated[str, typer.Argument(help="Team name")],
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (table or json)"),
    ] = "table",
) -> None:
    """Show a team and its members."""
    from reviewkeeper.main import get_app_context

    ctx = get_app_context()

    try:
        team = ctx.run(lambda: ctx.membership().get_team(team_name))
    except (ReviewError, SQLAlchemyError) as e:
        raise abort(console, e) from e

    if format == "json":
        typer.echo(json.dumps(team.model_dump(), indent=2))
    else:
        _print_team(team)


@app.command()
def deactivate(
    team_name: Annotated[str, typer.Argument(help="Team name")],
    user_ids: Annotated[list[str], typer.Argument(help="User IDs to deactivate")],
) -> None:
    """Deactivate team members and reassign their open reviews."""
    from reviewkeeper.main import get_app_context

    ctx = get_app_context()

    try:
        result = ctx.run(
            lambda: ctx.cascade().deactivate_team_members(team_name, user_ids)
        )
    except (ReviewError, SQLAlchemyError) as e:
        raise abort(console, e) from e

    if result.pull_requests:
        lines = "\n".join(
            f"{note.pull_request_id}: {note.old_reviewer_id} -> {note.replaced_by}"
            for note in result.pull_requests
        )
    else:
        lines = "[dim]No reviewers replaced[/dim]"

    console.print(
        Panel(
            lines,
            title=f"Deactivated {len(set(user_ids))} member(s) of {team_name}",
            border_style="yellow",
        )
    )
    _print_team(result.team)
