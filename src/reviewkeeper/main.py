"""Main CLI entry point for Reviewkeeper.

Usage:
    reviewkeeper init-db
    reviewkeeper team add backend --member u1:Alice --member u2:Bob
    reviewkeeper pr create pr-1 "Add search" --author u1
    reviewkeeper pr reassign pr-1 u2
    reviewkeeper serve --port 8080
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated, Optional, TypeVar

import typer
from pydantic import ValidationError
from rich.console import Console

from reviewkeeper.assignment import (
    DeactivationCascade,
    PullRequestLifecycle,
    ReviewerAssigner,
    ReviewerPicker,
    ReviewerReassigner,
    TeamMembershipManager,
)
from reviewkeeper.cli import pull_request as pull_request_cli
from reviewkeeper.cli import team as team_cli
from reviewkeeper.cli import user as user_cli
from reviewkeeper.config import ReviewkeeperConfig, load_config
from reviewkeeper.database.connection import create_schema, get_engine, get_session_factory
from reviewkeeper.logging import setup_logging

T = TypeVar("T")

app = typer.Typer(
    name="reviewkeeper",
    help="Reviewkeeper: pull request reviewer assignment",
    no_args_is_help=True,
)

app.add_typer(team_cli.app, name="team", help="Manage teams")
app.add_typer(pull_request_cli.app, name="pr", help="Manage pull requests")
app.add_typer(user_cli.app, name="user", help="Manage users")

console = Console()


class AppContext:
    """Application context shared across CLI commands.

    Attributes:
        config: Loaded Reviewkeeper configuration
        engine: Async SQLAlchemy engine
        session_factory: Factory for creating database sessions
        picker: Reviewer picker seeded from ``assignment.random_seed``
    """

    def __init__(self, config: ReviewkeeperConfig):
        self.config = config
        self.engine = get_engine(config.database)
        self.session_factory = get_session_factory(self.engine)
        self.picker = ReviewerPicker(seed=config.assignment.random_seed)

    def assigner(self) -> ReviewerAssigner:
        return ReviewerAssigner(
            self.session_factory,
            self.picker,
            self.config.assignment.reviewers_per_pull_request,
        )

    def reassigner(self) -> ReviewerReassigner:
        return ReviewerReassigner(self.session_factory, self.picker)

    def cascade(self) -> DeactivationCascade:
        return DeactivationCascade(self.session_factory, self.picker)

    def lifecycle(self) -> PullRequestLifecycle:
        return PullRequestLifecycle(self.session_factory)

    def membership(self) -> TeamMembershipManager:
        return TeamMembershipManager(self.session_factory, cascade=self.cascade())

    def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run an async operation to completion, then release pooled connections.

        Args:
            operation: Zero-argument coroutine function

        Returns:
            Whatever the operation returns
        """

        async def _runner() -> T:
            try:
                return await operation()
            finally:
                await self.engine.dispose()

        return asyncio.run(_runner())


# Global context holder
_app_context: AppContext | None = None


def get_app_context() -> AppContext:
    """Get the shared application context.

    Raises:
        RuntimeError: If context has not been initialized
    """
    if _app_context is None:
        raise RuntimeError("Application context not initialized. Call initialize_context first.")
    return _app_context


def initialize_context(config: ReviewkeeperConfig) -> AppContext:
    """Initialize the global application context."""
    global _app_context
    _app_context = AppContext(config)
    return _app_context


@app.command()
def serve(
    host: Annotated[
        Optional[str],
        typer.Option("--host", "-h", help="Host to bind to (default: web.host)"),
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", help="Port to bind to (default: web.port)"),
    ] = None,
) -> None:
    """Start the Reviewkeeper HTTP API server."""
    import uvicorn

    from reviewkeeper.web.app import create_app

    config = get_app_context().config
    bind_host = host if host is not None else config.web.host
    bind_port = port if port is not None else config.web.port

    console.print("[bold cyan]Starting Reviewkeeper API[/bold cyan]")
    console.print(f"[dim]Host:[/dim] {bind_host}")
    console.print(f"[dim]Port:[/dim] {bind_port}")
    console.print()

    uvicorn.run(
        create_app(config),
        host=bind_host,
        port=bind_port,
        log_level="info",
    )


@app.command("init-db")
def init_db() -> None:
    """Create all tables and seed pull request statuses.

    Meant for development databases; use ``alembic upgrade head`` in
    production.
    """
    ctx = get_app_context()

    async def _create() -> None:
        await create_schema(ctx.engine)

    ctx.run(_create)
    console.print("[green]Database schema created[/green]")


@app.callback()
def main_callback(
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file (TOML format)",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure global options and initialize application context."""
    try:
        config = load_config(config_path)
    except (OSError, ValueError, ValidationError) as e:
        console.print(f"[red]Error loading configuration:[/red] {e}")
        raise typer.Exit(code=1)

    # Command output owns stdout; logs go to stderr, warnings and up unless -v
    cli_logging = config.logging.model_copy(
        update={"level": "DEBUG" if verbose else "WARNING", "format": "console"}
    )
    setup_logging(cli_logging, stream=sys.stderr)

    initialize_context(config)

    if verbose:
        console.print("[dim]Debug logging enabled[/dim]")


if __name__ == "__main__":
    app()
