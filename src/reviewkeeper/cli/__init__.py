"""Typer sub-commands for the reviewkeeper CLI."""

from __future__ import annotations

import typer
from rich.console import Console
from sqlalchemy.exc import SQLAlchemyError

from reviewkeeper.errors import ReviewError


def abort(console: Console, exc: ReviewError | SQLAlchemyError) -> typer.Exit:
    """Print a failed operation and build the Exit to raise.

    Args:
        console: Console to print on
        exc: Business rejection or store failure

    Returns:
        typer.Exit with code 1 for the caller to raise
    """
    if isinstance(exc, ReviewError):
        console.print(f"[red]{exc.code}:[/red] {exc.message}")
    else:
        console.print(f"[red]Database error:[/red] {exc}")
    return typer.Exit(code=1)
