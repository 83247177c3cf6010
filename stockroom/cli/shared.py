"""Shared CLI helpers: console, logger, database selection, error printing."""

from typing import Optional

import typer
from rich.console import Console

from stockroom.db import init_db, reset_db
from stockroom.errors import StockroomError
from stockroom.utils.logger import get_logger

console = Console()
logger = get_logger("stockroom.cli")

DatabaseOption = typer.Option(None, "--database", "-d", help="Database URL (overrides DATABASE_URL)")


def open_database(url: Optional[str]) -> None:
    if url:
        reset_db(url)
    else:
        init_db()


def fail(exc: StockroomError) -> None:
    """Print an engine error and exit non-zero."""
    console.print(f"[red]{exc.code}: {exc.message}[/red]")
    logger.warning("cli.command_failed", error_code=exc.code, details=exc.details)
    raise typer.Exit(1)
