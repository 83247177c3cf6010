"""Serve mode: run the HTTP API under uvicorn."""

import sys
from typing import Optional

import typer
import uvicorn

from stockroom.config import API_HOST, API_PORT

from .shared import DatabaseOption, console, logger, open_database


def serve(
    host: str = typer.Option(API_HOST, "--host", "-h", help="Bind host"),
    port: int = typer.Option(API_PORT, "--port", "-p", help="Bind port"),
    database: Optional[str] = DatabaseOption,
) -> None:
    """Start the stockroom HTTP API."""
    open_database(database)
    from stockroom.api.server import create_app

    logger.bind(command="serve", port=port).info("serve.start")
    console.print(f"[green]Starting stockroom API on http://{host}:{port}[/green]")
    console.print("[dim]Docs at /docs, health at /health[/dim]")
    try:
        uvicorn.run(create_app(), host=host, port=port, log_level="info", timeout_graceful_shutdown=15)
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")
        sys.exit(0)
