"""Database and user administration: init-db, add-user."""

from typing import Optional

import typer

from stockroom.db import get_session
from stockroom.db.repositories import user_repo
from stockroom.db.seed_data import seed_defaults
from stockroom.errors import StockroomError
from stockroom.models.enums import Role

from .shared import DatabaseOption, console, fail, logger, open_database


def init_db_command(
    seed: bool = typer.Option(False, "--seed", help="Create the default location and bootstrap admin"),
    database: Optional[str] = DatabaseOption,
) -> None:
    """Create tables (and optionally seed defaults)."""
    open_database(database)
    console.print("[green]Database ready.[/green]")
    if seed:
        with get_session() as session:
            ids = seed_defaults(session)
        console.print(f"  Main Storage location id: {ids['location_id']}")
        console.print(f"  Bootstrap admin id: {ids['admin_id']}")
        logger.info("cli.init_db.seeded", **ids)


def add_user(
    name: str = typer.Argument(..., help="Display name"),
    email: str = typer.Argument(..., help="Email address"),
    role: Role = typer.Option(Role.STAFF, "--role", "-r", case_sensitive=False),
    department: Optional[str] = typer.Option(None, "--department"),
    database: Optional[str] = DatabaseOption,
) -> None:
    """Provision a user (identity only; credentials live elsewhere)."""
    open_database(database)
    try:
        user = user_repo.create_user(name, email, role, department)
    except StockroomError as e:
        fail(e)
    console.print(f"[green]Created {user.role.value} user {user.name} <{user.email}> with id {user.id}[/green]")
