"""SKU counter commands: next, peek, prefix."""

from typing import Optional

import typer

from stockroom.db.repositories import counter_repo
from stockroom.errors import StockroomError

from .shared import DatabaseOption, console, fail, open_database

sku_app = typer.Typer(help="SKU counter")


@sku_app.command("next")
def next_sku(database: Optional[str] = DatabaseOption) -> None:
    """Mint and print the next SKU."""
    open_database(database)
    console.print(counter_repo.next_sku())


@sku_app.command("peek")
def peek(database: Optional[str] = DatabaseOption) -> None:
    """Show prefix, current value and the SKU that would be minted next."""
    open_database(database)
    info = counter_repo.peek()
    console.print(f"Prefix: [cyan]{info.prefix}[/cyan]  Current: {info.current_value}  Next: [green]{info.next_sku}[/green]")


@sku_app.command("prefix")
def set_prefix(
    prefix: str = typer.Argument(..., help="Alphanumeric prefix, stored upper-cased"),
    database: Optional[str] = DatabaseOption,
) -> None:
    """Change the SKU prefix (the counter keeps its value)."""
    open_database(database)
    try:
        info = counter_repo.set_prefix(prefix)
    except StockroomError as e:
        fail(e)
    console.print(f"[green]Prefix set to {info.prefix}; next SKU {info.next_sku}[/green]")
