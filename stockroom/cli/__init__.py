"""CLI commands: serve, init-db, add-user, aging-sweep, sku."""

from typer import Typer

from stockroom.cli import admin_commands, aging_command, serve as serve_module, sku_commands
from stockroom.utils.tracing import init_tracing

init_tracing()

app = Typer(help="Stockroom: serial-number inventory and stock requests")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(serve_module.serve)
    app.command(name="init-db")(admin_commands.init_db_command)
    app.command(name="add-user")(admin_commands.add_user)
    app.command(name="aging-sweep")(aging_command.aging_sweep)
    app.add_typer(sku_commands.sku_app, name="sku")


register_commands()
