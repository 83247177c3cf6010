"""Aging sweep: reclassify all units and send due warnings, then print what happened."""

from typing import Optional

from rich.table import Table

from stockroom.aging import run_sweep

from .shared import DatabaseOption, console, open_database


def aging_sweep(database: Optional[str] = DatabaseOption) -> None:
    """Run one aging pass (safe to repeat; alerts are de-duplicated for 24 hours)."""
    open_database(database)
    result = run_sweep()
    summary = result.summary()
    console.print(
        f"[bold]Scanned[/bold] {summary['scanned']}  "
        f"[bold]Reclassified[/bold] {summary['reclassified']}  "
        f"[bold]Alerts sent[/bold] {summary['alerts_sent']}"
    )
    if summary["skipped_no_recipients"]:
        console.print(f"[yellow]{summary['skipped_no_recipients']} alert(s) had no active users to notify[/yellow]")
    if not result.alerts:
        return
    table = Table(title="Aging alerts")
    table.add_column("Serial", style="cyan")
    table.add_column("Product")
    table.add_column("Days", justify="right")
    table.add_column("Alert", style="yellow")
    table.add_column("Notification", justify="right")
    for alert in result.alerts:
        table.add_row(
            alert.serial,
            alert.product_name,
            str(alert.days),
            alert.alert_type,
            str(alert.notification_id) if alert.notification_id is not None else "-",
        )
    console.print(table)
