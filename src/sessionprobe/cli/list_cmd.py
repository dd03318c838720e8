"""``sessionprobe list`` — show the registered scenarios."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from sessionprobe.scenarios import registry

console = Console()


def list_cmd() -> None:
    """Print registered scenarios in execution order."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Scenario", style="bold")
    table.add_column("Description")
    for definition in registry.get_all():
        table.add_row(definition.name, definition.description)
    console.print(table)
