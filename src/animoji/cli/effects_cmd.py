"""List the available effects."""

import click
from rich.console import Console
from rich.table import Table

from ..effects import Effect


@click.command()
def effects() -> None:
    """List the effects accepted by 'animoji animate'."""
    console = Console()

    table = Table(title="🎨 Effects", show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")

    for effect in Effect:
        table.add_row(effect.value, effect.description)

    console.print(table)
    console.print("💡 Chain several effects: [bold]animoji animate ripple tint-rgb zoom[/bold]")
