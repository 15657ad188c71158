"""Icon table commands for iconlink CLI."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from iconlink.core.icons import default_table_path, load_icon_tables

app = typer.Typer()
console = Console()


@app.command("list")
def list_icons(
    directories: bool = typer.Option(False, "--directories", "-d", help="List directory icons instead of file icons"),
    table_file: Optional[Path] = typer.Option(None, "--table", help="Icon table YAML (defaults to the bundled table)"),
):
    """List icons with the index used in cache entries."""
    try:
        tables = load_icon_tables(table_file)
    except ValueError as e:
        console.print(f"[bold red]❌ Invalid icon table:[/] {e}")
        raise typer.Exit(1)

    icons = tables.table_for(directories) or []
    kind = "Directory" if directories else "File"

    table = Table(title=f"{kind} icons ({tables.source or default_table_path()})", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Class", style="cyan")
    table.add_column("Colours", style="white")
    table.add_column("Match", style="green")

    for icon in icons:
        table.add_row(str(icon.index), icon.icon, ", ".join(icon.colour), icon.match or "")

    console.print(table)
    console.print(f"[dim]{len(icons)} icon(s)[/]")
