"""Icon cache commands for iconlink CLI."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from iconlink.core.config import default_cache_path
from iconlink.core.icons import load_icon_tables
from iconlink.core.storage import load_cache, parse_cache_entry, validate_entry

app = typer.Typer()
console = Console()


def _cache_path(cache_file: Optional[Path]) -> Path:
    return cache_file or default_cache_path()


@app.command("show")
def show(
    cache_file: Optional[Path] = typer.Option(None, "--cache", help="Cache file (defaults to ~/.iconlink/cache.json)"),
    table_file: Optional[Path] = typer.Option(None, "--table", help="Icon table YAML (defaults to the bundled table)"),
):
    """Show cached icon identities and whether they still match the table."""
    path = _cache_path(cache_file)
    store = load_cache(path, frozen=True)
    if not len(store):
        console.print(f"[yellow]Icon cache is empty:[/] {path}")
        return

    try:
        tables = load_icon_tables(table_file)
    except ValueError as e:
        console.print(f"[bold red]❌ Invalid icon table:[/] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Icon cache ({path})", show_header=True, header_style="bold cyan")
    table.add_column("Path", style="white")
    table.add_column("Priority", justify="right")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Class", style="cyan")
    table.add_column("Valid", justify="center")

    for key, raw in store.items():
        entry = parse_cache_entry(raw)
        if entry is None:
            table.add_row(key, "?", "?", str(raw), "[red]✗[/]")
            continue
        # The cache does not record resource kinds; accept either table.
        valid = any(
            validate_entry(entry, t or []) is not None
            for t in (tables.file_icons, tables.directory_icons)
        )
        mark = "[green]✓[/]" if valid else "[red]✗[/]"
        table.add_row(key, str(entry.priority), str(entry.icon_index), entry.icon_class, mark)

    console.print(table)


@app.command("prune")
def prune(
    cache_file: Optional[Path] = typer.Option(None, "--cache", help="Cache file (defaults to ~/.iconlink/cache.json)"),
    table_file: Optional[Path] = typer.Option(None, "--table", help="Icon table YAML (defaults to the bundled table)"),
    directory: List[str] = typer.Option([], "--directory", "-d", help="Cached path that is a directory (repeatable)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report stale entries without removing them"),
):
    """Remove cache entries that no longer match the icon table."""
    path = _cache_path(cache_file)
    try:
        tables = load_icon_tables(table_file)
    except ValueError as e:
        console.print(f"[bold red]❌ Invalid icon table:[/] {e}")
        raise typer.Exit(1)

    store = load_cache(path, frozen=dry_run)
    dirs = set(directory)
    # Directories that exist on disk are checked against the directory table too.
    dirs.update(key for key, _ in store.items() if Path(key).is_dir())

    # A frozen store reports what it would remove without removing it.
    removed = store.prune(tables, directories=dirs)
    if dry_run:
        for key in removed:
            console.print(f"  [yellow]stale[/] {key}")
        console.print(f"[dim]{len(removed)} stale entr{'y' if len(removed) == 1 else 'ies'} (dry run)[/]")
        return

    if removed:
        store.save()
    for key in removed:
        console.print(f"  [red]removed[/] {key}")
    console.print(f"[bold green]✔[/] Pruned {len(removed)} entr{'y' if len(removed) == 1 else 'ies'} from [underline]{path}[/]")


@app.command("clear")
def clear(
    cache_file: Optional[Path] = typer.Option(None, "--cache", help="Cache file (defaults to ~/.iconlink/cache.json)"),
):
    """Delete every cached icon identity."""
    path = _cache_path(cache_file)
    store = load_cache(path)
    count = len(store)
    store.clear()
    store.save()
    console.print(f"[bold green]✔[/] Cleared {count} cached icon(s) from [underline]{path}[/]")
