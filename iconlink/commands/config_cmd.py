"""Config command for iconlink CLI."""

from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from iconlink.core.config import COLOUR_MODES, default_options_path, load_options, save_options

app = typer.Typer()
console = Console()


def _load_or_exit(options_file: Optional[Path]):
    try:
        return load_options(options_file)
    except ValueError as e:
        console.print(f"[bold red]❌ Invalid options:[/] {e}")
        raise typer.Exit(1)


@app.command("show")
def show(
    options_file: Optional[Path] = typer.Option(None, "--options", help="Options YAML (defaults to ~/.iconlink/options.yaml)"),
):
    """Show current display options."""
    opts = _load_or_exit(options_file)
    mode_names = {v: k for k, v in COLOUR_MODES.items()}

    console.print("\n[bold]Display Options:[/]")
    console.print(f"  Colour mode: [cyan]{mode_names.get(opts.colour_mode, 'off')}[/]")
    console.print(f"  Colour changed files only: [cyan]{'Enabled' if opts.colour_changed_only else 'Disabled'}[/]")
    console.print(f"  Default icon class: [cyan]{opts.default_icon_class}[/]")
    console.print()


@app.command("set-colour-mode")
def set_colour_mode(
    mode: str = typer.Argument(..., help="medium, dark or off"),
    options_file: Optional[Path] = typer.Option(None, "--options", help="Options YAML (defaults to ~/.iconlink/options.yaml)"),
):
    """Set the colour variant used for icon classes."""
    name = mode.strip().lower()
    if name != "off" and name not in COLOUR_MODES:
        console.print(f"[bold red]❌ Error:[/] '{mode}' is not a colour mode")
        console.print(f"[dim]Expected one of: {', '.join(COLOUR_MODES)}, off[/]")
        raise typer.Exit(1)

    opts = replace(_load_or_exit(options_file), colour_mode=COLOUR_MODES.get(name))
    path = save_options(opts, options_file or default_options_path())
    console.print(f"[bold green]✔[/] Colour mode set to: [cyan]{name}[/] (saved to {path})")


@app.command("set-default-icon")
def set_default_icon(
    icon_class: str = typer.Argument(..., help="CSS class for files without an icon"),
    options_file: Optional[Path] = typer.Option(None, "--options", help="Options YAML (defaults to ~/.iconlink/options.yaml)"),
):
    """Set the class used for files no provider claimed."""
    icon_class = icon_class.strip()
    if not icon_class:
        console.print("[bold red]❌ Error:[/] icon class must not be empty")
        raise typer.Exit(1)

    opts = replace(_load_or_exit(options_file), default_icon_class=icon_class)
    path = save_options(opts, options_file or default_options_path())
    console.print(f"[bold green]✔[/] Default icon class set to: [cyan]{icon_class}[/] (saved to {path})")
