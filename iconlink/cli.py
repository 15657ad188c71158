#!/usr/bin/env python3
"""
iconlink - icon cache and table inspection
Main CLI entry point
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

# Import command modules
from iconlink.commands import cache_cmd, config_cmd, table_cmd

app = typer.Typer(
    name="iconlink",
    help="Inspect the icon table, display options and resolved-icon cache",
    no_args_is_help=True,
    add_completion=True,
)

# Register command groups
app.add_typer(table_cmd.app, name="table", help="Inspect the icon tables")
app.add_typer(cache_cmd.app, name="cache", help="Inspect and maintain the icon cache")
app.add_typer(config_cmd.app, name="config", help="Manage display options")


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    """
    iconlink - icon cache and table inspection

    Commands:
      table   - List file/directory icons and their cache indices
      cache   - Show, prune or clear cached icon identities
      config  - Show or change display options
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(show_path=False)],
            force=True,
        )


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
