#!/usr/bin/env python3
"""
Main CLI entry point for widgetdeck
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from widgetdeck import __version__
from widgetdeck.commands.layout import app as layout_app
from widgetdeck.config.settings import get_layout_store_path, validate_all_env_vars
from widgetdeck.exceptions import WidgetDeckError
from widgetdeck.utils.output import console

app = typer.Typer(
    help="Widget dashboard with drag-to-reorder panels and an embedded terminal",
    no_args_is_help=True,
)
app.add_typer(layout_app, name="layout")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
):
    """
    widgetdeck - widget dashboard layouts

    [bold]Examples:[/bold]

    Open the dashboard:
        [cyan]widgetdeck run --project ~/dev/myapp[/cyan]

    Add a widget from the command line:
        [cyan]widgetdeck layout add docker --scope right-rail[/cyan]
    """
    errors = validate_all_env_vars()
    for error in errors:
        console.print(f"[yellow]Warning: {error}[/yellow]")

    ctx.obj = {"verbose": verbose}
    if verbose:
        logging.getLogger("widgetdeck").setLevel(logging.DEBUG)


@app.command()
def version():
    """Show widgetdeck version"""
    typer.echo(f"widgetdeck version {__version__}")


@app.command()
def run(
    ctx: typer.Context,
    project: Optional[Path] = typer.Option(
        None, "--project", "-p", help="Project directory for project-aware widgets"
    ),
):
    """Open the dashboard."""
    from widgetdeck.layout.models import ProjectContext
    from widgetdeck.layout.storage import JsonFileStore
    from widgetdeck.ui.app import DeckApp
    from widgetdeck.utils.logging_utils import setup_tui_logging

    logger = setup_tui_logging(__name__, "DEBUG" if (ctx.obj or {}).get("verbose") else None)

    if project is not None and not project.is_dir():
        console.print(f"[red]Error: {project} is not a directory[/red]")
        raise typer.Exit(1)

    try:
        deck = DeckApp(
            JsonFileStore(get_layout_store_path()),
            project=ProjectContext.from_path(project) if project else None,
        )
        deck.run()
    except KeyboardInterrupt:
        pass
    except WidgetDeckError as e:
        logger.error(f"Dashboard failed: {e}")
        console.print(f"❌ Error: {e}", style="red")
        raise typer.Exit(1) from e


if __name__ == "__main__":
    app()
