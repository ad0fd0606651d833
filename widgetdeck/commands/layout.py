"""Layout management commands.

All layout commands live under `widgetdeck layout <subcommand>` and act on
one surface at a time, selected with `--scope` (main, right-rail, left-rail).
"""

from typing import Optional

import typer
from rich.table import Table

from widgetdeck.config.settings import get_layout_store_path
from widgetdeck.exceptions import WidgetDeckError
from widgetdeck.layout.add_flow import REASON_ALREADY_ADDED, AddWidgetFlow
from widgetdeck.layout.catalog import widget_catalog
from widgetdeck.layout.defaults import LayoutScope
from widgetdeck.layout.heights import HEIGHT_ORDER, HeightClass, resolve
from widgetdeck.layout.storage import JsonFileStore
from widgetdeck.layout.store import LayoutStore
from widgetdeck.utils.output import console, print_json

app = typer.Typer(help="Inspect and edit dashboard layouts")

SCOPE_OPTION_HELP = "Layout scope: main, right-rail or left-rail"


def _open_store(scope: str) -> LayoutStore:
    try:
        layout_scope = LayoutScope.parse(scope)
    except WidgetDeckError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        console.print(f"[dim]Valid scopes: {', '.join(s.value for s in LayoutScope)}[/dim]")
        raise typer.Exit(1) from None

    store = LayoutStore(layout_scope, JsonFileStore(get_layout_store_path()))
    store.load()
    return store


def _require_widget(store: LayoutStore, widget_id: str) -> None:
    if store.surface.get(widget_id) is None:
        console.print(f"[red]Error: No widget '{widget_id}' in {store.scope.value}[/red]")
        raise typer.Exit(1)


def _print_surface(store: LayoutStore) -> None:
    surface = store.surface
    if not len(surface):
        console.print(f"[yellow]No widgets configured in {store.scope.value}[/yellow]")
        return

    table = Table(title=f"Layout: {store.scope.value}", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="cyan")
    table.add_column("Type")
    table.add_column("Title")
    table.add_column("Height")
    table.add_column("Expanded", justify="center")

    for position, widget in enumerate(surface, start=1):
        descriptor = store.catalog.descriptor_for(widget.type)
        type_label = widget.type if store.catalog.has(widget.type) else f"{widget.type} [red](unknown)[/red]"
        table.add_row(
            str(position),
            widget.id,
            f"{descriptor.icon} {type_label}",
            widget.display_title(store.catalog),
            f"{resolve(widget.height_class).label} {widget.height_class.value}",
            "✓" if widget.expanded else "-",
        )
    console.print(table)


@app.command("show")
def show(
    scope: str = typer.Option("main", "--scope", "-s", help=SCOPE_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output the stored document as JSON"),
):
    """Show the widgets on a layout surface."""
    store = _open_store(scope)
    if json_output:
        print_json(store.surface.to_document())
        return
    _print_surface(store)


@app.command("add")
def add(
    widget_type: str = typer.Argument(..., help="Widget type key (see 'layout types')"),
    scope: str = typer.Option("main", "--scope", "-s", help=SCOPE_OPTION_HELP),
):
    """Append a widget to a layout surface."""
    store = _open_store(scope)
    result = AddWidgetFlow(store).select(widget_type)
    if result.added:
        widget = result.surface.widgets[-1]
        console.print(f"[green]Added {widget.type} as '{widget.id}' to {store.scope.value}[/green]")
    elif result.reason == REASON_ALREADY_ADDED:
        console.print(f"[yellow]{widget_type} is already on {store.scope.value}[/yellow]")
    else:
        console.print(f"[red]Error: Unknown widget type '{widget_type}'[/red]")
        raise typer.Exit(1)


@app.command("remove")
def remove(
    widget_id: str = typer.Argument(..., help="Widget id"),
    scope: str = typer.Option("main", "--scope", "-s", help=SCOPE_OPTION_HELP),
):
    """Remove a widget from a layout surface."""
    store = _open_store(scope)
    _require_widget(store, widget_id)
    store.remove(widget_id)
    console.print(f"[green]Removed '{widget_id}' from {store.scope.value}[/green]")


@app.command("move")
def move(
    widget_id: str = typer.Argument(..., help="Widget to move"),
    before: str = typer.Argument(..., help="Widget it should end up in front of"),
    scope: str = typer.Option("main", "--scope", "-s", help=SCOPE_OPTION_HELP),
):
    """Move a widget in front of another one (same as a drag and drop)."""
    store = _open_store(scope)
    _require_widget(store, widget_id)
    _require_widget(store, before)
    surface = store.reorder(widget_id, before)
    console.print(f"[green]Order: {', '.join(surface.ids())}[/green]")


@app.command("size")
def size(
    widget_id: str = typer.Argument(..., help="Widget id"),
    height: str = typer.Argument(..., help="small, medium, large, full or fill"),
    scope: str = typer.Option("main", "--scope", "-s", help=SCOPE_OPTION_HELP),
):
    """Set a widget's height class."""
    try:
        height_class = HeightClass(height.lower())
    except ValueError:
        console.print(f"[red]Error: Invalid height '{height}'[/red]")
        console.print(f"[dim]Valid heights: {', '.join(h.value for h in HEIGHT_ORDER)}[/dim]")
        raise typer.Exit(1) from None

    store = _open_store(scope)
    _require_widget(store, widget_id)
    store.set_height_class(widget_id, height_class)
    console.print(f"[green]'{widget_id}' is now {height_class.value}[/green]")


@app.command("toggle")
def toggle(
    widget_id: str = typer.Argument(..., help="Widget id"),
    scope: str = typer.Option("main", "--scope", "-s", help=SCOPE_OPTION_HELP),
):
    """Collapse or expand a widget."""
    store = _open_store(scope)
    _require_widget(store, widget_id)
    widget = store.toggle_expanded(widget_id).get(widget_id)
    state = "expanded" if widget.expanded else "collapsed"
    console.print(f"[green]'{widget_id}' {state}[/green]")


@app.command("rename")
def rename(
    widget_id: str = typer.Argument(..., help="Widget id"),
    title: Optional[str] = typer.Argument(None, help="New title (omit to restore the default)"),
    scope: str = typer.Option("main", "--scope", "-s", help=SCOPE_OPTION_HELP),
):
    """Override a widget's title."""
    store = _open_store(scope)
    _require_widget(store, widget_id)
    widget = store.rename(widget_id, title).get(widget_id)
    console.print(f"[green]'{widget_id}' is titled '{widget.display_title(store.catalog)}'[/green]")


@app.command("reset")
def reset(
    scope: str = typer.Option("main", "--scope", "-s", help=SCOPE_OPTION_HELP),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Restore a layout surface to its default widgets."""
    store = _open_store(scope)
    if not force and not typer.confirm(f"Reset {store.scope.value} to its default widgets?"):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)
    store.reset()
    console.print(f"[green]Reset {store.scope.value}[/green]")
    _print_surface(store)


@app.command("types")
def types(
    scope: Optional[str] = typer.Option(None, "--scope", "-s", help="Mark types already on this scope"),
):
    """List the widget types that can be added."""
    present = set(_open_store(scope).surface.types()) if scope else set()

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Type", style="cyan")
    table.add_column("Title")
    table.add_column("Default height")
    table.add_column("Notes", style="dim")

    for descriptor in widget_catalog.list_descriptors():
        notes = []
        if descriptor.requires_project_context:
            notes.append("requires project")
        if descriptor.key in present:
            notes.append("added")
        table.add_row(
            f"{descriptor.icon} {descriptor.key}",
            descriptor.title,
            descriptor.default_height_class.value,
            ", ".join(notes),
        )
    console.print(table)
