"""
Built-in panel content.

Panel bodies are deliberately thin: each renderer receives
``(expanded, height_class, project)`` and returns a Rich renderable. Richer
data sources plug in by registering a different renderer for the same type.
"""

import os
import platform
import shutil
from pathlib import Path
from typing import Optional

from rich.console import RenderableType
from rich.table import Table
from rich.text import Text

from widgetdeck.layout.catalog import WidgetTypeCatalog, WidgetTypeDescriptor, widget_catalog
from widgetdeck.layout.heights import HeightClass
from widgetdeck.layout.models import ProjectContext, WidgetInstance

# Cap for directory listings so a huge projects dir doesn't stall a render
MAX_LISTED_PROJECTS = 200


def no_project_placeholder(descriptor: WidgetTypeDescriptor) -> RenderableType:
    text = Text()
    text.append("📂 No project selected\n", style="bold")
    text.append(f"Select a project to see {descriptor.title}.", style="dim")
    return text


def unknown_widget_placeholder(widget_type: str) -> RenderableType:
    text = Text()
    text.append("📦 Unknown widget type\n", style="bold")
    text.append(f"'{widget_type}' is not available in this version.", style="dim")
    return text


def render_widget_content(
    widget: WidgetInstance,
    project: Optional[ProjectContext],
    catalog: Optional[WidgetTypeCatalog] = None,
) -> RenderableType:
    """Resolve and call the renderer for ``widget``."""
    catalog = catalog or widget_catalog
    if not catalog.has(widget.type):
        return unknown_widget_placeholder(widget.type)

    descriptor = catalog.descriptor_for(widget.type)
    if descriptor.requires_project_context and project is None:
        return no_project_placeholder(descriptor)
    if descriptor.renderer is None:
        return Text(descriptor.description, style="dim")
    return descriptor.renderer(widget.expanded, widget.height_class, project)


# =============================================================================
# Renderers
# =============================================================================


@widget_catalog.renderer("system")
def render_system(expanded: bool, height_class: HeightClass, project: Optional[ProjectContext]):
    table = Table.grid(padding=(0, 1))
    table.add_column(style="dim")
    table.add_column()
    table.add_row("Host", platform.node() or "-")
    table.add_row("OS", f"{platform.system()} {platform.release()}")
    table.add_row("CPUs", str(os.cpu_count() or "-"))
    if hasattr(os, "getloadavg"):
        load = ", ".join(f"{v:.2f}" for v in os.getloadavg())
        table.add_row("Load", load)
    try:
        usage = shutil.disk_usage(str(project.path if project else Path.home()))
        table.add_row("Disk", f"{usage.used / usage.total:.0%} of {usage.total // 1024**3} GiB")
    except OSError:
        table.add_row("Disk", "-")
    return table


@widget_catalog.renderer("projectInfo")
def render_project_info(expanded: bool, height_class: HeightClass, project: Optional[ProjectContext]):
    if project is None:
        return no_project_placeholder(widget_catalog.descriptor_for("projectInfo"))
    table = Table.grid(padding=(0, 1))
    table.add_column(style="dim")
    table.add_column()
    table.add_row("Name", project.name)
    table.add_row("Path", str(project.path))
    table.add_row("Git", "yes" if (project.path / ".git").exists() else "no")
    return table


@widget_catalog.renderer("projects")
def render_projects(expanded: bool, height_class: HeightClass, project: Optional[ProjectContext]):
    root = project.path.parent if project else Path.cwd()
    text = Text()
    try:
        entries = sorted(p for p in root.iterdir() if p.is_dir() and not p.name.startswith("."))
    except OSError:
        return Text(f"Cannot list {root}", style="red")

    for path in entries[:MAX_LISTED_PROJECTS]:
        active = project is not None and path == project.path
        text.append("● " if active else "  ", style="green")
        text.append(path.name + "\n", style="bold" if active else "")
    if not entries:
        text.append("No projects found", style="dim")
    return text


def _not_connected(title: str):
    def render(expanded: bool, height_class: HeightClass, project: Optional[ProjectContext]):
        text = Text(f"{title}: no data source connected", style="dim")
        if project is not None:
            text.append(f"\nProject: {project.name}")
        return text

    return render


for _key, _title in (
    ("github", "GitHub"),
    ("cloudflare", "Cloudflare"),
    ("ports", "Ports"),
    ("sessions", "Sessions"),
    ("docker", "Docker"),
    ("agents", "Agents"),
):
    widget_catalog.renderer(_key)(_not_connected(_title))
