"""
Widget type catalog.

Each panel module describes itself with a WidgetTypeDescriptor and registers
it here under a unique type key. Layout documents reference widgets only by
that key, so a lookup for a key this build does not know must degrade to a
neutral descriptor instead of failing.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional

from .heights import HeightClass

logger = logging.getLogger(__name__)

# (expanded, height_class, project_context) -> a Rich renderable
WidgetRenderer = Callable[[bool, HeightClass, Optional[Any]], Any]


@dataclass(frozen=True)
class WidgetTypeDescriptor:
    """Static description of a widget type.

    Attributes:
        key: Unique type name referenced by persisted layouts
        icon: Icon token shown in the panel header
        title: Default panel title
        description: One-line description for the add-widget flow
        accent_color: Header accent color (any Rich color string)
        requires_project_context: Panel needs an active project to show data
        default_height_class: Height class given to newly added instances
        repeatable: Whether a surface may hold more than one instance
        renderer: Content render function, if the panel module supplied one
    """

    key: str
    icon: str
    title: str
    description: str = ""
    accent_color: str = "#6b7280"
    requires_project_context: bool = False
    default_height_class: HeightClass = HeightClass.MEDIUM
    repeatable: bool = False
    renderer: Optional[WidgetRenderer] = None


# Returned for type keys the catalog does not know
UNKNOWN_WIDGET = WidgetTypeDescriptor(
    key="unknown",
    icon="📦",
    title="Widget",
    description="Unknown widget type",
    accent_color="#666666",
)


class WidgetTypeCatalog:
    """Registry of widget types keyed by type name.

    Usage:
        widget_catalog.register(WidgetTypeDescriptor("docker", "🐳", "Docker"))

        descriptor = widget_catalog.descriptor_for("docker")

        @widget_catalog.renderer("docker")
        def render_docker(expanded, height_class, project):
            ...
    """

    def __init__(self) -> None:
        self._types: Dict[str, WidgetTypeDescriptor] = {}

    def register(self, descriptor: WidgetTypeDescriptor) -> None:
        """Register a widget type, replacing any previous one with the same key."""
        if descriptor.key in self._types:
            logger.warning(f"Overwriting existing widget type: {descriptor.key}")

        self._types[descriptor.key] = descriptor
        logger.debug(f"Registered widget type: {descriptor.key}")

    def unregister(self, key: str) -> bool:
        """Unregister a widget type.

        Returns:
            True if the type was registered, False if not found
        """
        if key in self._types:
            del self._types[key]
            return True
        return False

    def descriptor_for(self, key: str) -> WidgetTypeDescriptor:
        """Descriptor for ``key``, or UNKNOWN_WIDGET when not registered."""
        descriptor = self._types.get(key)
        if descriptor is None:
            return UNKNOWN_WIDGET
        return descriptor

    def has(self, key: str) -> bool:
        return key in self._types

    def list_types(self) -> List[str]:
        """Registered type keys in registration order."""
        return list(self._types.keys())

    def list_descriptors(self) -> List[WidgetTypeDescriptor]:
        """Registered descriptors in registration order."""
        return list(self._types.values())

    def renderer(self, key: str) -> Callable[[WidgetRenderer], WidgetRenderer]:
        """Decorator attaching a render function to an already registered type.

        Raises:
            KeyError: If ``key`` has not been registered
        """

        def wrapper(func: WidgetRenderer) -> WidgetRenderer:
            self._types[key] = replace(self._types[key], renderer=func)
            return func

        return wrapper

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, key: object) -> bool:
        return key in self._types


BUILTIN_WIDGETS: tuple[WidgetTypeDescriptor, ...] = (
    WidgetTypeDescriptor(
        key="system",
        icon="📊",
        title="System Stats",
        description="CPU, memory and uptime",
        accent_color="#06b6d4",
    ),
    WidgetTypeDescriptor(
        key="projectInfo",
        icon="📁",
        title="Project Info",
        description="Details and checkpoints for the active project",
        accent_color="#8b5cf6",
        requires_project_context=True,
    ),
    WidgetTypeDescriptor(
        key="github",
        icon="🐙",
        title="GitHub",
        description="Repository sync and pull requests",
        accent_color="#f59e0b",
        requires_project_context=True,
    ),
    WidgetTypeDescriptor(
        key="cloudflare",
        icon="☁️",
        title="Cloudflare",
        description="Publish the project through a tunnel",
        accent_color="#f97316",
        requires_project_context=True,
    ),
    WidgetTypeDescriptor(
        key="ports",
        icon="🔌",
        title="Ports",
        description="Listening ports and services",
        accent_color="#14b8a6",
    ),
    WidgetTypeDescriptor(
        key="sessions",
        icon="💻",
        title="Sessions",
        description="Running terminal sessions",
        accent_color="#22c55e",
        default_height_class=HeightClass.LARGE,
    ),
    WidgetTypeDescriptor(
        key="docker",
        icon="🐳",
        title="Docker",
        description="Container status",
        accent_color="#3b82f6",
    ),
    WidgetTypeDescriptor(
        key="projects",
        icon="🗂️",
        title="Projects",
        description="Project list with favorites",
        accent_color="#ec4899",
        default_height_class=HeightClass.FILL,
    ),
    WidgetTypeDescriptor(
        key="agents",
        icon="🤖",
        title="Agents",
        description="Agent status and recent executions",
        accent_color="#a855f7",
    ),
)


def register_builtin_widgets(catalog: "WidgetTypeCatalog") -> None:
    """Register the built-in widget types on ``catalog``."""
    for descriptor in BUILTIN_WIDGETS:
        catalog.register(descriptor)
    logger.debug("Registered built-in widget types")


# Global catalog instance
widget_catalog = WidgetTypeCatalog()
register_builtin_widgets(widget_catalog)
