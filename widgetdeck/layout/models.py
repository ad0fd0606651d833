"""
Layout data model.

WidgetInstance and LayoutSurface are immutable; every layout operation
produces a new surface. The persisted form of an instance is the JSON object
``{id, type, title?, expanded, heightClass}``.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .catalog import WidgetTypeCatalog
from .heights import HeightClass, parse_height_class


@dataclass(frozen=True)
class WidgetInstance:
    """One positioned occurrence of a widget type within a surface.

    Attributes:
        id: Opaque token, unique within the surface
        type: Key into the widget type catalog
        title: Optional title override (None uses the descriptor title)
        expanded: Whether the panel body is shown
        height_class: Discrete height snap
    """

    id: str
    type: str
    title: Optional[str] = None
    expanded: bool = True
    height_class: HeightClass = HeightClass.MEDIUM

    def to_dict(self) -> Dict[str, Any]:
        """Persisted representation (camelCase keys, title omitted when unset)."""
        result: Dict[str, Any] = {"id": self.id, "type": self.type}
        if self.title is not None:
            result["title"] = self.title
        result["expanded"] = self.expanded
        result["heightClass"] = self.height_class.value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any], catalog: WidgetTypeCatalog) -> "WidgetInstance":
        """Build an instance from a persisted object.

        Missing ``expanded`` defaults to True and a missing or invalid
        ``heightClass`` to the type's catalog default. ``id`` and ``type``
        must already be present; the document parser deals with entries
        that lack them.
        """
        widget_type = str(data["type"])
        default_height = catalog.descriptor_for(widget_type).default_height_class

        title = data.get("title")
        if title is not None and not isinstance(title, str):
            title = str(title)

        expanded = data.get("expanded", True)
        if not isinstance(expanded, bool):
            expanded = True

        return cls(
            id=str(data["id"]),
            type=widget_type,
            title=title or None,
            expanded=expanded,
            height_class=parse_height_class(data.get("heightClass"), default_height),
        )

    def display_title(self, catalog: WidgetTypeCatalog) -> str:
        return self.title or catalog.descriptor_for(self.type).title


@dataclass(frozen=True)
class LayoutSurface:
    """Ordered widget list for one layout scope."""

    scope_key: str
    widgets: Tuple[WidgetInstance, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.widgets)

    def __iter__(self):
        return iter(self.widgets)

    def ids(self) -> List[str]:
        return [w.id for w in self.widgets]

    def types(self) -> List[str]:
        return [w.type for w in self.widgets]

    def index_of(self, widget_id: str) -> int:
        """Position of ``widget_id``, or -1 when absent."""
        for index, widget in enumerate(self.widgets):
            if widget.id == widget_id:
                return index
        return -1

    def get(self, widget_id: str) -> Optional[WidgetInstance]:
        index = self.index_of(widget_id)
        return self.widgets[index] if index >= 0 else None

    def with_widgets(self, widgets: List[WidgetInstance]) -> "LayoutSurface":
        return LayoutSurface(self.scope_key, tuple(widgets))

    def to_document(self) -> List[Dict[str, Any]]:
        """JSON-ready list for persistence."""
        return [w.to_dict() for w in self.widgets]


@dataclass(frozen=True)
class ProjectContext:
    """The active project, passed through untouched to project-aware panels."""

    path: Path
    name: str = ""

    @classmethod
    def from_path(cls, path: Path) -> "ProjectContext":
        resolved = path.expanduser().resolve()
        return cls(path=resolved, name=resolved.name)
