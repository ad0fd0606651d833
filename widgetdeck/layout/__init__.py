"""
Widget layout engine.

Framework-independent core of the dashboard:
- Widget type catalog with a neutral fallback for unknown types
- Per-scope layout stores persisted to a key-value store
- Drag-to-reorder state machine
- Discrete height snapping
- Wheel input arbitration ahead of the embedded terminal

Example usage:
    from widgetdeck.layout import LayoutScope, LayoutStore, MemoryStore

    store = LayoutStore(LayoutScope.MAIN, MemoryStore())
    store.load()
    store.add("docker")
"""

from .add_flow import AddResult, AddWidgetFlow, AddWidgetOption
from .catalog import (
    UNKNOWN_WIDGET,
    WidgetTypeCatalog,
    WidgetTypeDescriptor,
    register_builtin_widgets,
    widget_catalog,
)
from .defaults import DEFAULT_SEEDS, LayoutScope, seed_surface
from .drag import DragReorderController, DragSession, DragState
from .heights import (
    HEIGHT_SNAPS,
    HeightClass,
    HeightSnap,
    cycle_next,
    cycle_prev,
    cycle_to,
    resolve,
)
from .models import LayoutSurface, ProjectContext, WidgetInstance
from .scroll import (
    HIGHEST_PRIORITY,
    ScrollArbiter,
    SimpleScrollHandle,
    WheelChannel,
    WheelEvent,
    get_scroll_arbiter,
    reset_scroll_arbiter,
)
from .storage import JsonFileStore, KeyValueStore, MemoryStore
from .store import LayoutStore, open_layout_stores

__all__ = [
    # Catalog
    "UNKNOWN_WIDGET",
    "WidgetTypeCatalog",
    "WidgetTypeDescriptor",
    "register_builtin_widgets",
    "widget_catalog",
    # Heights
    "HEIGHT_SNAPS",
    "HeightClass",
    "HeightSnap",
    "cycle_next",
    "cycle_prev",
    "cycle_to",
    "resolve",
    # Model
    "LayoutSurface",
    "ProjectContext",
    "WidgetInstance",
    # Storage
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    # Store
    "DEFAULT_SEEDS",
    "LayoutScope",
    "LayoutStore",
    "open_layout_stores",
    "seed_surface",
    # Drag
    "DragReorderController",
    "DragSession",
    "DragState",
    # Scroll
    "HIGHEST_PRIORITY",
    "ScrollArbiter",
    "SimpleScrollHandle",
    "WheelChannel",
    "WheelEvent",
    "get_scroll_arbiter",
    "reset_scroll_arbiter",
    # Add flow
    "AddResult",
    "AddWidgetFlow",
    "AddWidgetOption",
]
