"""
Layout store: the ordered, persisted widget list of one scope.

The list operations are plain functions from surface to surface. LayoutStore
wraps them with the state it owns: it commits the result, writes it to the
key-value store before returning and notifies subscribers.

Usage:
    store = LayoutStore(LayoutScope.MAIN, JsonFileStore(path))
    store.load()
    store.add("docker")
    store.reorder("docker", "system")
"""

import json
import logging
import uuid
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

from widgetdeck.exceptions import PersistenceError

from .catalog import WidgetTypeCatalog, widget_catalog
from .defaults import LayoutScope, seed_surface
from .heights import HeightClass
from .models import LayoutSurface, WidgetInstance
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

IdFactory = Callable[[str], str]
Subscriber = Callable[[LayoutSurface], None]


def generate_widget_id(widget_type: str) -> str:
    """Fresh opaque id for a new instance of ``widget_type``."""
    return f"{widget_type}-{uuid.uuid4().hex[:8]}"


def _unique_id(widget_type: str, taken: set, id_factory: IdFactory) -> str:
    candidate = id_factory(widget_type)
    suffix = 2
    while candidate in taken:
        candidate = f"{id_factory(widget_type)}-{suffix}"
        suffix += 1
    return candidate


# =============================================================================
# Pure transformations
# =============================================================================


def add_widget(
    surface: LayoutSurface,
    widget_type: str,
    catalog: WidgetTypeCatalog,
    id_factory: IdFactory = generate_widget_id,
) -> LayoutSurface:
    """Append a new instance of ``widget_type``.

    Returns ``surface`` unchanged when the type is already present and the
    catalog marks it non-repeatable.
    """
    descriptor = catalog.descriptor_for(widget_type)
    if not descriptor.repeatable and widget_type in surface.types():
        return surface

    widget = WidgetInstance(
        id=_unique_id(widget_type, set(surface.ids()), id_factory),
        type=widget_type,
        expanded=True,
        height_class=descriptor.default_height_class,
    )
    return surface.with_widgets([*surface.widgets, widget])


def remove_widget(surface: LayoutSurface, widget_id: str) -> LayoutSurface:
    """Drop ``widget_id``; unchanged when absent."""
    if surface.index_of(widget_id) < 0:
        return surface
    return surface.with_widgets([w for w in surface.widgets if w.id != widget_id])


def reorder_widgets(surface: LayoutSurface, dragged_id: str, target_id: str) -> LayoutSurface:
    """Move ``dragged_id`` to sit immediately before ``target_id``.

    The insertion index is the target's index after the dragged widget has
    been taken out, so every other widget keeps its relative order.
    Unchanged when either id is absent or both are the same.
    """
    if dragged_id == target_id:
        return surface
    source_index = surface.index_of(dragged_id)
    if source_index < 0 or surface.index_of(target_id) < 0:
        return surface

    widgets = list(surface.widgets)
    dragged = widgets.pop(source_index)
    target_index = next(i for i, w in enumerate(widgets) if w.id == target_id)
    widgets.insert(target_index, dragged)
    return surface.with_widgets(widgets)


def update_widget(surface: LayoutSurface, widget_id: str, **changes: Any) -> LayoutSurface:
    """Replace fields on one instance; unchanged when the id is absent."""
    index = surface.index_of(widget_id)
    if index < 0:
        return surface

    current = surface.widgets[index]
    updated = replace(current, **changes)
    if updated == current:
        return surface

    widgets = list(surface.widgets)
    widgets[index] = updated
    return surface.with_widgets(widgets)


# =============================================================================
# Document parsing
# =============================================================================


def _legacy_entries(data: Dict[str, Any]) -> Optional[List[Any]]:
    """Flatten the older ``{widgets, expanded, heights}`` object form."""
    widgets = data.get("widgets")
    if not isinstance(widgets, list):
        return None

    expanded = data.get("expanded") if isinstance(data.get("expanded"), dict) else {}
    heights = data.get("heights") if isinstance(data.get("heights"), dict) else {}

    entries = []
    for entry in widgets:
        if isinstance(entry, dict) and "id" in entry:
            entry = dict(entry)
            widget_id = str(entry["id"])
            if widget_id in expanded:
                entry.setdefault("expanded", expanded[widget_id])
            if widget_id in heights:
                entry.setdefault("heightClass", heights[widget_id])
        entries.append(entry)
    return entries


def parse_document(
    raw: str,
    scope_key: str,
    catalog: WidgetTypeCatalog,
    id_factory: IdFactory = generate_widget_id,
) -> Optional[LayoutSurface]:
    """Parse a persisted layout document.

    Returns None for documents that are not JSON or not a widget list, so the
    caller can fall back to the seed list. Entries of unknown types are kept
    as they are. Entries without a type are dropped; entries without an id,
    or repeating an earlier id, get a fresh one.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return None

    if isinstance(data, dict):
        data = _legacy_entries(data)
    if not isinstance(data, list):
        return None

    widgets: List[WidgetInstance] = []
    seen: set = set()
    for position, entry in enumerate(data):
        if not isinstance(entry, dict) or not isinstance(entry.get("type"), str) or not entry["type"]:
            logger.warning(f"Dropping malformed entry {position} in {scope_key}: {entry!r}")
            continue

        entry = dict(entry)
        widget_id = entry.get("id")
        if not isinstance(widget_id, (str, int)) or str(widget_id) == "" or str(widget_id) in seen:
            entry["id"] = _unique_id(entry["type"], seen, id_factory)
            logger.info(f"Assigned id {entry['id']} to entry {position} in {scope_key}")

        widget = WidgetInstance.from_dict(entry, catalog)
        if not catalog.has(widget.type):
            logger.info(f"Keeping widget {widget.id} of unknown type '{widget.type}' in {scope_key}")
        seen.add(widget.id)
        widgets.append(widget)

    return LayoutSurface(scope_key, tuple(widgets))


# =============================================================================
# Store
# =============================================================================


class LayoutStore:
    """Owns the widget list of one layout scope.

    Every mutating call commits the new surface, writes it to the key-value
    store, notifies subscribers and returns the surface. Calls that reference
    unknown ids, or add a type that is already present, return the current
    surface unchanged and write nothing.

    A failed write is logged and swallowed. The in-memory surface stays
    authoritative until a later write succeeds.
    """

    def __init__(
        self,
        scope: LayoutScope,
        kv: KeyValueStore,
        catalog: Optional[WidgetTypeCatalog] = None,
        *,
        id_factory: IdFactory = generate_widget_id,
    ) -> None:
        self.scope = scope
        self.kv = kv
        self.catalog = catalog or widget_catalog
        self.id_factory = id_factory
        self._surface: Optional[LayoutSurface] = None
        self._subscribers: List[Subscriber] = []

    @property
    def scope_key(self) -> str:
        return self.scope.storage_key

    @property
    def surface(self) -> LayoutSurface:
        """Current surface, loading it on first access."""
        if self._surface is None:
            return self.load()
        return self._surface

    # -------------------------------------------------------------------------
    # Loading and saving
    # -------------------------------------------------------------------------

    def load(self) -> LayoutSurface:
        """Read the persisted document, falling back to the seed list.

        Never raises: read errors and corrupt documents both yield the seed.
        """
        try:
            raw = self.kv.get(self.scope_key)
        except (OSError, PersistenceError) as e:
            logger.warning(f"Could not read {self.scope_key}, using defaults: {e}")
            raw = None

        surface = None
        if raw is not None:
            surface = parse_document(raw, self.scope_key, self.catalog, self.id_factory)
            if surface is None:
                logger.warning(f"Corrupt layout document for {self.scope_key}, using defaults")

        if surface is None:
            surface = seed_surface(self.scope, self.catalog)

        self._surface = surface
        self._publish()
        return surface

    def save(self) -> LayoutSurface:
        """Persist the current surface as-is."""
        surface = self.surface
        self._persist(surface)
        return surface

    def reset(self) -> LayoutSurface:
        """Replace the surface with the scope's seed list."""
        logger.info(f"Resetting {self.scope_key} to defaults")
        return self._commit(seed_surface(self.scope, self.catalog), force=True)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add(self, widget_type: str) -> LayoutSurface:
        """Append a new instance of ``widget_type`` (no-op for duplicates)."""
        current = self.surface
        updated = add_widget(current, widget_type, self.catalog, self.id_factory)
        if updated is current:
            logger.info(f"Widget type '{widget_type}' already added to {self.scope_key}")
            return current
        return self._commit(updated)

    def remove(self, widget_id: str) -> LayoutSurface:
        return self._apply(remove_widget(self.surface, widget_id), "remove", widget_id)

    def reorder(self, dragged_id: str, target_id: str) -> LayoutSurface:
        current = self.surface
        if dragged_id == target_id:
            return current
        return self._apply(
            reorder_widgets(current, dragged_id, target_id),
            "reorder",
            f"{dragged_id} -> {target_id}",
        )

    def set_height_class(self, widget_id: str, height_class: HeightClass) -> LayoutSurface:
        if self.surface.get(widget_id) is None:
            logger.debug(f"resize was a no-op on {self.scope_key} ({widget_id})")
            return self.surface
        return self._apply(
            update_widget(self.surface, widget_id, height_class=HeightClass(height_class)),
            "resize",
            widget_id,
        )

    def set_expanded(self, widget_id: str, expanded: bool) -> LayoutSurface:
        return self._apply(
            update_widget(self.surface, widget_id, expanded=bool(expanded)),
            "set_expanded",
            widget_id,
        )

    def toggle_expanded(self, widget_id: str) -> LayoutSurface:
        widget = self.surface.get(widget_id)
        if widget is None:
            logger.debug(f"toggle_expanded ignored unknown id {widget_id} in {self.scope_key}")
            return self.surface
        return self.set_expanded(widget_id, not widget.expanded)

    def rename(self, widget_id: str, title: Optional[str]) -> LayoutSurface:
        """Set a title override; an empty title restores the catalog title."""
        cleaned = title.strip() if title else None
        return self._apply(
            update_widget(self.surface, widget_id, title=cleaned or None),
            "rename",
            widget_id,
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_present(self, widget_type: str) -> bool:
        return widget_type in self.surface.types()

    def available_types(self) -> List[str]:
        """Catalog types that ``add`` would accept right now."""
        present = set(self.surface.types())
        return [
            d.key
            for d in self.catalog.list_descriptors()
            if d.repeatable or d.key not in present
        ]

    # -------------------------------------------------------------------------
    # Subscribers
    # -------------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback`` with every committed surface. Returns a disposer."""
        self._subscribers.append(callback)

        def dispose() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return dispose

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _apply(self, updated: LayoutSurface, operation: str, detail: str) -> LayoutSurface:
        current = self.surface
        if updated is current:
            logger.debug(f"{operation} was a no-op on {self.scope_key} ({detail})")
            return current
        return self._commit(updated)

    def _commit(self, surface: LayoutSurface, force: bool = False) -> LayoutSurface:
        if not force and surface == self._surface:
            return surface
        self._surface = surface
        self._persist(surface)
        self._publish()
        return surface

    def _persist(self, surface: LayoutSurface) -> None:
        try:
            self.kv.set(self.scope_key, json.dumps(surface.to_document()))
        except (OSError, PersistenceError):
            logger.exception(f"Failed to persist layout {self.scope_key}")

    def _publish(self) -> None:
        if self._surface is None:
            return
        for callback in list(self._subscribers):
            callback(self._surface)


def open_layout_stores(
    kv: KeyValueStore,
    catalog: Optional[WidgetTypeCatalog] = None,
) -> Dict[LayoutScope, LayoutStore]:
    """One independent store per scope, all loaded."""
    stores = {scope: LayoutStore(scope, kv, catalog) for scope in LayoutScope}
    for store in stores.values():
        store.load()
    return stores
