"""
Dashboard column bound to one layout store.

The dashboard renders the store's surface and rebuilds its panels whenever
the store publishes. It owns the drag controller for its surface; the app
feeds it pointer positions while a drag is in flight.
"""

import logging
from typing import Callable, List, Optional

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widget import Widget
from textual.widgets import Button, Label, Static

from widgetdeck.layout.add_flow import AddWidgetFlow
from widgetdeck.layout.drag import DragReorderController
from widgetdeck.layout.models import LayoutSurface, ProjectContext
from widgetdeck.layout.scroll import ScrollArbiter
from widgetdeck.layout.store import LayoutStore

from .add_widget_modal import AddWidgetScreen
from .scroll_regions import ArbitratedScroll
from .widget_panel import WidgetPanel

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "No widgets configured"


class WidgetDashboard(Vertical):
    """Toolbar plus a scrollable column of WidgetPanels."""

    DEFAULT_CSS = """
    WidgetDashboard {
        height: 1fr;
    }

    WidgetDashboard .dashboard-toolbar {
        height: 1;
        background: $boost;
    }

    WidgetDashboard .dashboard-title {
        width: 1fr;
        text-style: bold;
    }

    WidgetDashboard .dashboard-toolbar Button {
        min-width: 3;
        width: auto;
        height: 1;
        border: none;
        padding: 0 1;
        margin: 0;
    }

    WidgetDashboard.editing .dashboard-toolbar {
        background: $warning 30%;
    }

    WidgetDashboard .dashboard-grid {
        height: 1fr;
    }

    WidgetDashboard .empty-state {
        color: $text-muted;
        text-align: center;
        padding: 1;
    }
    """

    def __init__(
        self,
        store: LayoutStore,
        *,
        heading: str = "",
        project: Optional[ProjectContext] = None,
        arbiter: Optional[ScrollArbiter] = None,
        id: Optional[str] = None,
    ) -> None:
        super().__init__(id=id)
        self.store = store
        self.heading = heading or store.scope.value
        self.project = project
        self.arbiter = arbiter
        self.editing = False
        self.drag = DragReorderController(store)
        self._dispose_subscription: Optional[Callable[[], None]] = None

    @property
    def grid_region_id(self) -> str:
        return f"{self.store.scope.value}:grid"

    @property
    def is_dragging(self) -> bool:
        return self.drag.is_dragging

    def compose(self) -> ComposeResult:
        with Horizontal(classes="dashboard-toolbar"):
            yield Label(self.heading, classes="dashboard-title")
            yield Button("+", name="add")
            yield Button("✎", name="edit")
            yield Button("⟲", name="reset")
        yield ArbitratedScroll(
            *self._build_panels(self.store.surface),
            region_id=self.grid_region_id,
            arbiter=self.arbiter,
            classes="dashboard-grid",
        )

    def on_mount(self) -> None:
        self._dispose_subscription = self.store.subscribe(self._on_surface_changed)

    def on_unmount(self) -> None:
        if self._dispose_subscription is not None:
            self._dispose_subscription()
            self._dispose_subscription = None
        self.drag.cancel()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def _build_panels(self, surface: LayoutSurface) -> List[Widget]:
        if not len(surface):
            return [Static(EMPTY_MESSAGE, classes="empty-state")]
        return [
            WidgetPanel(
                widget,
                scope_key=surface.scope_key,
                editing=self.editing,
                project=self.project,
                catalog=self.store.catalog,
                arbiter=self.arbiter,
            )
            for widget in surface
        ]

    def panels(self) -> List[WidgetPanel]:
        return list(self.query(WidgetPanel))

    def _on_surface_changed(self, surface: LayoutSurface) -> None:
        if self.is_mounted:
            self.call_later(self.rebuild)

    async def rebuild(self) -> None:
        """Replace every panel with one built from the current surface."""
        grid = self.query_one(".dashboard-grid", ArbitratedScroll)
        logger.debug(f"Rebuilding {self.store.scope_key} with {len(self.store.surface)} widgets")
        await grid.remove_children()
        await grid.mount_all(self._build_panels(self.store.surface))

    def set_project(self, project: Optional[ProjectContext]) -> None:
        self.project = project
        self.call_later(self.rebuild)

    # -------------------------------------------------------------------------
    # Toolbar
    # -------------------------------------------------------------------------

    def on_button_pressed(self, event: Button.Pressed) -> None:
        name = event.button.name
        if name == "add":
            event.stop()
            self.open_add_widget()
        elif name == "edit":
            event.stop()
            self.toggle_editing()
        elif name == "reset":
            event.stop()
            self.store.reset()
            self.notify(f"{self.heading} layout reset")

    def toggle_editing(self) -> None:
        self.editing = not self.editing
        self.set_class(self.editing, "editing")
        if not self.editing:
            self.cancel_drag()
        self.call_later(self.rebuild)

    def open_add_widget(self) -> None:
        flow = AddWidgetFlow(self.store)
        self.app.push_screen(AddWidgetScreen(flow.options(), self.arbiter), self.add_widget)

    def add_widget(self, widget_type: Optional[str]) -> None:
        """Add ``widget_type`` to the surface (modal result callback)."""
        if not widget_type:
            return
        result = AddWidgetFlow(self.store).select(widget_type)
        if not result.added:
            self.notify(f"'{widget_type}': {result.reason}", severity="warning")

    # -------------------------------------------------------------------------
    # Panel messages
    # -------------------------------------------------------------------------

    def on_widget_panel_remove_requested(self, message: WidgetPanel.RemoveRequested) -> None:
        message.stop()
        self.store.remove(message.widget_id)

    def on_widget_panel_height_change_requested(
        self, message: WidgetPanel.HeightChangeRequested
    ) -> None:
        message.stop()
        self.store.set_height_class(message.widget_id, message.height_class)

    def on_widget_panel_expand_toggled(self, message: WidgetPanel.ExpandToggled) -> None:
        message.stop()
        self.store.toggle_expanded(message.widget_id)

    def on_widget_panel_drag_started(self, message: WidgetPanel.DragStarted) -> None:
        message.stop()
        if self.drag.begin_drag(message.widget_id):
            self._mark_drag()

    # -------------------------------------------------------------------------
    # Drag
    # -------------------------------------------------------------------------

    def panel_for(self, widget: Optional[Widget]) -> Optional[WidgetPanel]:
        """The panel of this dashboard containing ``widget``, if any."""
        if widget is None:
            return None
        for node in widget.ancestors_with_self:
            if isinstance(node, WidgetPanel):
                return node if node.scope_key == self.store.scope_key else None
        return None

    def drag_hover(self, widget: Optional[Widget]) -> None:
        """Pointer moved over ``widget`` during a drag."""
        if not self.drag.is_dragging:
            return
        panel = self.panel_for(widget)
        self.drag.hover(panel.widget_id if panel else None)
        self._mark_drag()

    def finish_drag(self) -> Optional[LayoutSurface]:
        surface = self.drag.drop()
        self._mark_drag()
        return surface

    def cancel_drag(self) -> None:
        self.drag.cancel()
        self._mark_drag()

    def _mark_drag(self) -> None:
        dragged = self.drag.dragged_id
        target = self.drag.drop_target_id
        for panel in self.panels():
            panel.set_class(panel.widget_id == dragged, "dragging")
            panel.set_class(panel.widget_id == target, "drop-target")
