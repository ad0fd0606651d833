"""
Dashboard application: left rail, main column with terminal, right rail.

Wheel input is intercepted in ``on_event`` before Textual routes it. Each
wheel event first refreshes which scroll regions sit under the pointer, then
goes to the WheelChannel where the ScrollArbiter listens ahead of the
terminal. Events nobody consumes fall through to normal Textual handling.
"""

import logging
from typing import Dict, Optional

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.errors import NoWidget
from textual.widget import Widget
from textual.widgets import Footer

from widgetdeck.config.settings import get_wheel_step
from widgetdeck.layout.catalog import WidgetTypeCatalog
from widgetdeck.layout.defaults import LayoutScope
from widgetdeck.layout.models import ProjectContext
from widgetdeck.layout.scroll import ScrollArbiter, WheelChannel, WheelEvent, get_scroll_arbiter
from widgetdeck.layout.storage import KeyValueStore
from widgetdeck.layout.store import LayoutStore, open_layout_stores

from .dashboard import WidgetDashboard
from .scroll_regions import HoverTracker, regions_under
from .terminal_pane import TerminalPane

logger = logging.getLogger(__name__)

SCOPE_HEADINGS = {
    LayoutScope.LEFT_RAIL: "Projects",
    LayoutScope.MAIN: "Dashboard",
    LayoutScope.RIGHT_RAIL: "Context",
}


class DeckApp(App):
    """Three widget surfaces around an embedded terminal."""

    CSS = """
    #deck {
        height: 1fr;
    }

    #left-rail {
        width: 28;
    }

    #main-column {
        width: 1fr;
    }

    #right-rail {
        width: 36;
    }
    """

    BINDINGS = [
        Binding("e", "toggle_edit", "Edit"),
        Binding("a", "add_widget", "Add"),
        Binding("escape", "cancel_drag", "Cancel drag", show=False),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        project: Optional[ProjectContext] = None,
        catalog: Optional[WidgetTypeCatalog] = None,
        arbiter: Optional[ScrollArbiter] = None,
        wheel_step: Optional[int] = None,
        stores: Optional[Dict[LayoutScope, LayoutStore]] = None,
    ):
        super().__init__()
        self.project = project
        self.stores = stores or open_layout_stores(kv, catalog)
        self.arbiter = arbiter or get_scroll_arbiter()
        self.wheel_step = wheel_step or get_wheel_step()
        self.wheel_channel = WheelChannel()
        self.hover_tracker = HoverTracker(self.arbiter)
        self.dashboards: Dict[LayoutScope, WidgetDashboard] = {}
        self._uninstall_arbiter = None

    def compose(self) -> ComposeResult:
        for scope in LayoutScope:
            self.dashboards[scope] = WidgetDashboard(
                self.stores[scope],
                heading=SCOPE_HEADINGS[scope],
                project=self.project,
                arbiter=self.arbiter,
                id=f"{scope.value}-dashboard",
            )

        with Horizontal(id="deck"):
            with Vertical(id="left-rail"):
                yield self.dashboards[LayoutScope.LEFT_RAIL]
            with Vertical(id="main-column"):
                yield self.dashboards[LayoutScope.MAIN]
                yield TerminalPane(self.wheel_channel, id="terminal")
            with Vertical(id="right-rail"):
                yield self.dashboards[LayoutScope.RIGHT_RAIL]
        yield Footer()

    def on_mount(self) -> None:
        self._uninstall_arbiter = self.arbiter.install(self.wheel_channel)
        logger.info(f"Dashboard started (project={self.project.name if self.project else None})")

    def on_unmount(self) -> None:
        if self._uninstall_arbiter is not None:
            self._uninstall_arbiter()
            self._uninstall_arbiter = None
        self.hover_tracker.clear()

    # -------------------------------------------------------------------------
    # Pointer routing
    # -------------------------------------------------------------------------

    async def on_event(self, event: events.Event) -> None:
        if isinstance(event, (events.MouseScrollDown, events.MouseScrollUp)):
            widget = self.widget_under(event.screen_x, event.screen_y)
            self.hover_tracker.update(regions_under(widget, self.arbiter))
            delta = self.wheel_step if isinstance(event, events.MouseScrollDown) else -self.wheel_step
            if self.route_wheel(WheelEvent(delta, event.screen_x, event.screen_y)):
                return
        elif isinstance(event, events.MouseMove):
            widget = self.widget_under(event.screen_x, event.screen_y)
            self.hover_tracker.update(regions_under(widget, self.arbiter))
            for dashboard in self.dashboards.values():
                dashboard.drag_hover(widget)
        elif isinstance(event, events.MouseUp):
            for dashboard in self.dashboards.values():
                if dashboard.is_dragging:
                    dashboard.finish_drag()
        await super().on_event(event)

    def widget_under(self, x: int, y: int) -> Optional[Widget]:
        try:
            widget, _ = self.screen.get_widget_at(x, y)
        except NoWidget:
            return None
        return widget

    def route_wheel(self, event: WheelEvent) -> bool:
        """Offer ``event`` to the wheel listeners. True when one consumed it."""
        return self.wheel_channel.dispatch(event)

    def on_app_blur(self, event: events.AppBlur) -> None:
        self.hover_tracker.clear()
        self.action_cancel_drag()

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    @property
    def main_dashboard(self) -> WidgetDashboard:
        return self.dashboards[LayoutScope.MAIN]

    def action_toggle_edit(self) -> None:
        for dashboard in self.dashboards.values():
            dashboard.toggle_editing()

    def action_add_widget(self) -> None:
        self.main_dashboard.open_add_widget()

    def action_cancel_drag(self) -> None:
        for dashboard in self.dashboards.values():
            if dashboard.is_dragging:
                dashboard.cancel_drag()
