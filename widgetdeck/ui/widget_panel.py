"""
Panel chrome around one widget instance.

The panel never changes layout state itself. Header buttons post messages
that the owning WidgetDashboard turns into LayoutStore calls.
"""

import re
from typing import Optional

from textual import events
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Static

from widgetdeck.layout.catalog import WidgetTypeCatalog, widget_catalog
from widgetdeck.layout.heights import HEIGHT_ORDER, HeightClass, resolve
from widgetdeck.layout.models import ProjectContext, WidgetInstance
from widgetdeck.layout.scroll import ScrollArbiter

from .content import render_widget_content
from .scroll_regions import ArbitratedScroll

_CSS_ID_UNSAFE = re.compile(r"[^A-Za-z0-9_-]")


def panel_css_id(scope_key: str, widget_id: str) -> str:
    """Textual-safe DOM id for a widget instance on a given surface."""
    return "w-" + _CSS_ID_UNSAFE.sub("_", f"{scope_key}-{widget_id}")


class WidgetPanel(Vertical):
    """Header plus (when expanded) a scrollable body for one widget."""

    DEFAULT_CSS = """
    WidgetPanel {
        height: auto;
        border: round $panel;
        margin-bottom: 1;
    }

    WidgetPanel.fill {
        height: 1fr;
    }

    WidgetPanel.dragging {
        opacity: 50%;
    }

    WidgetPanel.drop-target {
        border: round $accent;
    }

    WidgetPanel .widget-header {
        height: 1;
    }

    WidgetPanel .widget-title {
        width: 1fr;
    }

    WidgetPanel .widget-header Button {
        min-width: 3;
        width: auto;
        height: 1;
        border: none;
        padding: 0 1;
        margin: 0;
    }

    WidgetPanel .widget-header Button.active-height {
        background: $accent;
    }

    WidgetPanel .widget-content {
        padding: 0 1;
    }
    """

    class RemoveRequested(Message):
        def __init__(self, widget_id: str) -> None:
            super().__init__()
            self.widget_id = widget_id

    class HeightChangeRequested(Message):
        def __init__(self, widget_id: str, height_class: HeightClass) -> None:
            super().__init__()
            self.widget_id = widget_id
            self.height_class = height_class

    class ExpandToggled(Message):
        def __init__(self, widget_id: str) -> None:
            super().__init__()
            self.widget_id = widget_id

    class DragStarted(Message):
        def __init__(self, widget_id: str) -> None:
            super().__init__()
            self.widget_id = widget_id

    def __init__(
        self,
        widget: WidgetInstance,
        *,
        scope_key: str,
        editing: bool = False,
        project: Optional[ProjectContext] = None,
        catalog: Optional[WidgetTypeCatalog] = None,
        arbiter: Optional[ScrollArbiter] = None,
    ) -> None:
        self.widget = widget
        self.scope_key = scope_key
        self.editing = editing
        self.project = project
        self.catalog = catalog or widget_catalog
        self.arbiter = arbiter
        self.snap = resolve(widget.height_class)

        classes = "fill" if self.snap.is_fill and widget.expanded else None
        super().__init__(id=panel_css_id(scope_key, widget.id), classes=classes)

    @property
    def widget_id(self) -> str:
        return self.widget.id

    def compose(self) -> ComposeResult:
        descriptor = self.catalog.descriptor_for(self.widget.type)
        title = f"[{descriptor.accent_color}]{descriptor.icon}[/] {self.widget.display_title(self.catalog)}"

        with Horizontal(classes="widget-header"):
            yield Static(title, classes="widget-title")
            if self.editing:
                for height_class in HEIGHT_ORDER:
                    button = Button(resolve(height_class).label, name=f"height:{height_class.value}")
                    if height_class == self.widget.height_class:
                        button.add_class("active-height")
                    yield button
                yield Button("✕", name="remove", variant="error")
            else:
                yield Button("▾" if self.widget.expanded else "▸", name="toggle")

        if self.widget.expanded:
            body = ArbitratedScroll(
                Static(render_widget_content(self.widget, self.project, self.catalog)),
                region_id=f"{self.scope_key}:{self.widget.id}",
                arbiter=self.arbiter,
                classes="widget-content",
            )
            body.styles.height = self.snap.to_css() if self.snap.is_fill else self.snap.rows
            yield body

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        name = event.button.name or ""
        if name == "remove":
            self.post_message(self.RemoveRequested(self.widget_id))
        elif name == "toggle":
            self.post_message(self.ExpandToggled(self.widget_id))
        elif name.startswith("height:"):
            self.post_message(
                self.HeightChangeRequested(self.widget_id, HeightClass(name.split(":", 1)[1]))
            )

    def on_mouse_down(self, event: events.MouseDown) -> None:
        # Grabbing the title starts a drag; buttons handle their own clicks
        if not self.editing or event.button != 1:
            return
        if isinstance(event.widget, Static) and event.widget.has_class("widget-title"):
            self.post_message(self.DragStarted(self.widget_id))
