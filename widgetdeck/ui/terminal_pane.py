"""
Embedded terminal pane.

Stands in for a terminal emulator that listens for wheel input across the
whole window. It subscribes to the app's WheelChannel at normal priority and
consumes every event it sees, so only listeners above it (the ScrollArbiter)
can keep wheel input for the panels.
"""

from typing import Callable, Optional

from textual.widgets import RichLog

from widgetdeck.layout.scroll import DEFAULT_PRIORITY, WheelChannel, WheelEvent


class TerminalPane(RichLog):
    """Output log that claims window-wide wheel input."""

    DEFAULT_CSS = """
    TerminalPane {
        height: 12;
        border: round $panel;
        background: $surface-darken-1;
    }
    """

    def __init__(self, channel: WheelChannel, *, id: Optional[str] = None) -> None:
        super().__init__(id=id, wrap=True, markup=True)
        self.channel = channel
        self.wheel_events_seen = 0
        self._dispose: Optional[Callable[[], None]] = None

    def on_mount(self) -> None:
        self._dispose = self.channel.subscribe(self.handle_wheel, priority=DEFAULT_PRIORITY)
        self.write("[dim]terminal ready[/dim]")

    def on_unmount(self) -> None:
        if self._dispose is not None:
            self._dispose()
            self._dispose = None

    def handle_wheel(self, event: WheelEvent) -> bool:
        self.wheel_events_seen += 1
        self.scroll_relative(y=event.delta_y, animate=False)
        return True
