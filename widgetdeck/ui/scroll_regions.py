"""
Textual side of wheel arbitration.

Scrollable widgets register themselves with the ScrollArbiter on mount and
unregister on unmount. The app reports which registered regions sit under the
pointer through HoverTracker, which turns successive pointer positions into
enter/leave calls.
"""

import itertools
from typing import Callable, Iterable, List, Optional

from textual.containers import VerticalScroll
from textual.widget import Widget
from textual.widgets import OptionList

from widgetdeck.layout.scroll import ScrollArbiter, get_scroll_arbiter

_anonymous_regions = itertools.count(1)


class TextualScrollHandle:
    """ScrollHandle over any Textual widget that scrolls vertically."""

    def __init__(self, widget: Widget) -> None:
        self._widget = widget

    @property
    def is_valid(self) -> bool:
        return self._widget.is_attached

    @property
    def scroll_offset(self) -> float:
        return self._widget.scroll_y

    @property
    def scrollable_extent(self) -> float:
        return self._widget.max_scroll_y

    def apply_offset(self, offset: float) -> None:
        self._widget.scroll_to(y=offset, animate=False)


class ArbitratedScrollMixin:
    """Registration plumbing shared by arbitrated scrollable widgets.

    Subclasses call ``register_scroll_region`` from ``on_mount`` and
    ``unregister_scroll_region`` from ``on_unmount``.
    """

    scroll_region_id: str
    _arbiter: Optional[ScrollArbiter]
    _unregister: Optional[Callable[[], None]]

    def register_scroll_region(self) -> None:
        arbiter = self._arbiter or get_scroll_arbiter()
        self._unregister = arbiter.register(self.scroll_region_id, TextualScrollHandle(self))  # type: ignore[arg-type]

    def unregister_scroll_region(self) -> None:
        if self._unregister is not None:
            self._unregister()
            self._unregister = None


class ArbitratedScroll(ArbitratedScrollMixin, VerticalScroll):
    """VerticalScroll whose wheel input is claimed by the arbiter when hovered."""

    def __init__(
        self,
        *children: Widget,
        region_id: Optional[str] = None,
        arbiter: Optional[ScrollArbiter] = None,
        name: Optional[str] = None,
        id: Optional[str] = None,
        classes: Optional[str] = None,
    ) -> None:
        super().__init__(*children, name=name, id=id, classes=classes)
        self.scroll_region_id = region_id or id or f"scroll-{next(_anonymous_regions)}"
        self._arbiter = arbiter
        self._unregister = None

    def on_mount(self) -> None:
        self.register_scroll_region()

    def on_unmount(self) -> None:
        self.unregister_scroll_region()


class ArbitratedOptionList(ArbitratedScrollMixin, OptionList):
    """OptionList that scrolls under the pointer even while the terminal is mounted."""

    def __init__(
        self,
        *content,
        region_id: str,
        arbiter: Optional[ScrollArbiter] = None,
        id: Optional[str] = None,
        classes: Optional[str] = None,
    ) -> None:
        super().__init__(*content, id=id, classes=classes)
        self.scroll_region_id = region_id
        self._arbiter = arbiter
        self._unregister = None

    def on_mount(self) -> None:
        self.register_scroll_region()

    def on_unmount(self) -> None:
        self.unregister_scroll_region()


def regions_under(widget: Optional[Widget], arbiter: ScrollArbiter) -> List[str]:
    """Registered region ids containing ``widget``, outermost first."""
    if widget is None:
        return []
    chain = []
    for node in widget.ancestors_with_self:
        region_id = getattr(node, "scroll_region_id", None)
        if region_id and arbiter.is_registered(region_id):
            chain.append(region_id)
    chain.reverse()
    return chain


class HoverTracker:
    """Turns "regions under the pointer" snapshots into enter/leave calls.

    Leaves are reported innermost first and enters outermost first, so the
    innermost hovered region is always the last one entered.

    A region that was re-registered while the pointer stayed over it has lost
    its arbiter hover state; it is entered again, along with every region
    nested inside it, so the stack order still matches the snapshot.
    """

    def __init__(self, arbiter: ScrollArbiter) -> None:
        self.arbiter = arbiter
        self._current: List[str] = []

    @property
    def current(self) -> List[str]:
        return list(self._current)

    def update(self, regions: Iterable[str]) -> None:
        regions = list(regions)
        for region_id in reversed(self._current):
            if region_id not in regions:
                self.arbiter.pointer_leave(region_id)
        reenter = False
        for region_id in regions:
            if reenter or region_id not in self._current or not self.arbiter.is_hovered(region_id):
                self.arbiter.pointer_enter(region_id)
                reenter = True
        self._current = regions

    def clear(self) -> None:
        self.update([])
