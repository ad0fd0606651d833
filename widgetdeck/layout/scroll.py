"""
Wheel input arbitration.

The embedded terminal wants every wheel event for its scrollback. Dashboard
regions (panel bodies, rails, the add-widget list) need the events that
happen over them. Instead of racing listeners against each other, all wheel
input goes through one WheelChannel that calls listeners in priority order,
and the ScrollArbiter holds the single top-priority slot.

When a registered region is hovered, the arbiter consumes the event and moves
that region's scroll offset itself, clamped to ``[0, scrollable_extent]``.
When none is hovered, the event passes through to the terminal untouched.

Usage:
    channel = WheelChannel()
    channel.subscribe(terminal.on_wheel)           # ordinary priority
    arbiter = get_scroll_arbiter()
    arbiter.install(channel)                       # HIGHEST_PRIORITY

    unregister = arbiter.register("sidebar-list", handle)
    arbiter.pointer_enter("sidebar-list")
    channel.dispatch(WheelEvent(delta_y=40))       # sidebar scrolls, terminal sees nothing
    unregister()
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol, Tuple, Union

logger = logging.getLogger(__name__)

Number = Union[int, float]

DEFAULT_PRIORITY = 0
# Reserved for exactly one listener per channel
HIGHEST_PRIORITY = 1_000_000


@dataclass(frozen=True)
class WheelEvent:
    """Vertical wheel input; positive ``delta_y`` scrolls down."""

    delta_y: Number
    x: int = 0
    y: int = 0


WheelListener = Callable[[WheelEvent], bool]


class WheelChannel:
    """Single dispatcher for wheel input.

    Listeners run from highest to lowest priority, equal priorities in
    subscription order. A listener returns True to consume the event, which
    stops propagation to everything after it.
    """

    def __init__(self) -> None:
        self._listeners: List[Tuple[int, int, WheelListener]] = []
        self._counter = itertools.count()

    def subscribe(
        self, listener: WheelListener, priority: int = DEFAULT_PRIORITY
    ) -> Callable[[], None]:
        """Add ``listener``. Returns a disposer that removes it.

        Raises:
            ValueError: If HIGHEST_PRIORITY is requested while another
                listener already holds it
        """
        if priority >= HIGHEST_PRIORITY:
            if any(p >= HIGHEST_PRIORITY for p, _, _ in self._listeners):
                raise ValueError("The highest wheel priority is already taken")
            priority = HIGHEST_PRIORITY

        entry = (priority, next(self._counter), listener)
        self._listeners.append(entry)
        self._listeners.sort(key=lambda e: (-e[0], e[1]))

        def dispose() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return dispose

    def dispatch(self, event: WheelEvent) -> bool:
        """Deliver ``event``. Returns True if some listener consumed it."""
        for _, _, listener in list(self._listeners):
            if listener(event):
                return True
        return False

    def __len__(self) -> int:
        return len(self._listeners)


class ScrollHandle(Protocol):
    """What the arbiter needs from a scrollable container."""

    @property
    def is_valid(self) -> bool:
        """False once the underlying element is gone."""
        ...

    @property
    def scroll_offset(self) -> Number:
        ...

    @property
    def scrollable_extent(self) -> Number:
        """Largest valid offset (content size minus viewport size)."""
        ...

    def apply_offset(self, offset: Number) -> None:
        ...


@dataclass
class SimpleScrollHandle:
    """Plain-value scroll handle for headless use and tests."""

    offset: Number = 0
    extent: Number = 0
    valid: bool = True

    @property
    def is_valid(self) -> bool:
        return self.valid

    @property
    def scroll_offset(self) -> Number:
        return self.offset

    @property
    def scrollable_extent(self) -> Number:
        return self.extent

    def apply_offset(self, offset: Number) -> None:
        self.offset = offset


@dataclass
class ScrollRegistration:
    """A mounted scrollable region known to the arbiter."""

    region_id: str
    handle: ScrollHandle
    is_hovered: bool = False


def clamp_offset(current: Number, delta: Number, extent: Number) -> Number:
    """``current + delta`` limited to ``[0, extent]``."""
    return max(0, min(max(0, extent), current + delta))


class ScrollArbiter:
    """Routes wheel input to whichever registered region is hovered.

    Hover is a stack: entering a region pushes it, leaving removes it, and
    the most recently entered region still on the stack wins. Entering a
    nested region therefore takes precedence over its parent, and leaving it
    hands control back to the parent.
    """

    def __init__(self) -> None:
        self._regions: Dict[str, ScrollRegistration] = {}
        self._hover_stack: List[str] = []
        self._channel: Optional[WheelChannel] = None
        self._dispose_listener: Optional[Callable[[], None]] = None

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, region_id: str, handle: ScrollHandle) -> Callable[[], None]:
        """Register a scrollable region on mount.

        Returns:
            A disposer to call on unmount
        """
        if region_id in self._regions:
            logger.warning(f"Replacing scroll region registration: {region_id}")
            self._forget_hover(region_id)

        registration = ScrollRegistration(region_id, handle)
        self._regions[region_id] = registration

        def unregister() -> None:
            if self._regions.get(region_id) is registration:
                del self._regions[region_id]
                self._forget_hover(region_id)

        return unregister

    def is_registered(self, region_id: str) -> bool:
        return region_id in self._regions

    @property
    def region_ids(self) -> List[str]:
        return list(self._regions)

    # -------------------------------------------------------------------------
    # Hover tracking
    # -------------------------------------------------------------------------

    def pointer_enter(self, region_id: str) -> None:
        registration = self._regions.get(region_id)
        if registration is None:
            return
        if region_id in self._hover_stack:
            self._hover_stack.remove(region_id)
        self._hover_stack.append(region_id)
        registration.is_hovered = True

    def pointer_leave(self, region_id: str) -> None:
        self._forget_hover(region_id)

    def clear_hover(self) -> None:
        """Pointer left the application entirely."""
        for region_id in list(self._hover_stack):
            self._forget_hover(region_id)

    def is_hovered(self, region_id: str) -> bool:
        return region_id in self._hover_stack

    @property
    def hovered_region(self) -> Optional[str]:
        return self._hover_stack[-1] if self._hover_stack else None

    def _forget_hover(self, region_id: str) -> None:
        if region_id in self._hover_stack:
            self._hover_stack.remove(region_id)
        registration = self._regions.get(region_id)
        if registration is not None:
            registration.is_hovered = False

    # -------------------------------------------------------------------------
    # Interception
    # -------------------------------------------------------------------------

    def install(self, channel: WheelChannel) -> Callable[[], None]:
        """Take the top-priority slot on ``channel``.

        Installing again on the same channel is a no-op; installing on a
        different channel moves the listener there.
        """
        if self._channel is channel and self._dispose_listener is not None:
            return self._dispose_listener
        self.uninstall()

        dispose = channel.subscribe(self.handle_wheel, priority=HIGHEST_PRIORITY)
        self._channel = channel

        def uninstall() -> None:
            dispose()
            if self._channel is channel:
                self._channel = None
                self._dispose_listener = None

        self._dispose_listener = uninstall
        return uninstall

    def uninstall(self) -> None:
        if self._dispose_listener is not None:
            self._dispose_listener()

    @property
    def installed(self) -> bool:
        return self._channel is not None

    def handle_wheel(self, event: WheelEvent) -> bool:
        """Consume ``event`` if a region is hovered, scrolling that region.

        Returns:
            True when the event was claimed (nothing else may see it)
        """
        region_id = self.hovered_region
        if region_id is None:
            return False

        registration = self._regions.get(region_id)
        if registration is None:
            return False

        handle = registration.handle
        if not handle.is_valid:
            logger.debug(f"Scroll region {region_id} has a stale handle, ignoring wheel")
            return True

        current = handle.scroll_offset
        target = clamp_offset(current, event.delta_y, handle.scrollable_extent)
        if target != current:
            handle.apply_offset(target)
        return True


_arbiter: Optional[ScrollArbiter] = None


def get_scroll_arbiter() -> ScrollArbiter:
    """The process-wide arbiter, created on first use."""
    global _arbiter
    if _arbiter is None:
        _arbiter = ScrollArbiter()
    return _arbiter


def reset_scroll_arbiter() -> None:
    """Tear down the process-wide arbiter (app shutdown, tests)."""
    global _arbiter
    if _arbiter is not None:
        _arbiter.uninstall()
    _arbiter = None
