"""
Drag-to-reorder state machine.

    Idle --begin_drag--> Dragging --drop--> Idle (store reordered)
                                  --cancel--> Idle

A DragSession exists only while Dragging. Pointer-over events overwrite the
drop target (last write wins), which also settles overlapping candidates:
whichever reported last is the target.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .models import LayoutSurface
from .store import LayoutStore

logger = logging.getLogger(__name__)


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass
class DragSession:
    """Ephemeral state of one drag gesture; never persisted."""

    dragged_id: str
    current_drop_target_id: Optional[str] = None


class DragReorderController:
    """Tracks one drag gesture at a time for a single layout store."""

    def __init__(self, store: LayoutStore) -> None:
        self.store = store
        self._session: Optional[DragSession] = None

    @property
    def state(self) -> DragState:
        return DragState.DRAGGING if self._session is not None else DragState.IDLE

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    @property
    def is_dragging(self) -> bool:
        return self._session is not None

    @property
    def dragged_id(self) -> Optional[str]:
        return self._session.dragged_id if self._session else None

    @property
    def drop_target_id(self) -> Optional[str]:
        return self._session.current_drop_target_id if self._session else None

    def begin_drag(self, widget_id: str) -> bool:
        """Start dragging ``widget_id``.

        Returns False, leaving the current state alone, when a drag is already
        in progress or the id is not on the surface.
        """
        if self._session is not None:
            logger.debug(f"Ignoring drag of {widget_id}: {self._session.dragged_id} is in flight")
            return False
        if self.store.surface.index_of(widget_id) < 0:
            logger.debug(f"Ignoring drag of unknown widget {widget_id}")
            return False

        self._session = DragSession(dragged_id=widget_id)
        return True

    def hover(self, target_id: Optional[str]) -> None:
        """Pointer is over ``target_id``; it becomes the drop target.

        Hovering the dragged widget itself, or nothing, clears the target.
        """
        if self._session is None:
            return
        if target_id == self._session.dragged_id:
            target_id = None
        self._session.current_drop_target_id = target_id

    def leave(self, target_id: str) -> None:
        """Pointer left ``target_id``; clears it only if it is still the target."""
        if self._session is not None and self._session.current_drop_target_id == target_id:
            self._session.current_drop_target_id = None

    def drop(self) -> Optional[LayoutSurface]:
        """Finish the gesture.

        Reorders the store when a target other than the dragged widget is
        set; otherwise behaves like cancel. Always ends Idle.

        Returns:
            The committed surface, or None when nothing was reordered
        """
        session = self._session
        self._session = None
        if session is None:
            return None

        target_id = session.current_drop_target_id
        if target_id is None or target_id == session.dragged_id:
            logger.debug(f"Drop of {session.dragged_id} without a target, cancelled")
            return None

        return self.store.reorder(session.dragged_id, target_id)

    def cancel(self) -> None:
        """Abandon the gesture without touching the store."""
        if self._session is not None:
            logger.debug(f"Drag of {self._session.dragged_id} cancelled")
        self._session = None
