"""
Layout scopes and their compiled-in seed lists.

Each scope is an independent surface with its own storage key. The seed list
is what a scope shows on first run, after a reset, and whenever its persisted
document is missing or unreadable.
"""

from enum import Enum
from typing import Dict, Tuple

from widgetdeck.config.constants import (
    LAYOUT_KEY_PREFIX,
    SCOPE_LEFT_RAIL,
    SCOPE_MAIN,
    SCOPE_RIGHT_RAIL,
)
from widgetdeck.exceptions import UnknownScopeError

from .catalog import WidgetTypeCatalog
from .models import LayoutSurface, WidgetInstance


class LayoutScope(str, Enum):
    """The three concurrently displayed surfaces."""

    MAIN = SCOPE_MAIN
    RIGHT_RAIL = SCOPE_RIGHT_RAIL
    LEFT_RAIL = SCOPE_LEFT_RAIL

    @property
    def storage_key(self) -> str:
        return f"{LAYOUT_KEY_PREFIX}{self.value}"

    @classmethod
    def parse(cls, value: str) -> "LayoutScope":
        """Parse a scope name ("main", "right-rail", "left-rail").

        Also accepts the full storage key ("layout:main").

        Raises:
            UnknownScopeError: If the name matches no scope
        """
        name = value.strip().lower()
        if name.startswith(LAYOUT_KEY_PREFIX):
            name = name[len(LAYOUT_KEY_PREFIX):]
        try:
            return cls(name)
        except ValueError:
            raise UnknownScopeError(
                f"Unknown layout scope '{value}'",
                scope=value,
                valid=[s.value for s in cls],
            ) from None


DEFAULT_SEEDS: Dict[LayoutScope, Tuple[str, ...]] = {
    LayoutScope.MAIN: ("system", "projectInfo", "github", "cloudflare", "ports", "sessions"),
    LayoutScope.RIGHT_RAIL: ("projectInfo", "github", "sessions"),
    LayoutScope.LEFT_RAIL: ("projects",),
}


def seed_surface(scope: LayoutScope, catalog: WidgetTypeCatalog) -> LayoutSurface:
    """Build the default surface for ``scope``.

    Seeded instances use their type key as id; ids only need to be unique
    within a surface and every seed type appears once.
    """
    widgets = [
        WidgetInstance(
            id=widget_type,
            type=widget_type,
            expanded=True,
            height_class=catalog.descriptor_for(widget_type).default_height_class,
        )
        for widget_type in DEFAULT_SEEDS[scope]
    ]
    return LayoutSurface(scope.storage_key, tuple(widgets))
