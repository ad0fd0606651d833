"""
Add-widget flow.

Lists the catalog types a surface does not have yet and appends the one the
user picks. Picking a type that is already there is reported as
"already added" rather than treated as an error.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .catalog import WidgetTypeDescriptor
from .models import LayoutSurface
from .store import LayoutStore

logger = logging.getLogger(__name__)

REASON_ALREADY_ADDED = "already added"
REASON_UNKNOWN_TYPE = "unknown type"


@dataclass(frozen=True)
class AddWidgetOption:
    key: str
    descriptor: WidgetTypeDescriptor

    @property
    def requires_project_note(self) -> str:
        return "(requires project)" if self.descriptor.requires_project_context else ""


@dataclass(frozen=True)
class AddResult:
    added: bool
    surface: LayoutSurface
    reason: Optional[str] = None


class AddWidgetFlow:
    """Transient flow bound to one layout store."""

    def __init__(self, store: LayoutStore) -> None:
        self.store = store

    def options(self) -> List[AddWidgetOption]:
        """Types that can still be added, in catalog order."""
        catalog = self.store.catalog
        return [
            AddWidgetOption(key, catalog.descriptor_for(key))
            for key in self.store.available_types()
        ]

    @property
    def is_exhausted(self) -> bool:
        """True when every catalog type is already on the surface."""
        return not self.options()

    def select(self, widget_type: str) -> AddResult:
        if not self.store.catalog.has(widget_type):
            logger.info(f"Refusing to add unknown widget type '{widget_type}'")
            return AddResult(False, self.store.surface, REASON_UNKNOWN_TYPE)

        before = self.store.surface
        after = self.store.add(widget_type)
        if after is before:
            return AddResult(False, after, REASON_ALREADY_ADDED)
        return AddResult(True, after)
