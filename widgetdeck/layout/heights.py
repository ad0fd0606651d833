"""
Height snapping for widget panels.

A widget occupies one of five discrete size classes. Four map to a fixed
pixel height; ``fill`` consumes whatever space the surface has left, shared
with any other fill widgets on the same surface.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from widgetdeck.config.constants import PIXELS_PER_ROW


class HeightClass(str, Enum):
    """Discrete height classes, in ascending order."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    FULL = "full"
    FILL = "fill"


# Declaration order is the size order; the cycle wraps fill -> small
HEIGHT_ORDER: tuple[HeightClass, ...] = tuple(HeightClass)


@dataclass(frozen=True)
class HeightSnap:
    """Resolved sizing instruction for a height class.

    Attributes:
        height_class: The class this snap belongs to
        label: Short button label shown in edit mode
        pixels: Fixed pixel height, or None for fill
    """

    height_class: HeightClass
    label: str
    pixels: Optional[int]

    @property
    def is_fill(self) -> bool:
        return self.pixels is None

    @property
    def rows(self) -> Optional[int]:
        """Terminal rows equivalent of the pixel height."""
        if self.pixels is None:
            return None
        return max(1, self.pixels // PIXELS_PER_ROW)

    def to_css(self) -> str:
        """Convert to a Textual CSS height value."""
        if self.is_fill:
            return "1fr"
        return str(self.rows)


HEIGHT_SNAPS: dict[HeightClass, HeightSnap] = {
    HeightClass.SMALL: HeightSnap(HeightClass.SMALL, "S", 150),
    HeightClass.MEDIUM: HeightSnap(HeightClass.MEDIUM, "M", 250),
    HeightClass.LARGE: HeightSnap(HeightClass.LARGE, "L", 400),
    HeightClass.FULL: HeightSnap(HeightClass.FULL, "F", 600),
    HeightClass.FILL: HeightSnap(HeightClass.FILL, "⇕", None),
}


def resolve(height_class: HeightClass) -> HeightSnap:
    """Look up the sizing instruction for a height class."""
    return HEIGHT_SNAPS[height_class]


def cycle_next(height_class: HeightClass) -> HeightClass:
    """Next larger class, wrapping from fill back to small."""
    index = HEIGHT_ORDER.index(height_class)
    return HEIGHT_ORDER[(index + 1) % len(HEIGHT_ORDER)]


def cycle_prev(height_class: HeightClass) -> HeightClass:
    """Next smaller class, wrapping from small to fill."""
    index = HEIGHT_ORDER.index(height_class)
    return HEIGHT_ORDER[(index - 1) % len(HEIGHT_ORDER)]


def cycle_to(height_class: HeightClass) -> HeightClass:
    """Snap directly to ``height_class`` (the snap buttons in edit mode)."""
    return HeightClass(height_class)


def parse_height_class(
    value: Union[str, HeightClass, None], default: HeightClass
) -> HeightClass:
    """Coerce a persisted value to a HeightClass.

    Unknown or missing values fall back to ``default`` instead of raising, so
    documents written by other builds still load.
    """
    if isinstance(value, HeightClass):
        return value
    if isinstance(value, str):
        try:
            return HeightClass(value.strip().lower())
        except ValueError:
            return default
    return default
