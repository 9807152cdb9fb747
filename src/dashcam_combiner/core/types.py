"""Core types and enums for the dashcam combiner."""

from enum import Enum
from typing import Optional, Callable

# Status callback type: receives status strings ("processing", "completed")
StatusCb = Optional[Callable[[str], None]]


class Angle(str, Enum):
    """Camera position a clip was recorded from."""

    FRONT = "front"
    BACK = "back"
    LEFT_REPEATER = "left_repeater"
    RIGHT_REPEATER = "right_repeater"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, name: str) -> "Angle":
        """Map a filename angle token to an Angle, UNKNOWN if not recognized."""
        try:
            angle = cls(name.lower())
        except ValueError:
            return cls.UNKNOWN
        return angle


class LayoutStrategy(str, Enum):
    """Spatial layout chosen from the number of angles in a group."""

    ONE_UP = "one_up"  # Single angle fills the canvas
    SIDE_BY_SIDE = "side_by_side"  # Two halves, vertically centered
    GRID = "grid"  # Fixed 2x2 table


class Operation(str, Enum):
    """Filter graph operations understood by the media engine."""

    TRIM = "trim"
    CROP = "crop"
    SCALE = "scale"
    OVERLAY = "overlay"
    COLOR = "color"
