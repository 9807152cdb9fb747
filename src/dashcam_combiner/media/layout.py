"""Layout planning: which angle goes where on the composite canvas."""

from typing import Iterable, Optional, Tuple
from pydantic import BaseModel
from ..core.config import CombinerConfig
from ..core.errors import StructuralGraphError
from ..core.types import Angle, LayoutStrategy

# Grid slots in tile units (column, row), in overlay order
GRID_SLOTS: Tuple[Tuple[Angle, int, int], ...] = (
    (Angle.FRONT, 0, 0),
    (Angle.BACK, 1, 0),
    (Angle.RIGHT_REPEATER, 0, 1),
    (Angle.LEFT_REPEATER, 1, 1),
)


class Placement(BaseModel):
    """Where a transformed angle is overlaid and the size it is scaled to."""

    angle: Angle
    x: int
    y: int
    width: int
    height: int

    model_config = {"frozen": True}


class LayoutPlan(BaseModel):
    """Layout strategy with placements in overlay order."""

    strategy: LayoutStrategy
    placements: Tuple[Placement, ...]
    canvas_width: int = 1920
    canvas_height: int = 1080

    model_config = {"frozen": True}

    @property
    def angles(self) -> Tuple[Angle, ...]:
        return tuple(p.angle for p in self.placements)


def grid_placements(
    angles: Iterable[Angle], config: CombinerConfig
) -> Tuple[Placement, ...]:
    """Fixed grid table restricted to the angles present, in table order."""
    present = set(angles)
    return tuple(
        Placement(
            angle=angle,
            x=col * config.tile_width,
            y=row * config.tile_height,
            width=config.tile_width,
            height=config.tile_height,
        )
        for angle, col, row in GRID_SLOTS
        if angle in present
    )


def plan_layout(
    angles: Iterable[Angle], config: Optional[CombinerConfig] = None
) -> LayoutPlan:
    """
    Choose a layout from the set of angles present in a group.

    1 angle fills the canvas, 2 angles sit side by side (alphabetical order,
    vertically centered), 3 or 4 angles use the fixed grid where unknown and
    absent angles leave their slot empty.

    Args:
        angles: Angles present in the group
        config: Canvas and tile dimensions

    Returns:
        LayoutPlan with placements in deterministic overlay order

    Raises:
        StructuralGraphError: no angles to lay out
    """
    config = config or CombinerConfig()
    angle_set = set(angles)
    canvas_w, canvas_h = config.canvas_width, config.canvas_height
    tile_w, tile_h = config.tile_width, config.tile_height

    if not angle_set:
        raise StructuralGraphError("Cannot plan a layout with zero angles")

    if len(angle_set) == 1:
        (angle,) = angle_set
        strategy = LayoutStrategy.ONE_UP
        placements = [Placement(angle=angle, x=0, y=0, width=canvas_w, height=canvas_h)]

    elif len(angle_set) == 2:
        strategy = LayoutStrategy.SIDE_BY_SIDE
        y = (canvas_h - tile_h) // 2
        placements = [
            Placement(angle=angle, x=i * tile_w, y=y, width=tile_w, height=tile_h)
            for i, angle in enumerate(sorted(angle_set, key=lambda a: a.value))
        ]

    else:
        strategy = LayoutStrategy.GRID
        placements = grid_placements(angle_set, config)

    return LayoutPlan(
        strategy=strategy,
        placements=tuple(placements),
        canvas_width=canvas_w,
        canvas_height=canvas_h,
    )
