"""Tests for layout planning."""

import pytest
from dashcam_combiner.core import (
    Angle,
    CombinerConfig,
    LayoutStrategy,
    StructuralGraphError,
)
from dashcam_combiner.media import grid_placements, plan_layout


def _positions(layout):
    return {p.angle: (p.x, p.y) for p in layout.placements}


class TestPlanLayout:
    """Test plan_layout strategy selection and placements."""

    def test_zero_angles(self):
        """Test that an empty angle set fails structurally."""
        with pytest.raises(StructuralGraphError):
            plan_layout([])

    def test_one_up(self):
        """Test a single angle filling the canvas."""
        layout = plan_layout([Angle.BACK])
        assert layout.strategy == LayoutStrategy.ONE_UP
        (placement,) = layout.placements
        assert placement.angle == Angle.BACK
        assert (placement.x, placement.y) == (0, 0)
        assert (placement.width, placement.height) == (1920, 1080)

    def test_side_by_side_alphabetical(self):
        """Test that two angles are placed in alphabetical order."""
        layout = plan_layout([Angle.FRONT, Angle.BACK])
        assert layout.strategy == LayoutStrategy.SIDE_BY_SIDE
        assert layout.angles == (Angle.BACK, Angle.FRONT)
        assert _positions(layout) == {Angle.BACK: (0, 270), Angle.FRONT: (960, 270)}
        assert all((p.width, p.height) == (960, 540) for p in layout.placements)

    def test_side_by_side_order_independent_of_input(self):
        """Test that input order does not change the plan."""
        a = plan_layout([Angle.RIGHT_REPEATER, Angle.LEFT_REPEATER])
        b = plan_layout([Angle.LEFT_REPEATER, Angle.RIGHT_REPEATER])
        assert a == b
        assert a.angles == (Angle.LEFT_REPEATER, Angle.RIGHT_REPEATER)

    def test_grid_three_angles(self):
        """Test that three angles use the grid with one empty slot."""
        layout = plan_layout([Angle.LEFT_REPEATER, Angle.FRONT, Angle.BACK])
        assert layout.strategy == LayoutStrategy.GRID
        assert layout.angles == (Angle.FRONT, Angle.BACK, Angle.LEFT_REPEATER)
        assert _positions(layout) == {
            Angle.FRONT: (0, 0),
            Angle.BACK: (960, 0),
            Angle.LEFT_REPEATER: (960, 540),
        }

    def test_grid_four_angles(self):
        """Test the full grid in table order."""
        layout = plan_layout(
            [Angle.RIGHT_REPEATER, Angle.LEFT_REPEATER, Angle.BACK, Angle.FRONT]
        )
        assert layout.strategy == LayoutStrategy.GRID
        assert layout.angles == (
            Angle.FRONT,
            Angle.BACK,
            Angle.RIGHT_REPEATER,
            Angle.LEFT_REPEATER,
        )
        assert _positions(layout) == {
            Angle.FRONT: (0, 0),
            Angle.BACK: (960, 0),
            Angle.RIGHT_REPEATER: (0, 540),
            Angle.LEFT_REPEATER: (960, 540),
        }

    def test_grid_drops_unknown(self):
        """Test that the grid has no slot for unknown angles."""
        layout = plan_layout([Angle.FRONT, Angle.BACK, Angle.UNKNOWN])
        assert layout.strategy == LayoutStrategy.GRID
        assert Angle.UNKNOWN not in layout.angles
        assert len(layout.placements) == 2

    def test_side_by_side_keeps_unknown(self):
        """Test that unknown angles still take part in side by side layouts."""
        layout = plan_layout([Angle.UNKNOWN, Angle.FRONT])
        assert layout.angles == (Angle.FRONT, Angle.UNKNOWN)

    def test_custom_canvas(self):
        """Test that canvas and tile sizes come from configuration."""
        config = CombinerConfig(
            canvas_width=1280, canvas_height=720, tile_width=640, tile_height=360
        )
        layout = plan_layout([Angle.FRONT, Angle.BACK], config)
        assert _positions(layout) == {Angle.BACK: (0, 180), Angle.FRONT: (640, 180)}
        assert (layout.canvas_width, layout.canvas_height) == (1280, 720)


class TestGridPlacements:
    """Test the fixed grid table."""

    def test_partial_grid(self):
        """Test that absent angles leave their slots empty."""
        placements = grid_placements([Angle.FRONT, Angle.LEFT_REPEATER], CombinerConfig())
        assert [(p.angle, p.x, p.y) for p in placements] == [
            (Angle.FRONT, 0, 0),
            (Angle.LEFT_REPEATER, 960, 540),
        ]
