"""Dashcam combiner - composite multi-angle dashcam clips and join them per session."""

from .__version__ import __version__
from .media import (
    MediaContext,
    EncoderProfile,
    Clip,
    TimestampGroup,
    LayoutPlan,
    FilterGraphPlan,
    Composition,
    ConcatPlan,
    default_context,
    set_default_context,
)
from .core import (
    Angle,
    LayoutStrategy,
    Operation,
    CombinerConfig,
    DashcamError,
)
from .pipeline import process_tree


__all__ = [
    "__version__",
    "MediaContext",
    "EncoderProfile",
    "Clip",
    "TimestampGroup",
    "LayoutPlan",
    "FilterGraphPlan",
    "Composition",
    "ConcatPlan",
    "default_context",
    "set_default_context",
    "Angle",
    "LayoutStrategy",
    "Operation",
    "CombinerConfig",
    "DashcamError",
    "process_tree",
]
