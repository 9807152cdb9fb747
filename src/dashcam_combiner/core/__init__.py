"""Core module for the dashcam combiner."""

from .types import (
    StatusCb,
    Angle,
    LayoutStrategy,
    Operation,
)
from .errors import (
    DashcamError,
    ProbeError,
    EmptyGroupError,
    StructuralGraphError,
    EncodeError,
    UnknownAngleWarning,
    DuplicateAngleWarning,
)
from .config import CombinerConfig

__all__ = [
    "StatusCb",
    "Angle",
    "LayoutStrategy",
    "Operation",
    "DashcamError",
    "ProbeError",
    "EmptyGroupError",
    "StructuralGraphError",
    "EncodeError",
    "UnknownAngleWarning",
    "DuplicateAngleWarning",
    "CombinerConfig",
]
