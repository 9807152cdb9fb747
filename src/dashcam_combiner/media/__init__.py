"""Media module for clip probing, composition planning and encoding."""

from .context import MediaContext, default_context, set_default_context
from .encoders import EncoderProfile
from .probe import ClipInfo, probe_clip
from .clips import (
    ClipFile,
    Clip,
    TimestampGroup,
    parse_clip_filename,
    find_clip_files,
    group_by_timestamp,
    probe_group,
)
from .timing import TrimWindow, common_duration, trailing_window
from .layout import Placement, LayoutPlan, grid_placements, plan_layout
from .graph import GraphNode, FilterGraphPlan
from .composition import (
    CompositeOutput,
    CompositionPlan,
    Composition,
    back_crop,
    build_filter_graph,
)
from .session import SessionOutput, ConcatPlan, plan_session, concat_to_file

__all__ = [
    "MediaContext",
    "default_context",
    "set_default_context",
    "EncoderProfile",
    "ClipInfo",
    "probe_clip",
    "ClipFile",
    "Clip",
    "TimestampGroup",
    "parse_clip_filename",
    "find_clip_files",
    "group_by_timestamp",
    "probe_group",
    "TrimWindow",
    "common_duration",
    "trailing_window",
    "Placement",
    "LayoutPlan",
    "grid_placements",
    "plan_layout",
    "GraphNode",
    "FilterGraphPlan",
    "CompositeOutput",
    "CompositionPlan",
    "Composition",
    "back_crop",
    "build_filter_graph",
    "SessionOutput",
    "ConcatPlan",
    "plan_session",
    "concat_to_file",
]
