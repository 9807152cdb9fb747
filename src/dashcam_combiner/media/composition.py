"""Per-timestamp composition: synchronize angles, lay them out, build the filter graph."""

from typing import Dict, List, Optional, Sequence, Tuple
from pydantic import BaseModel
from .clips import Clip
from .context import MediaContext, default_context
from .encoders import EncoderProfile
from .graph import FilterGraphPlan, GraphNode
from .layout import LayoutPlan, plan_layout
from .timing import TrimWindow, common_duration, format_seconds, trailing_window
from ..core.config import CombinerConfig
from ..core.errors import StructuralGraphError
from ..core.types import Angle, LayoutStrategy, Operation, StatusCb

BASE_LABEL = "base"


class CompositeOutput(BaseModel):
    """An encoded composite for one timestamp."""

    timestamp: str
    path: str

    model_config = {"frozen": True}


class CompositionPlan(BaseModel):
    """Everything needed to encode one timestamp group."""

    timestamp: str
    inputs: Tuple[str, ...]  # Clip paths in stream index order
    duration: float
    layout: LayoutPlan
    graph: FilterGraphPlan
    window: TrimWindow

    model_config = {"frozen": True}


def back_crop(width: int, height: int) -> Tuple[int, int, int, int]:
    """
    Crop box for the back camera: top half of the frame, source aspect ratio, centered.

    Args:
        width: Source width of this clip
        height: Source height of this clip

    Returns:
        (crop_width, crop_height, crop_x, crop_y)
    """
    crop_h = height // 2
    crop_w = crop_h * width // height
    crop_x = (width - crop_w) // 2
    return crop_w, crop_h, crop_x, 0


def _transform_chain(
    stream_index: int, clip: Clip, duration: float, width: int, height: int
) -> List[GraphNode]:
    """Trim, optionally crop, then scale one angle. The chain ends at the angle label."""
    angle = clip.angle.value
    nodes = [
        GraphNode(
            operation=Operation.TRIM,
            inputs=(stream_index,),
            output=f"{angle}_trim",
            params={"start": 0.0, "end": duration},
        )
    ]

    if clip.angle == Angle.BACK:
        crop_w, crop_h, crop_x, crop_y = back_crop(clip.width, clip.height)
        nodes.append(
            GraphNode(
                operation=Operation.CROP,
                inputs=(nodes[-1].output,),
                output=f"{angle}_crop",
                params={"width": crop_w, "height": crop_h, "x": crop_x, "y": crop_y},
            )
        )

    nodes.append(
        GraphNode(
            operation=Operation.SCALE,
            inputs=(nodes[-1].output,),
            output=angle,
            params={"width": width, "height": height},
        )
    )
    return nodes


def build_filter_graph(
    inputs: Dict[Angle, Tuple[int, Clip]],
    duration: float,
    layout: LayoutPlan,
    config: Optional[CombinerConfig] = None,
) -> FilterGraphPlan:
    """
    Build the trim -> transform -> overlay graph for one group.

    Only angles with a placement get a transform chain. Overlays are chained
    on a solid color canvas in layout order; the last overlay is the sink.

    Args:
        inputs: Angle -> (input stream index, probed clip)
        duration: Common duration every angle is trimmed to
        layout: Layout plan for the group
        config: Canvas frame rate and background color

    Returns:
        Validated FilterGraphPlan

    Raises:
        StructuralGraphError: no placements, or a placed angle has no input
    """
    config = config or CombinerConfig()

    if not layout.placements:
        raise StructuralGraphError("Layout has no placements; nothing to compose")

    nodes: List[GraphNode] = []

    # Transform chains, one per placed angle
    for placement in layout.placements:
        if placement.angle not in inputs:
            raise StructuralGraphError(
                f"Placement for {placement.angle.value} has no input stream"
            )
        stream_index, clip = inputs[placement.angle]
        nodes.extend(
            _transform_chain(
                stream_index, clip, duration, placement.width, placement.height
            )
        )

    # Composition chain on the base canvas
    nodes.append(
        GraphNode(
            operation=Operation.COLOR,
            output=BASE_LABEL,
            params={
                "color": config.background_color,
                "width": layout.canvas_width,
                "height": layout.canvas_height,
                "fps": config.fps,
                "duration": duration,
            },
        )
    )

    current = BASE_LABEL
    last = len(layout.placements) - 1
    for i, placement in enumerate(layout.placements):
        output = None if i == last else f"stack{i}"
        nodes.append(
            GraphNode(
                operation=Operation.OVERLAY,
                inputs=(current, placement.angle.value),
                output=output,
                params={"x": placement.x, "y": placement.y},
            )
        )
        current = output

    graph = FilterGraphPlan(input_count=len(inputs), nodes=tuple(nodes))
    return graph.validate_graph()


class Composition:
    """Composite of all angles recorded at one timestamp."""

    def __init__(
        self,
        timestamp: str,
        clips: Sequence[Clip],
        config: Optional[CombinerConfig] = None,
        ctx: Optional[MediaContext] = None,
    ):
        """
        Initialize composition.

        Args:
            timestamp: Shared recording timestamp
            clips: Successfully probed clips, one per angle
            config: Canvas, window and timeout settings
            ctx: Media context for encoding
        """
        self.timestamp = timestamp
        self.clips = list(clips)
        self.config = config or CombinerConfig()
        self.ctx = ctx or default_context()
        self._plan: Optional[CompositionPlan] = None

    def plan(self) -> CompositionPlan:
        """
        Plan the composite in two passes.

        The first pass assigns every clip an input stream index and collects
        durations. The second pass, once the common duration is known, builds
        the layout, the filter graph and the trailing trim window.

        Returns:
            CompositionPlan (cached after the first call)

        Raises:
            EmptyGroupError: no clips
            StructuralGraphError: duplicate angles or an invalid graph
        """
        if self._plan is not None:
            return self._plan

        # Pass 1: stream indices and durations
        inputs: Dict[Angle, Tuple[int, Clip]] = {}
        durations: List[float] = []
        for index, clip in enumerate(self.clips):
            if clip.angle in inputs:
                raise StructuralGraphError(
                    f"Duplicate {clip.angle.value} clip for {self.timestamp}"
                )
            inputs[clip.angle] = (index, clip)
            durations.append(clip.duration)

        # Pass 2: synchronize, lay out, build the graph
        duration = common_duration(self.clips, self.timestamp)
        layout = plan_layout(inputs.keys(), self.config)
        graph = build_filter_graph(inputs, duration, layout, self.config)
        window = trailing_window(duration, self.config.window_seconds)

        dropped = [a.value for a in inputs if a not in layout.angles]
        if dropped:
            self.ctx.logger.warning(
                f"{self.timestamp}: no {layout.strategy.value} slot for "
                f"{', '.join(dropped)}; leaving it out"
            )

        self.ctx.logger.info(
            f"🎬 {self.timestamp}: {len(self.clips)} angle(s), {layout.strategy.value}, "
            f"synced to {duration:.1f}s (durations "
            f"{', '.join(format_seconds(d) for d in durations)}), "
            f"keeping {window.length:.1f}s from {window.start:.1f}s"
        )

        self._plan = CompositionPlan(
            timestamp=self.timestamp,
            inputs=tuple(clip.path for clip in self.clips),
            duration=duration,
            layout=layout,
            graph=graph,
            window=window,
        )
        return self._plan

    @property
    def strategy(self) -> LayoutStrategy:
        return self.plan().layout.strategy

    def build_ffmpeg_argv(self, out_path: str, encoder: EncoderProfile) -> List[str]:
        """Build complete FFmpeg argument list."""
        plan = self.plan()

        argv = [self.ctx.ffmpeg, "-y", "-hide_banner"]  # Force overwrite existing files

        for path in plan.inputs:
            argv.extend(["-i", path])

        argv.extend(["-filter_complex", plan.graph.to_filter_complex()])

        # Trailing window as output options, video only
        argv.extend(plan.window.args())
        argv.append("-an")

        argv.extend(encoder.args(out_path))
        return argv

    def dry_run(self) -> str:
        """
        Generate FFmpeg command without executing.

        Returns:
            FFmpeg command string
        """
        argv = self.build_ffmpeg_argv("OUT.mp4", EncoderProfile.software())
        return " ".join(map(str, argv))

    def to_file(
        self,
        out_path: str,
        encoder: EncoderProfile,
        on_progress: StatusCb = None,
    ) -> CompositeOutput:
        """
        Encode the composite.

        Args:
            out_path: Output file path
            encoder: Encoder profile to use
            on_progress: Status callback

        Returns:
            CompositeOutput for the written file

        Raises:
            EncodeError: FFmpeg failed or timed out
        """
        argv = self.build_ffmpeg_argv(out_path, encoder)
        if on_progress:
            on_progress("processing")

        self.ctx.encode(argv, out_path, timeout=self.config.encode_timeout)

        if on_progress:
            on_progress("completed")
        return CompositeOutput(timestamp=self.timestamp, path=out_path)
