"""Session concatenation: join a directory's composites in timestamp order."""

import os
from typing import Iterable, List, Optional, Tuple
from pydantic import BaseModel
from .composition import CompositeOutput
from .context import MediaContext
from .encoders import EncoderProfile
from ..core.config import CombinerConfig


class SessionOutput(BaseModel):
    """Final concatenated file for a directory."""

    path: str
    timestamps: Tuple[str, ...]

    model_config = {"frozen": True}


class ConcatPlan(BaseModel):
    """Ordered composites to join into one video-only output."""

    inputs: Tuple[CompositeOutput, ...]
    output: str

    model_config = {"frozen": True}

    @property
    def timestamps(self) -> Tuple[str, ...]:
        return tuple(c.timestamp for c in self.inputs)

    def to_filter_complex(self) -> str:
        """Video-only concat over every input, e.g. "[0:v][1:v]concat=n=2:v=1:a=0"."""
        pads = "".join(f"[{i}:v]" for i in range(len(self.inputs)))
        return f"{pads}concat=n={len(self.inputs)}:v=1:a=0"

    def build_ffmpeg_argv(self, ffmpeg: str, encoder: EncoderProfile) -> List[str]:
        """Build complete FFmpeg argument list."""
        argv = [ffmpeg, "-y", "-hide_banner"]
        for composite in self.inputs:
            argv.extend(["-i", composite.path])
        argv.extend(["-filter_complex", self.to_filter_complex(), "-an"])
        argv.extend(encoder.args(self.output))
        return argv


def session_filename(earliest: str, extension: str = ".mp4") -> str:
    """Session output name, e.g. dashcam_2024-03-09_18-42-07_combined.mp4."""
    return f"dashcam_{earliest}_combined{extension}"


def plan_session(
    outputs: Iterable[CompositeOutput],
    directory: str,
    config: Optional[CombinerConfig] = None,
) -> Optional[ConcatPlan]:
    """
    Order a directory's composites by timestamp and name the session file.

    Args:
        outputs: Composites written for the directory, in any order
        directory: Directory receiving the session file
        config: Output extension

    Returns:
        ConcatPlan, or None when there is nothing to concatenate
    """
    config = config or CombinerConfig()
    ordered = sorted(outputs, key=lambda c: c.timestamp)
    if not ordered:
        return None

    output = os.path.join(
        directory, session_filename(ordered[0].timestamp, config.output_extension)
    )
    return ConcatPlan(inputs=tuple(ordered), output=output)


def concat_to_file(
    plan: ConcatPlan,
    encoder: EncoderProfile,
    ctx: MediaContext,
    timeout: Optional[float] = None,
) -> SessionOutput:
    """
    Encode the session file.

    Args:
        plan: Concatenation plan
        encoder: Encoder profile to use
        ctx: Media context for encoding
        timeout: Seconds before FFmpeg is killed

    Returns:
        SessionOutput for the written file

    Raises:
        EncodeError: FFmpeg failed or timed out
    """
    argv = plan.build_ffmpeg_argv(ctx.ffmpeg, encoder)
    ctx.logger.info(
        f"Concatenating {len(plan.inputs)} composite(s) into {plan.output}"
    )
    ctx.encode(argv, plan.output, timeout=timeout)
    return SessionOutput(path=plan.output, timestamps=plan.timestamps)
