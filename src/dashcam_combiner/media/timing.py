"""Duration synchronization and trailing-window trimming."""

from typing import Sequence
from pydantic import BaseModel
from .clips import Clip
from ..core.errors import EmptyGroupError


def format_seconds(value: float) -> str:
    """Millisecond-precision seconds without trailing zeros ("15", "12.5")."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return text or "0"


class TrimWindow(BaseModel):
    """Slice of the composite to keep, in seconds."""

    start: float
    length: float

    model_config = {"frozen": True}

    def args(self) -> list[str]:
        """FFmpeg output options selecting this window."""
        return ["-ss", format_seconds(self.start), "-t", format_seconds(self.length)]


def common_duration(clips: Sequence[Clip], timestamp: str = "") -> float:
    """
    Shortest duration across a group's clips.

    Trimming every angle to this keeps all overlays aligned.

    Raises:
        EmptyGroupError: no clips to synchronize
    """
    if not clips:
        raise EmptyGroupError(timestamp)
    return min(clip.duration for clip in clips)


def trailing_window(duration: float, window: float = 30.0) -> TrimWindow:
    """
    Keep the last `window` seconds, or everything if the composite is shorter.

    Args:
        duration: Composite duration in seconds
        window: Length of the trailing window

    Returns:
        TrimWindow with start = max(0, duration - window) and
        length = min(window, duration)
    """
    return TrimWindow(start=max(0.0, duration - window), length=min(window, duration))
