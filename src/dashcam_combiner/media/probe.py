"""Clip metadata probing with ffprobe."""

import json
import subprocess
from typing import Any, Dict, Optional
from pydantic import BaseModel
from .context import MediaContext
from ..core.errors import ProbeError


class ClipInfo(BaseModel):
    """Probed properties of the first video stream in a clip."""

    width: int
    height: int
    duration: float
    frame_count: int = 0

    model_config = {"frozen": True}


def _parse_rate(rate: Optional[str]) -> Optional[float]:
    """Parse an ffprobe rational like "30000/1001"."""
    if not rate:
        return None
    num, _, den = rate.partition("/")
    try:
        value = float(num) / float(den or 1)
    except (ValueError, ZeroDivisionError):
        return None
    return value if value > 0 else None


def _parse_probe_output(path: str, data: Dict[str, Any]) -> ClipInfo:
    """Turn ffprobe JSON into ClipInfo, raising ProbeError on missing fields."""
    streams = data.get("streams") or []
    if not streams:
        raise ProbeError(path, "no video stream")

    stream = streams[0]
    width = stream.get("width")
    height = stream.get("height")
    if not width or not height:
        raise ProbeError(path, "missing frame dimensions")

    # Try to get duration from stream first, then format
    duration = stream.get("duration")
    if not duration and "format" in data:
        duration = data["format"].get("duration")
    try:
        duration = float(duration)
    except (TypeError, ValueError):
        raise ProbeError(path, "missing duration")
    if duration <= 0:
        raise ProbeError(path, f"non-positive duration {duration}")

    frame_count = stream.get("nb_frames")
    try:
        frame_count = int(frame_count)
    except (TypeError, ValueError):
        rate = _parse_rate(stream.get("r_frame_rate"))
        frame_count = int(round(rate * duration)) if rate else 0

    return ClipInfo(
        width=int(width),
        height=int(height),
        duration=duration,
        frame_count=frame_count,
    )


def probe_clip(path: str, ctx: MediaContext, timeout: float = 30.0) -> ClipInfo:
    """
    Probe a clip's width, height, duration and frame count.

    Args:
        path: Clip file path
        ctx: Media context holding the ffprobe binary
        timeout: Seconds before ffprobe is abandoned

    Returns:
        ClipInfo for the first video stream

    Raises:
        ProbeError: ffprobe failed, timed out or returned incomplete data
    """
    cmd = [
        ctx.ffprobe,
        "-v",
        "error",
        "-select_streams",
        "v:0",
        "-print_format",
        "json",
        "-show_entries",
        "stream=width,height,duration,nb_frames,r_frame_rate:format=duration",
        path,
    ]

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired:
        raise ProbeError(path, f"ffprobe timed out after {timeout}s")
    except OSError as e:
        raise ProbeError(path, str(e))

    if result.returncode != 0:
        raise ProbeError(path, result.stderr.strip() or "ffprobe failed")

    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise ProbeError(path, f"unreadable ffprobe output: {e}")

    info = _parse_probe_output(path, data)
    ctx.logger.debug(
        f"Probed {path}: {info.width}x{info.height}, {info.duration:.2f}s, "
        f"{info.frame_count} frames"
    )
    return info
