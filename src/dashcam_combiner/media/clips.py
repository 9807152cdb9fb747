"""Dashcam clip discovery, filename parsing and timestamp grouping."""

import os
import re
import warnings
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from pydantic import BaseModel
from .context import MediaContext
from .probe import ClipInfo, probe_clip
from ..core.errors import DuplicateAngleWarning, ProbeError, UnknownAngleWarning
from ..core.types import Angle

# 2024-03-09_18-42-07-left_repeater.mp4
CLIP_NAME_RE = re.compile(
    r"^(?P<timestamp>\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2})"
    r"-(?P<angle>[A-Za-z0-9_]+)"
    r"(?P<ext>\.[A-Za-z0-9]+)$"
)


class ClipFile(BaseModel):
    """A discovered clip file with the timestamp and angle from its name."""

    path: str
    timestamp: str
    angle: Angle
    angle_name: str

    model_config = {"frozen": True}

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)


class Clip(BaseModel):
    """A clip paired with its probed metadata."""

    path: str
    timestamp: str
    angle: Angle
    width: int
    height: int
    duration: float
    frame_count: int = 0

    model_config = {"frozen": True}

    @staticmethod
    def from_probe(file: ClipFile, info: ClipInfo) -> "Clip":
        """Pair a discovered file with its probe result."""
        return Clip(
            path=file.path,
            timestamp=file.timestamp,
            angle=file.angle,
            width=info.width,
            height=info.height,
            duration=info.duration,
            frame_count=info.frame_count,
        )


class TimestampGroup(BaseModel):
    """All clip files sharing one recording timestamp, at most one per angle."""

    timestamp: str
    files: Tuple[ClipFile, ...]

    model_config = {"frozen": True}

    @property
    def angles(self) -> List[Angle]:
        return [f.angle for f in self.files]


def parse_clip_filename(
    path: str, extensions: Sequence[str] = (".mp4",)
) -> Optional[ClipFile]:
    """
    Parse a clip path following the YYYY-MM-DD_HH-MM-SS-<angle>.<ext> convention.

    Names with a valid timestamp but an unrecognized angle are kept as
    Angle.UNKNOWN and raise an UnknownAngleWarning.

    Args:
        path: Clip file path
        extensions: Accepted extensions, compared case-insensitively

    Returns:
        ClipFile, or None if the name does not follow the convention
    """
    match = CLIP_NAME_RE.match(os.path.basename(path))
    if not match:
        return None

    allowed = {ext.lower() for ext in extensions}
    if match.group("ext").lower() not in allowed:
        return None

    angle_name = match.group("angle")
    angle = Angle.parse(angle_name)
    if angle == Angle.UNKNOWN:
        warnings.warn(
            f"Unknown camera angle '{angle_name}' in {path}; treating as unknown",
            UnknownAngleWarning,
            stacklevel=2,
        )

    return ClipFile(
        path=path,
        timestamp=match.group("timestamp"),
        angle=angle,
        angle_name=angle_name,
    )


def find_clip_files(
    directory: str, extensions: Sequence[str] = (".mp4",)
) -> List[ClipFile]:
    """List clip files directly inside a directory (not recursive)."""
    files = []
    for entry in sorted(os.listdir(directory)):
        path = os.path.join(directory, entry)
        if not os.path.isfile(path):
            continue
        clip_file = parse_clip_filename(path, extensions)
        if clip_file is not None:
            files.append(clip_file)
    return files


def group_by_timestamp(files: Iterable[ClipFile]) -> List[TimestampGroup]:
    """
    Partition clip files into groups sharing a timestamp.

    Groups are sorted ascending by timestamp string. Within a group files are
    ordered by filename; when two files claim the same angle the first one is
    kept and a DuplicateAngleWarning is raised.

    Args:
        files: Discovered clip files

    Returns:
        One TimestampGroup per distinct timestamp
    """
    by_timestamp: Dict[str, List[ClipFile]] = {}
    for clip_file in files:
        by_timestamp.setdefault(clip_file.timestamp, []).append(clip_file)

    groups = []
    for timestamp in sorted(by_timestamp):
        kept: Dict[Angle, ClipFile] = {}
        for clip_file in sorted(by_timestamp[timestamp], key=lambda f: f.filename):
            if clip_file.angle in kept:
                warnings.warn(
                    f"Duplicate {clip_file.angle.value} clip for {timestamp}: "
                    f"ignoring {clip_file.path}, keeping {kept[clip_file.angle].path}",
                    DuplicateAngleWarning,
                    stacklevel=2,
                )
                continue
            kept[clip_file.angle] = clip_file
        groups.append(TimestampGroup(timestamp=timestamp, files=tuple(kept.values())))

    return groups


def probe_group(
    group: TimestampGroup, ctx: MediaContext, timeout: float = 30.0
) -> List[Clip]:
    """
    Probe every file in a group, dropping the ones that fail.

    Args:
        group: Timestamp group to probe
        ctx: Media context holding the ffprobe binary
        timeout: Per-clip probe timeout in seconds

    Returns:
        Probed clips in group order (possibly empty)
    """
    clips = []
    for clip_file in group.files:
        try:
            info = probe_clip(clip_file.path, ctx, timeout=timeout)
        except ProbeError as e:
            ctx.logger.warning(
                f"Skipping {clip_file.path} ({group.timestamp}): {e.reason}"
            )
            continue
        clips.append(Clip.from_probe(clip_file, info))
    return clips
