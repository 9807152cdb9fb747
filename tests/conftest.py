"""Shared test fixtures and configuration."""

import os
import tempfile
from unittest.mock import patch

import pytest

from dashcam_combiner.core import Angle
from dashcam_combiner.media import Clip, MediaContext

TIMESTAMP = "2024-03-09_18-42-07"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield tmp_dir


@pytest.fixture
def media_context():
    """MediaContext whose FFmpeg verification is mocked out."""
    with patch("subprocess.run") as mock_run:
        mock_run.return_value.returncode = 0
        mock_run.return_value.stderr = ""
        ctx = MediaContext()
    return ctx


@pytest.fixture
def make_clip():
    """Factory for probed clips without touching the filesystem."""

    def _make(
        angle: Angle,
        duration: float = 60.0,
        width: int = 1280,
        height: int = 960,
        timestamp: str = TIMESTAMP,
    ) -> Clip:
        return Clip(
            path=f"/clips/{timestamp}-{angle.value}.mp4",
            timestamp=timestamp,
            angle=angle,
            width=width,
            height=height,
            duration=duration,
            frame_count=int(duration * 36),
        )

    return _make


@pytest.fixture
def clip_dir(temp_dir):
    """Directory holding empty clip files for two timestamps plus noise."""
    names = [
        "2024-03-09_18-43-07-front.mp4",
        "2024-03-09_18-43-07-back.mp4",
        "2024-03-09_18-42-07-front.mp4",
        "2024-03-09_18-42-07-back.mp4",
        "2024-03-09_18-42-07-left_repeater.mp4",
        "2024-03-09_18-42-07-right_repeater.mp4",
        "notes.txt",
        "event.json",
    ]
    for name in names:
        with open(os.path.join(temp_dir, name), "wb") as f:
            f.write(b"fake video data")
    return temp_dir
