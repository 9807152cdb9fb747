"""Runtime configuration for the dashcam combiner."""

import os
from typing import Tuple
from pydantic import BaseModel, Field


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class CombinerConfig(BaseModel):
    """Settings shared by planning, encoding and directory processing."""

    # External tools
    ffmpeg: str = "ffmpeg"
    ffprobe: str = "ffprobe"

    # Canvas and tiles
    canvas_width: int = 1920
    canvas_height: int = 1080
    tile_width: int = 960
    tile_height: int = 540
    fps: float = 30.0
    background_color: str = "black"

    # Trailing window kept from each composite
    window_seconds: float = Field(default=30.0, gt=0)

    # Files
    extensions: Tuple[str, ...] = (".mp4",)
    output_extension: str = ".mp4"
    work_dir_name: str = "combined_work"

    # Encoding
    hardware_encoding: bool = True
    crf: int = 23
    preset: str = "veryfast"

    # Timeouts (seconds)
    probe_timeout: float = 30.0
    encode_timeout: float = 3600.0

    # Directory-level parallelism
    jobs: int = Field(default=1, ge=1)

    model_config = {"frozen": True}

    @staticmethod
    def from_env() -> "CombinerConfig":
        """
        Build a configuration from DASHCAM_* environment variables.

        Unset variables keep their defaults.

        Returns:
            CombinerConfig instance
        """
        mapping = {
            "DASHCAM_FFMPEG": ("ffmpeg", str),
            "DASHCAM_FFPROBE": ("ffprobe", str),
            "DASHCAM_WINDOW_SECONDS": ("window_seconds", float),
            "DASHCAM_WORK_DIR": ("work_dir_name", str),
            "DASHCAM_JOBS": ("jobs", int),
            "DASHCAM_ENCODE_TIMEOUT": ("encode_timeout", float),
            "DASHCAM_PROBE_TIMEOUT": ("probe_timeout", float),
            "DASHCAM_HARDWARE_ENCODING": ("hardware_encoding", _env_bool),
            "DASHCAM_CRF": ("crf", int),
            "DASHCAM_PRESET": ("preset", str),
        }

        values = {}
        for env_name, (field_name, convert) in mapping.items():
            raw = os.getenv(env_name)
            if raw is not None and raw != "":
                values[field_name] = convert(raw)

        return CombinerConfig(**values)
