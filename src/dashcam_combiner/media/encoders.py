"""Encoder profiles for composite output with FFmpeg argument generation."""

from pydantic import BaseModel
from typing import List, Optional, Literal
from .context import MediaContext

SOFTWARE_CODEC = "libx264"


class EncoderProfile(BaseModel):
    """Encoder profile that generates FFmpeg arguments."""

    kind: Literal["software", "hardware"]
    codec: str = SOFTWARE_CODEC
    crf: Optional[int] = None
    preset: Optional[str] = None

    model_config = {"frozen": True}

    @staticmethod
    def software(crf: int = 23, preset: str = "veryfast") -> "EncoderProfile":
        """
        libx264 software encoder profile.

        Args:
            crf: Constant Rate Factor (lower = higher quality)
            preset: Encoding preset (ultrafast ... veryslow)

        Returns:
            Software encoder profile
        """
        return EncoderProfile(
            kind="software", codec=SOFTWARE_CODEC, crf=crf, preset=preset
        )

    @staticmethod
    def hardware(codec: str) -> "EncoderProfile":
        """
        Hardware encoder profile. The codec name is passed through unchanged.

        Args:
            codec: FFmpeg encoder name, e.g. "h264_nvenc"

        Returns:
            Hardware encoder profile
        """
        return EncoderProfile(kind="hardware", codec=codec)

    @staticmethod
    def detect(
        ctx: MediaContext,
        crf: int = 23,
        preset: str = "veryfast",
        allow_hardware: bool = True,
    ) -> "EncoderProfile":
        """
        Pick a hardware encoder if one works, otherwise fall back to libx264.

        Args:
            ctx: Media context used for detection
            crf: CRF for the software fallback
            preset: Preset for the software fallback
            allow_hardware: Skip detection entirely when False

        Returns:
            Encoder profile used for every encode in the run
        """
        if allow_hardware:
            codec = ctx.detect_hardware_encoder()
            if codec:
                return EncoderProfile.hardware(codec)

        ctx.logger.info(f"Using software encoder: {SOFTWARE_CODEC}")
        return EncoderProfile.software(crf=crf, preset=preset)

    def args(self, out_path: str) -> List[str]:
        """
        Generate FFmpeg arguments for this encoder profile.

        Args:
            out_path: Output file path

        Returns:
            List of FFmpeg arguments
        """
        if self.kind == "software":
            args = [
                "-c:v",
                self.codec,
                "-crf",
                str(self.crf if self.crf is not None else 23),
                "-preset",
                self.preset or "veryfast",
                "-pix_fmt",
                "yuv420p",
            ]

        elif self.kind == "hardware":
            args = ["-c:v", self.codec, "-pix_fmt", "yuv420p"]

        else:
            raise ValueError(f"Unknown encoder kind: {self.kind}")

        # Add output path
        args.append(out_path)

        return args
