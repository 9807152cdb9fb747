"""Media runtime context for FFmpeg discovery, encoder detection and invocation."""

import logging
import subprocess
from typing import List, Optional
from ..core.errors import EncodeError

# Hardware encoders in detection priority order
ENCODER_PRIORITY = [
    "h264_videotoolbox",  # macOS
    "h264_nvenc",  # NVIDIA
    "h264_qsv",  # Intel Quick Sync
    "h264_amf",  # AMD
]


class MediaContext:
    """Context for media operations with FFmpeg."""

    def __init__(
        self,
        ffmpeg: str = "ffmpeg",
        ffprobe: str = "ffprobe",
        logger: Optional[logging.Logger] = None,
        dry_run: bool = False,
    ):
        """
        Initialize media context.

        Args:
            ffmpeg: Path to ffmpeg binary
            ffprobe: Path to ffprobe binary
            logger: Logger instance for debugging
            dry_run: Log encode commands instead of running them
        """
        self.ffmpeg = ffmpeg
        self.ffprobe = ffprobe
        self.logger = logger or logging.getLogger(__name__)
        self.dry_run = dry_run

        self._encoder_detection_done = False
        self._detected_encoder: Optional[str] = None

        # Verify FFmpeg is available
        self._verify_ffmpeg()

    def _verify_ffmpeg(self) -> None:
        """Verify that FFmpeg binaries are available."""
        try:
            result = subprocess.run(
                [self.ffmpeg, "-version"], capture_output=True, text=True, timeout=10
            )
            if result.returncode != 0:
                raise RuntimeError(f"FFmpeg not working: {result.stderr}")

            result = subprocess.run(
                [self.ffprobe, "-version"], capture_output=True, text=True, timeout=10
            )
            if result.returncode != 0:
                raise RuntimeError(f"FFprobe not working: {result.stderr}")

            self.logger.debug("FFmpeg binaries verified successfully")

        except FileNotFoundError as e:
            raise RuntimeError(f"FFmpeg not found. Please install FFmpeg: {e}")
        except subprocess.TimeoutExpired:
            raise RuntimeError("FFmpeg verification timed out")

    def detect_hardware_encoder(self) -> Optional[str]:
        """
        Detect the best available hardware H.264 encoder.

        The result is cached on the context after the first call.

        Returns:
            Encoder name (e.g. "h264_nvenc") or None if only software is available
        """
        if self._encoder_detection_done:
            return self._detected_encoder

        self._encoder_detection_done = True

        try:
            result = subprocess.run(
                [self.ffmpeg, "-hide_banner", "-encoders"],
                capture_output=True,
                text=True,
                timeout=10,
            )
        except subprocess.TimeoutExpired:
            self.logger.warning("Timeout detecting hardware encoders")
            return None
        except OSError as e:
            self.logger.warning(f"Error detecting hardware encoders: {e}")
            return None

        if result.returncode != 0:
            self.logger.warning("Could not query FFmpeg encoders")
            return None

        for encoder in ENCODER_PRIORITY:
            if encoder not in result.stdout:
                continue
            if self._test_encoder(encoder):
                self._detected_encoder = encoder
                self.logger.info(f"Hardware encoder detected: {encoder}")
                return encoder
            self.logger.debug(f"Encoder {encoder} listed but failed test, skipping")

        self.logger.info("No hardware encoder available")
        return None

    def _test_encoder(self, encoder: str) -> bool:
        """Encode a single tiny frame to check the encoder really works."""
        cmd = [
            self.ffmpeg,
            "-hide_banner",
            "-f",
            "lavfi",
            "-i",
            "color=black:s=64x64:d=0.04",
            "-c:v",
            encoder,
            "-f",
            "null",
            "-",
        ]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=10)
        except (subprocess.TimeoutExpired, OSError):
            return False
        return result.returncode == 0

    def encode(self, argv: List[str], output: str, timeout: Optional[float] = None):
        """
        Run an FFmpeg command and wait for it to finish.

        Args:
            argv: Complete FFmpeg argument vector
            output: Output path, used for error reporting
            timeout: Seconds before the process is killed

        Raises:
            EncodeError: FFmpeg exited non-zero or timed out
        """
        command = " ".join(map(str, argv))
        if self.dry_run:
            self.logger.info(f"[dry-run] {command}")
            return

        self.logger.debug(f"Running FFmpeg: {command}")

        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                stdin=subprocess.DEVNULL,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            stderr = e.stderr.decode(errors="replace") if isinstance(e.stderr, bytes) else e.stderr
            raise EncodeError(output, None, stderr) from e
        except OSError as e:
            raise EncodeError(output, None, reason=f"could not start FFmpeg: {e}") from e

        if result.returncode != 0:
            raise EncodeError(output, result.returncode, result.stderr)

        self.logger.debug(f"FFmpeg completed successfully: {output}")


# Global default context
_DEFAULT_CTX: Optional[MediaContext] = None


def default_context() -> MediaContext:
    """
    Get the default media context.

    Returns:
        Default MediaContext instance
    """
    global _DEFAULT_CTX
    if _DEFAULT_CTX is None:
        _DEFAULT_CTX = MediaContext()
    return _DEFAULT_CTX


def set_default_context(ctx: MediaContext) -> None:
    """
    Set the default media context.

    Args:
        ctx: MediaContext to use as default
    """
    global _DEFAULT_CTX
    _DEFAULT_CTX = ctx
