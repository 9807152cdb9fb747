"""Tests for media context, encoder profiles and clip probing."""

import json
import subprocess
from unittest.mock import Mock, patch
import pytest
from dashcam_combiner.core import Angle, EncodeError, ProbeError
from dashcam_combiner.media import (
    EncoderProfile,
    MediaContext,
    TimestampGroup,
    parse_clip_filename,
    probe_clip,
    probe_group,
)


def _probe_result(stream=None, fmt=None, returncode=0, stderr=""):
    data = {"streams": [stream] if stream else []}
    if fmt:
        data["format"] = fmt
    return Mock(returncode=returncode, stdout=json.dumps(data), stderr=stderr)


class TestEncoderProfile:
    """Test EncoderProfile class."""

    def test_software_default(self):
        """Test libx264 profile with defaults."""
        encoder = EncoderProfile.software()
        assert encoder.kind == "software"
        assert encoder.codec == "libx264"
        assert encoder.crf == 23
        assert encoder.preset == "veryfast"

    def test_args_software(self):
        """Test software FFmpeg args generation."""
        encoder = EncoderProfile.software(crf=20, preset="fast")
        assert encoder.args("output.mp4") == [
            "-c:v",
            "libx264",
            "-crf",
            "20",
            "-preset",
            "fast",
            "-pix_fmt",
            "yuv420p",
            "output.mp4",
        ]

    def test_args_lossless_crf(self):
        """Test that CRF 0 is passed through rather than replaced by the default."""
        args = EncoderProfile.software(crf=0).args("output.mp4")
        assert args[args.index("-crf") + 1] == "0"

    def test_args_hardware(self):
        """Test that hardware codecs are passed through unchanged."""
        encoder = EncoderProfile.hardware("h264_videotoolbox")
        assert encoder.args("output.mp4") == [
            "-c:v",
            "h264_videotoolbox",
            "-pix_fmt",
            "yuv420p",
            "output.mp4",
        ]

    def test_detect_hardware(self, media_context):
        """Test detection picks the hardware encoder when one works."""
        with patch.object(media_context, "detect_hardware_encoder", return_value="h264_nvenc"):
            encoder = EncoderProfile.detect(media_context)
        assert encoder.kind == "hardware"
        assert encoder.codec == "h264_nvenc"

    def test_detect_fallback(self, media_context):
        """Test software fallback when no hardware encoder is available."""
        with patch.object(media_context, "detect_hardware_encoder", return_value=None):
            encoder = EncoderProfile.detect(media_context, crf=19)
        assert encoder.kind == "software"
        assert encoder.crf == 19

    def test_detect_disabled(self, media_context):
        """Test that detection is skipped when hardware is not allowed."""
        with patch.object(media_context, "detect_hardware_encoder") as mock_detect:
            encoder = EncoderProfile.detect(media_context, allow_hardware=False)
        mock_detect.assert_not_called()
        assert encoder.codec == "libx264"


class TestMediaContext:
    """Test MediaContext class."""

    def test_init_default(self):
        """Test default initialization."""
        with patch("subprocess.run") as mock_run:
            mock_run.return_value.returncode = 0
            mock_run.return_value.stderr = ""

            ctx = MediaContext()
            assert ctx.ffmpeg == "ffmpeg"
            assert ctx.ffprobe == "ffprobe"
            assert ctx.dry_run is False
            assert mock_run.call_count == 2

    def test_ffmpeg_missing(self):
        """Test that a missing binary is reported clearly."""
        with patch("subprocess.run", side_effect=FileNotFoundError("ffmpeg")):
            with pytest.raises(RuntimeError, match="FFmpeg not found"):
                MediaContext()

    def test_ffprobe_broken(self):
        """Test that a failing ffprobe is reported."""
        with patch("subprocess.run") as mock_run:
            mock_run.side_effect = [
                Mock(returncode=0, stderr=""),  # ffmpeg version
                Mock(returncode=1, stderr="bad"),  # ffprobe version
            ]
            with pytest.raises(RuntimeError, match="FFprobe not working"):
                MediaContext()

    def test_detect_hardware_encoder(self, media_context):
        """Test detection walks the priority list and tests candidates."""
        with patch("subprocess.run") as mock_run:
            mock_run.side_effect = [
                Mock(returncode=0, stdout=" V..... h264_nvenc\n V..... h264_qsv\n"),
                Mock(returncode=1),  # h264_nvenc test encode fails
                Mock(returncode=0),  # h264_qsv works
            ]
            assert media_context.detect_hardware_encoder() == "h264_qsv"
            # Cached: no more subprocess calls
            assert media_context.detect_hardware_encoder() == "h264_qsv"
            assert mock_run.call_count == 3

    def test_detect_no_hardware(self, media_context):
        """Test detection with only software encoders listed."""
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=0, stdout=" V..... libx264\n")
            assert media_context.detect_hardware_encoder() is None

    def test_detect_timeout(self, media_context):
        """Test that a hanging encoder query falls back to software."""
        with patch(
            "subprocess.run", side_effect=subprocess.TimeoutExpired("ffmpeg", 10)
        ):
            assert media_context.detect_hardware_encoder() is None

    def test_encode_timeout(self, media_context):
        """Test that an encode timeout becomes an EncodeError."""
        with patch(
            "subprocess.run", side_effect=subprocess.TimeoutExpired("ffmpeg", 5)
        ):
            with pytest.raises(EncodeError) as exc_info:
                media_context.encode(["ffmpeg"], "/out/a.mp4", timeout=5)
        assert exc_info.value.returncode is None
        assert "timed out" in str(exc_info.value)

    def test_encode_launch_error(self, media_context):
        """Test that an OSError starting FFmpeg becomes an EncodeError."""
        with patch("subprocess.run", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(EncodeError) as exc_info:
                media_context.encode(["ffmpeg"], "/out/a.mp4")
        assert exc_info.value.returncode is None
        assert "could not start FFmpeg" in str(exc_info.value)
        assert "timed out" not in str(exc_info.value)

    def test_encode_failure_carries_stderr(self, media_context):
        """Test that the error message ends with the last lines of FFmpeg output."""
        stderr = "line one\nline two\n\nline three\nError opening output file\n"
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=1, stderr=stderr)
            with pytest.raises(EncodeError) as exc_info:
                media_context.encode(["ffmpeg"], "/out/a.mp4")
        assert str(exc_info.value) == (
            "FFmpeg failed for /out/a.mp4: exit status 1: "
            "line two | line three | Error opening output file"
        )
        assert exc_info.value.stderr == stderr

    def test_encode_dry_run(self, media_context):
        """Test that dry run mode does not execute FFmpeg."""
        media_context.dry_run = True
        with patch("subprocess.run") as mock_run:
            media_context.encode(["ffmpeg", "-i", "a.mp4"], "/out/a.mp4")
        mock_run.assert_not_called()


class TestProbeClip:
    """Test probe_clip."""

    def test_success(self, media_context):
        """Test parsing a complete ffprobe response."""
        stream = {"width": 1280, "height": 960, "duration": "60.033", "nb_frames": "2161"}
        with patch("subprocess.run", return_value=_probe_result(stream)):
            info = probe_clip("/clips/a.mp4", media_context)

        assert (info.width, info.height) == (1280, 960)
        assert info.duration == pytest.approx(60.033)
        assert info.frame_count == 2161

    def test_format_duration_and_rate_fallback(self, media_context):
        """Test duration from the container and frame count from the frame rate."""
        stream = {"width": 1920, "height": 1080, "r_frame_rate": "30/1"}
        with patch(
            "subprocess.run",
            return_value=_probe_result(stream, fmt={"duration": "10.0"}),
        ):
            info = probe_clip("/clips/a.mp4", media_context)

        assert info.duration == 10.0
        assert info.frame_count == 300

    def test_ffprobe_failure(self, media_context):
        """Test that an unreadable clip raises ProbeError."""
        with patch(
            "subprocess.run",
            return_value=_probe_result(returncode=1, stderr="moov atom not found"),
        ):
            with pytest.raises(ProbeError, match="moov atom not found"):
                probe_clip("/clips/a.mp4", media_context)

    def test_no_video_stream(self, media_context):
        """Test a file without video."""
        with patch("subprocess.run", return_value=_probe_result()):
            with pytest.raises(ProbeError, match="no video stream"):
                probe_clip("/clips/a.mp4", media_context)

    def test_missing_duration(self, media_context):
        """Test that a clip without duration is unusable."""
        with patch(
            "subprocess.run",
            return_value=_probe_result({"width": 1280, "height": 960}),
        ):
            with pytest.raises(ProbeError, match="missing duration"):
                probe_clip("/clips/a.mp4", media_context)

    def test_timeout(self, media_context):
        """Test that a probe timeout is a probe failure."""
        with patch(
            "subprocess.run", side_effect=subprocess.TimeoutExpired("ffprobe", 1)
        ):
            with pytest.raises(ProbeError, match="timed out"):
                probe_clip("/clips/a.mp4", media_context, timeout=1)


class TestProbeGroup:
    """Test probe_group."""

    def test_failed_clips_excluded(self, media_context):
        """Test that failing clips are dropped and the rest kept."""
        files = (
            parse_clip_filename("/clips/2024-03-09_18-42-07-back.mp4"),
            parse_clip_filename("/clips/2024-03-09_18-42-07-front.mp4"),
        )
        group = TimestampGroup(timestamp="2024-03-09_18-42-07", files=files)
        good = {"width": 1280, "height": 960, "duration": "59.9"}

        with patch("subprocess.run") as mock_run:
            mock_run.side_effect = [
                _probe_result(returncode=1, stderr="corrupt"),
                _probe_result(good),
            ]
            clips = probe_group(group, media_context)

        assert len(clips) == 1
        assert clips[0].angle == Angle.FRONT
        assert clips[0].duration == pytest.approx(59.9)
