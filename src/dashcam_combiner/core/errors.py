"""Exceptions raised while planning and encoding dashcam composites."""

from typing import Optional


class DashcamError(Exception):
    """Base class for dashcam combiner errors."""

    pass


class ProbeError(DashcamError):
    """Raised when a clip cannot be probed (unreadable, corrupt, timed out)."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not probe {path}: {reason}")
        self.path = path
        self.reason = reason


class EmptyGroupError(DashcamError):
    """Raised when no clip in a timestamp group survived probing."""

    def __init__(self, timestamp: str):
        super().__init__(f"No usable clips for timestamp {timestamp}")
        self.timestamp = timestamp


class StructuralGraphError(DashcamError):
    """Raised when a filter graph plan would be invalid."""

    pass


class EncodeError(DashcamError):
    """Raised when ffmpeg exits non-zero or times out."""

    def __init__(
        self,
        output: str,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
        reason: Optional[str] = None,
    ):
        if reason is None:
            reason = "timed out" if returncode is None else f"exit status {returncode}"
        message = f"FFmpeg failed for {output}: {reason}"
        tail = stderr_tail(stderr)
        if tail:
            message += f": {tail}"
        super().__init__(message)
        self.output = output
        self.returncode = returncode
        self.stderr = stderr
        self.reason = reason


def stderr_tail(stderr: Optional[str], lines: int = 3) -> str:
    """Last non-empty lines of FFmpeg stderr, joined with " | "."""
    if not stderr:
        return ""
    kept = [line.strip() for line in stderr.splitlines() if line.strip()]
    return " | ".join(kept[-lines:])


class UnknownAngleWarning(UserWarning):
    """Filename has a valid timestamp but an unrecognized camera angle."""

    pass


class DuplicateAngleWarning(UserWarning):
    """More than one file in a timestamp group claims the same angle."""

    pass
