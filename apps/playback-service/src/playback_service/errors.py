"""
Error taxonomy for the ad-break synchronization engine.

Every failure here is local to a playback session: callers catch these,
log them, record a metric, and fall back to plain content playback.
"""

from __future__ import annotations


class PlaybackError(Exception):
    """Base class for playback session failures."""

    error_type = "playback_error"


class InvalidSchedule(PlaybackError):
    """Raised when cue point offsets are negative or not finite numbers."""

    error_type = "invalid_schedule"


class DurationUnavailable(PlaybackError):
    """Raised when content duration never resolves to a finite value."""

    error_type = "duration_unavailable"


class SubsystemInitFailure(PlaybackError):
    """Raised when the ad subsystem cannot produce a manager handle."""

    error_type = "subsystem_init_failure"


class BreakStartFailure(PlaybackError):
    """Raised when the start-break action throws.

    Attributes:
        index: Cue index that failed to start
    """

    error_type = "break_start_failure"

    def __init__(self, index: int, cause: BaseException | None = None) -> None:
        super().__init__(f"Failed to start break #{index}: {cause}")
        self.index = index
        self.cause = cause


class SubsystemRuntimeError(PlaybackError):
    """Reported by the ad subsystem mid-playback."""

    error_type = "subsystem_runtime_error"
