"""
Playback snapshot value objects.

A PlaybackSnapshot is rebuilt on every content player event and handed
to the ad subsystem as a read-only view of content position.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class SeekableRange:
    """Seekable window of the content, in seconds."""

    start: float = 0.0
    end: float = 0.0


@dataclass(frozen=True)
class PlaybackSnapshot:
    """Immutable snapshot of the content player's live properties.

    Attributes:
        current_time: Content position in seconds.
        duration: Content duration in seconds (NaN until metadata loads).
        paused: Whether content playback is paused.
        seeking: Whether a seek is in progress.
        playback_rate: Current playback rate (1.0 = normal speed).
    """

    current_time: float = 0.0
    duration: float = math.nan
    paused: bool = True
    seeking: bool = False
    playback_rate: float = 1.0

    @property
    def has_duration(self) -> bool:
        """True once a finite, positive duration has been observed."""
        return math.isfinite(self.duration) and self.duration > 0

    @property
    def seekable_range(self) -> SeekableRange:
        """Seekable range, empty until the duration is known."""
        end = self.duration if math.isfinite(self.duration) else 0.0
        return SeekableRange(start=0.0, end=end)

    def evolve(self, **changes: object) -> PlaybackSnapshot:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)
