"""
Playback clock module.

Components:
- PlaybackClockMirror: snapshot of the content player clock, owned by a session
- PlaybackClock: read-only view of a mirror handed to the ad subsystem
"""

from __future__ import annotations

from playback_service.clock.mirror import PlaybackClock, PlaybackClockMirror

__all__ = [
    "PlaybackClock",
    "PlaybackClockMirror",
]
