"""
Playback session lifecycle.

Components:
- PlaybackSession: wires player, ad subsystem, scheduler and overlay
- SessionConfig: collaborators and settings for one session
"""

from __future__ import annotations

from playback_service.session.playback_session import (
    PlaybackSession,
    SessionConfig,
    SessionStatus,
)

__all__ = [
    "PlaybackSession",
    "SessionConfig",
    "SessionStatus",
]
