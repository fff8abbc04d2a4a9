"""
Data models for playback service.

This module provides data models for:
- Snapshot: PlaybackSnapshot, SeekableRange
- State: SchedulerState, CompanionState
- Events: Content player and ad subsystem events
- Creatives: CompanionCreative
"""

from __future__ import annotations

from playback_service.models.creatives import CompanionCreative
from playback_service.models.events import (
    AdBreakReadyEvent,
    AdErrorEvent,
    AdEvent,
    AdStartedEvent,
    BreakEndedEvent,
    BreakStartedEvent,
    ContentPauseRequestedEvent,
    ContentResumeRequestedEvent,
    PlayerEvent,
    parse_ad_event,
)
from playback_service.models.snapshot import PlaybackSnapshot, SeekableRange
from playback_service.models.state import (
    CompanionState,
    CueState,
    SchedulerPhase,
    SchedulerState,
)

__all__ = [
    "AdBreakReadyEvent",
    "AdErrorEvent",
    "AdEvent",
    "AdStartedEvent",
    "BreakEndedEvent",
    "BreakStartedEvent",
    "CompanionCreative",
    "CompanionState",
    "ContentPauseRequestedEvent",
    "ContentResumeRequestedEvent",
    "CueState",
    "PlaybackSnapshot",
    "PlayerEvent",
    "SchedulerPhase",
    "SchedulerState",
    "SeekableRange",
    "parse_ad_event",
]
