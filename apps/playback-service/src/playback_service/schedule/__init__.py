"""
Cue point schedule and readiness tracking.

Components:
- CuePoint / CuePointSchedule: ordered break offsets loaded once per manager
- ReadinessTracker: counts break-ready signals from the ad subsystem
"""

from __future__ import annotations

from playback_service.schedule.cue_points import CuePoint, CuePointSchedule
from playback_service.schedule.readiness import ReadinessTracker

__all__ = [
    "CuePoint",
    "CuePointSchedule",
    "ReadinessTracker",
]
