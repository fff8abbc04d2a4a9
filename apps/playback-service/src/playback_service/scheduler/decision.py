"""
Break start decision rule.

Pure function of scheduler state, the latest playback snapshot and the
loaded schedule. It is evaluated from both trigger sources (clock ticks
and readiness signals) so that either arrival order converges on the
same outcome:

    break in progress            -> nothing
    all breaks started           -> nothing
    next = schedule[started]
    ready > started and time >= next.offset - tolerance -> start next
"""

from __future__ import annotations

from playback_service.models.snapshot import PlaybackSnapshot
from playback_service.models.state import SchedulerState
from playback_service.schedule.cue_points import CuePoint, CuePointSchedule

DEFAULT_CUE_TOLERANCE_S = 0.25


def next_break_due(
    state: SchedulerState,
    snapshot: PlaybackSnapshot,
    schedule: CuePointSchedule,
    tolerance_s: float = DEFAULT_CUE_TOLERANCE_S,
) -> CuePoint | None:
    """Return the cue point that should start now, if any.

    Args:
        state: Current scheduler counters
        snapshot: Latest playback snapshot
        schedule: Loaded cue point schedule
        tolerance_s: Clock-tick granularity absorbed when comparing offsets

    Returns:
        The next cue point when it is both ready and due, else None
    """
    if state.break_in_progress:
        return None
    if state.started_count >= len(schedule):
        return None

    next_cue = schedule[state.started_count]
    is_ready = state.ready_count > state.started_count
    is_due = snapshot.current_time >= next_cue.offset_seconds - tolerance_s

    if is_ready and is_due:
        return next_cue
    return None
