"""
Readiness tracker.

Counts "break ready" signals from the ad subsystem. The counter cannot
attribute a signal to a particular break; it only knows how many breaks
have been declared ready so far. Bursts, duplicates and out-of-order
signals are all counted, matching how ad SDKs deliver readiness.
"""

from __future__ import annotations

import logging

from playback_service.models.state import SchedulerState
from playback_service.schedule.cue_points import CuePointSchedule

logger = logging.getLogger(__name__)


class ReadinessTracker:
    """Monotonic counter of ready breaks.

    Writes ready_count on the scheduler-owned SchedulerState; it is only
    ever driven from the scheduler's readiness handler.

    Attributes:
        state: Shared scheduler state (ready_count is written here)
        schedule: Loaded cue point schedule
        total_signals: Readiness signals received, including ignored surplus
        mismatched_signals: Signals whose reported index disagreed with the count
    """

    def __init__(self, state: SchedulerState, schedule: CuePointSchedule) -> None:
        self.state = state
        self.schedule = schedule
        self.total_signals = 0
        self.mismatched_signals = 0

    def mark_next_ready(self, break_index: int | None = None) -> bool:
        """Count one readiness signal.

        Args:
            break_index: Index reported by the subsystem, if any. Only used
                for diagnostics; counting is positional.

        Returns:
            True if ready_count advanced, False if the schedule is already
            fully ready and the signal was ignored
        """
        self.total_signals += 1
        expected = self.state.ready_count

        if break_index is not None and break_index != expected:
            self.mismatched_signals += 1
            logger.warning(
                f"Readiness reported for break #{break_index} while break #{expected} "
                f"is next by count; counting positionally"
            )

        if self.state.ready_count >= len(self.schedule):
            logger.warning(
                f"Surplus readiness signal ignored: ready_count={self.state.ready_count}, "
                f"schedule_length={len(self.schedule)}"
            )
            return False

        self.schedule[self.state.ready_count].mark_ready()
        self.state.ready_count += 1
        logger.info(f"Break READY: ready_count={self.state.ready_count}")
        return True

    def reset(self, schedule: CuePointSchedule) -> None:
        """Track a new schedule from zero."""
        self.schedule = schedule
        self.total_signals = 0
        self.mismatched_signals = 0
