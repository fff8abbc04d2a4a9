"""
Break scheduler.

Merges playback clock ticks and ad-subsystem readiness signals into an
exactly-once, index-ordered sequence of "start break" actions.

Guarantees:
- Breaks start in strictly increasing index order (started_count gates
  the only candidate)
- Each index starts at most once (in-progress guard plus monotonic
  counter make re-evaluation idempotent)
- A break starts the moment it is both ready and due, whichever trigger
  source fired last
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from playback_service.errors import BreakStartFailure
from playback_service.models.snapshot import PlaybackSnapshot
from playback_service.models.state import SchedulerPhase, SchedulerState
from playback_service.schedule.cue_points import CuePoint, CuePointSchedule
from playback_service.schedule.readiness import ReadinessTracker
from playback_service.scheduler.decision import DEFAULT_CUE_TOLERANCE_S, next_break_due

logger = logging.getLogger(__name__)

# Type aliases
StartBreakAction = Callable[[CuePoint], None]
SnapshotProvider = Callable[[], PlaybackSnapshot]
StartFailureCallback = Callable[[BreakStartFailure], None]


class BreakScheduler:
    """Owns SchedulerState and decides when breaks start.

    Attributes:
        state: Counters reconciling readiness and starts
        schedule: Loaded cue point schedule
        readiness: Readiness tracker writing state.ready_count
        tolerance_s: Cue comparison tolerance in seconds
        started_indices: Indices started so far, in start order
        start_failures: Start actions that raised
    """

    def __init__(
        self,
        start_break: StartBreakAction,
        snapshot_provider: SnapshotProvider | None = None,
        tolerance_s: float = DEFAULT_CUE_TOLERANCE_S,
    ) -> None:
        """Initialize break scheduler with an empty schedule.

        Args:
            start_break: Action asking the ad subsystem to start the next break
            snapshot_provider: Returns the latest playback snapshot (used when
                a readiness signal triggers evaluation between clock ticks)
            tolerance_s: Cue comparison tolerance in seconds
        """
        self._start_break = start_break
        self._snapshot_provider = snapshot_provider
        self.tolerance_s = tolerance_s

        self.state = SchedulerState()
        self.schedule = CuePointSchedule.empty()
        self.readiness = ReadinessTracker(self.state, self.schedule)

        self.started_indices: list[int] = []
        self.start_failures = 0
        self._last_snapshot = PlaybackSnapshot()
        self._on_start_failure: StartFailureCallback | None = None

        # Re-entrancy guard: a start action may synchronously emit events
        self._evaluating = False
        self._reevaluate = False

    def load(self, schedule: CuePointSchedule) -> None:
        """Replace the schedule and reset every counter.

        Args:
            schedule: Newly loaded cue point schedule
        """
        self.schedule = schedule
        self.state.reset()
        self.readiness.reset(schedule)
        self.started_indices = []
        self.start_failures = 0
        self._reevaluate = False
        logger.info(
            f"Schedule loaded: {len(schedule)} breaks at {schedule.offsets}s, "
            f"tolerance={self.tolerance_s}s"
        )

    def reset(self) -> None:
        """Drop the schedule and zero all counters."""
        self.load(CuePointSchedule.empty())

    def on_clock_tick(self, snapshot: PlaybackSnapshot) -> CuePoint | None:
        """Clock trigger: evaluate with the new snapshot."""
        self._last_snapshot = snapshot
        return self.evaluate(snapshot)

    def on_break_ready(self, break_index: int | None = None) -> CuePoint | None:
        """Readiness trigger: count the signal, then evaluate.

        Args:
            break_index: Index reported by the subsystem, if any
        """
        self.readiness.mark_next_ready(break_index)
        return self.evaluate()

    def on_break_started(self) -> None:
        """Break-start signal from the ad subsystem."""
        self.state.break_in_progress = True
        logger.info(
            f"Break STARTED: started_count={self.state.started_count}, "
            f"ready_count={self.state.ready_count}"
        )

    def on_break_ended(self) -> CuePoint | None:
        """Break-end signal: clear the guard and evaluate.

        The clock may already be past the next cue, so evaluation runs
        immediately instead of waiting for the next tick.
        """
        if not self.state.break_in_progress:
            logger.debug("Break ENDED without a matching start signal")
        self.state.break_in_progress = False
        logger.info(f"Break ENDED: started_count={self.state.started_count}")
        return self.evaluate()

    def evaluate(self, snapshot: PlaybackSnapshot | None = None) -> CuePoint | None:
        """Apply the decision rule once and start a break if due.

        Args:
            snapshot: Snapshot to evaluate against (defaults to latest)

        Returns:
            The cue point started, or None
        """
        if self._evaluating:
            self._reevaluate = True
            return None

        self._evaluating = True
        try:
            started = self._evaluate_once(snapshot)
            while self._reevaluate and started is None:
                self._reevaluate = False
                started = self._evaluate_once(None)
            self._reevaluate = False
            return started
        finally:
            self._evaluating = False

    def _evaluate_once(self, snapshot: PlaybackSnapshot | None) -> CuePoint | None:
        if snapshot is None:
            snapshot = self._current_snapshot()

        cue = next_break_due(self.state, snapshot, self.schedule, self.tolerance_s)
        if cue is None:
            return None

        logger.info(
            f"Starting break #{cue.index} ({cue.label}) at cue {cue.offset_seconds}s, "
            f"current_time={snapshot.current_time:.2f}s"
        )

        try:
            self._start_break(cue)
        except Exception as e:
            # started_count unchanged so the next tick retries
            self.start_failures += 1
            failure = BreakStartFailure(cue.index, e)
            logger.error(f"start() failed for break #{cue.index}: {e}")
            if self._on_start_failure:
                self._on_start_failure(failure)
            return None

        cue.mark_started()
        self.state.started_count += 1
        self.started_indices.append(cue.index)
        return cue

    def _current_snapshot(self) -> PlaybackSnapshot:
        if self._snapshot_provider is not None:
            return self._snapshot_provider()
        return self._last_snapshot

    def set_start_failure_callback(self, callback: StartFailureCallback) -> None:
        """Set callback invoked when a start action raises.

        Args:
            callback: Function receiving the BreakStartFailure
        """
        self._on_start_failure = callback

    @property
    def phase(self) -> SchedulerPhase:
        """Global scheduler phase."""
        return self.state.phase(len(self.schedule))

    @property
    def pending_breaks(self) -> int:
        """Breaks not yet started."""
        return len(self.schedule) - self.state.started_count
