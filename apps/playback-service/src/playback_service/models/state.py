"""
State models for the break scheduler and companion overlay.

- SchedulerState: counters reconciling readiness and break starts
- CompanionState: overlay visibility and the single hold timer
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Literal

# Type alias for per-cue lifecycle
CueState = Literal["pending", "ready", "started"]

# Type alias for global scheduler phase
SchedulerPhase = Literal["idle", "armed", "break_active"]


@dataclass
class SchedulerState:
    """Counters owned by the break scheduler.

    Attributes:
        started_count: Number of breaks the scheduler has started.
        ready_count: Number of breaks the ad subsystem has declared ready.
        break_in_progress: True between a break-start and break-end signal.

    Invariants:
        - 0 <= started_count <= ready_count <= len(schedule)
        - started_count and ready_count only grow until reset()
    """

    started_count: int = 0
    ready_count: int = 0
    break_in_progress: bool = False

    def phase(self, schedule_length: int) -> SchedulerPhase:
        """Derive the global scheduler phase.

        Args:
            schedule_length: Number of cue points in the loaded schedule.

        Returns:
            "break_active" while a break plays, "armed" while breaks remain,
            "idle" otherwise.
        """
        if self.break_in_progress:
            return "break_active"
        if self.started_count < schedule_length:
            return "armed"
        return "idle"

    @staticmethod
    def phase_value(phase: SchedulerPhase) -> int:
        """Numeric phase for metrics: 0=idle, 1=armed, 2=break_active."""
        if phase == "idle":
            return 0
        elif phase == "armed":
            return 1
        else:  # break_active
            return 2

    def reset(self) -> None:
        """Reset all counters to zero."""
        self.started_count = 0
        self.ready_count = 0
        self.break_in_progress = False


@dataclass
class CompanionState:
    """Companion overlay state.

    Attributes:
        visible: Whether a companion creative is currently rendered.
        hold_timer: Pending auto-hide task, if any.

    Invariants:
        - at most one hold_timer is live at a time
        - visible implies hold_timer is set and not done
    """

    visible: bool = False
    hold_timer: asyncio.Task | None = None

    @property
    def has_live_timer(self) -> bool:
        """True if a hide timer is scheduled and has not fired."""
        return self.hold_timer is not None and not self.hold_timer.done()
