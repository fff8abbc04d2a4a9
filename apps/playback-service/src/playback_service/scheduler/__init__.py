"""
Break scheduling.

Components:
- next_break_due: pure decision rule shared by both trigger sources
- BreakScheduler: owns SchedulerState and invokes the start-break action
"""

from __future__ import annotations

from playback_service.scheduler.break_scheduler import BreakScheduler
from playback_service.scheduler.decision import DEFAULT_CUE_TOLERANCE_S, next_break_due

__all__ = [
    "BreakScheduler",
    "DEFAULT_CUE_TOLERANCE_S",
    "next_break_due",
]
