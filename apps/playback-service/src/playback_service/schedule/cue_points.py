"""
Cue point schedule.

An ordered, immutable-once-loaded list of break offsets in seconds from
content start. Indices are assigned at load time in ascending offset
order and never change. Two breaks at the same offset cannot be told
apart by a clock-based trigger, so duplicate offsets collapse into one
cue point.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from numbers import Real

from playback_service.errors import InvalidSchedule
from playback_service.models.state import CueState

logger = logging.getLogger(__name__)


@dataclass
class CuePoint:
    """A scheduled break position.

    Attributes:
        index: Position in the schedule (0-based, ascending by offset)
        offset_seconds: Content time at which the break is due
        state: pending -> ready -> started

    Invariants:
        - index and offset_seconds are fixed after load
        - state only moves forward
    """

    index: int
    offset_seconds: float
    state: CueState = "pending"

    @property
    def label(self) -> str:
        """Human readable break kind for logs."""
        return "preroll" if self.offset_seconds == 0 else f"midroll{self.index}"

    def mark_ready(self) -> None:
        """Transition pending -> ready (no-op otherwise)."""
        if self.state == "pending":
            self.state = "ready"

    def mark_started(self) -> None:
        """Transition to the terminal started state."""
        self.state = "started"


class CuePointSchedule:
    """Immutable ordered collection of cue points.

    Build with CuePointSchedule.load(); the constructor is internal.
    """

    def __init__(self, cues: tuple[CuePoint, ...] = ()) -> None:
        self._cues = cues

    @classmethod
    def empty(cls) -> CuePointSchedule:
        """Schedule with no breaks."""
        return cls(())

    @classmethod
    def load(cls, offsets: Iterable[float]) -> CuePointSchedule:
        """Build a schedule from break offsets.

        Args:
            offsets: Break offsets in seconds (any order, duplicates allowed)

        Returns:
            New schedule sorted ascending with duplicates removed

        Raises:
            InvalidSchedule: If any offset is not a finite, non-negative number
        """
        values: list[float] = []
        for raw in offsets:
            if isinstance(raw, bool) or not isinstance(raw, Real):
                raise InvalidSchedule(f"cue offset must be a number, got {raw!r}")
            value = float(raw)
            if not math.isfinite(value):
                raise InvalidSchedule(f"cue offset must be finite, got {value}")
            if value < 0:
                raise InvalidSchedule(f"cue offset must be >= 0, got {value}")
            values.append(value)

        unique = sorted(set(values))
        if len(unique) != len(values):
            logger.info(
                f"Collapsed {len(values) - len(unique)} duplicate cue offsets"
            )

        cues = tuple(
            CuePoint(index=i, offset_seconds=offset) for i, offset in enumerate(unique)
        )
        return cls(cues)

    def __len__(self) -> int:
        return len(self._cues)

    def __getitem__(self, index: int) -> CuePoint:
        return self._cues[index]

    def __iter__(self) -> Iterator[CuePoint]:
        return iter(self._cues)

    @property
    def offsets(self) -> list[float]:
        """Cue offsets in index order."""
        return [cue.offset_seconds for cue in self._cues]

    def __repr__(self) -> str:
        return f"CuePointSchedule(offsets={self.offsets})"
