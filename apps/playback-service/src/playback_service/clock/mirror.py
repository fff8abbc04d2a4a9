"""
Playback clock mirror.

Keeps a PlaybackSnapshot of the content player, seeded from the player
when a session starts and rebuilt on every player event. Only the owning
session writes to the mirror; the ad subsystem is handed a PlaybackClock
view, which exposes the snapshot properties and nothing else.

Each player event produces exactly one snapshot update and exactly one
notification on ``ticks``; there is no smoothing or filtering.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import TYPE_CHECKING

from playback_service.errors import DurationUnavailable
from playback_service.events.channel import EventChannel, Subscription
from playback_service.models.events import PlayerEvent
from playback_service.models.snapshot import PlaybackSnapshot, SeekableRange

if TYPE_CHECKING:
    from playback_service.interfaces import ContentPlayer

logger = logging.getLogger(__name__)


def _usable_duration(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value > 0


class PlaybackClockMirror:
    """Mirror of the content player's clock, written only by its owner.

    Attributes:
        ticks: Channel notified with the new snapshot after every update
        view: Read-only PlaybackClock over this mirror
        _snapshot: Most recent PlaybackSnapshot
        _duration_known: Set once a finite positive duration is observed
    """

    def __init__(self) -> None:
        """Initialize mirror with the pre-metadata snapshot."""
        self.ticks: EventChannel[PlaybackSnapshot] = EventChannel("clock-ticks")
        self._snapshot = PlaybackSnapshot()
        self._duration_known = asyncio.Event()
        self._subscription: Subscription | None = None
        self._update_count = 0
        self.view = PlaybackClock(self)

    def attach(self, player_events: EventChannel[PlayerEvent]) -> Subscription:
        """Start mirroring a player's event channel.

        Any previous attachment is cancelled first.

        Args:
            player_events: Content player event channel

        Returns:
            Subscription to the player channel
        """
        self.detach()
        self._subscription = player_events.subscribe(self.handle, name="clock-mirror")
        return self._subscription

    def detach(self) -> None:
        """Stop mirroring the player."""
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def handle(self, event: PlayerEvent) -> PlaybackSnapshot:
        """Apply one player event to the snapshot.

        Args:
            event: Player event with sampled properties

        Returns:
            The rebuilt snapshot
        """
        snap = self._snapshot
        duration = event.duration if _usable_duration(event.duration) else snap.duration

        if event.type in ("timeupdate", "loadedmetadata", "ended"):
            snap = snap.evolve(current_time=event.current_time, duration=duration)
        elif event.type == "seeking":
            snap = snap.evolve(seeking=True, current_time=event.current_time, duration=duration)
        elif event.type == "seeked":
            snap = snap.evolve(seeking=False, current_time=event.current_time, duration=duration)
        elif event.type == "play":
            snap = snap.evolve(paused=False)
        elif event.type == "pause":
            snap = snap.evolve(paused=True)
        elif event.type == "ratechange":
            if event.playback_rate is not None:
                snap = snap.evolve(playback_rate=event.playback_rate)

        self._update_count += 1
        return self._apply(snap)

    def seed(self, player: ContentPlayer) -> PlaybackSnapshot:
        """Initialize the snapshot from the player's current properties.

        Content whose metadata loaded before the session attached emits
        no further events until playback resumes, so its duration is only
        observable by reading the player directly.

        Args:
            player: Content player to sample

        Returns:
            The seeded snapshot
        """
        snap = self._snapshot
        duration = player.duration if _usable_duration(player.duration) else snap.duration
        snap = snap.evolve(
            current_time=player.current_time,
            duration=duration,
            paused=player.paused,
            playback_rate=player.playback_rate,
        )
        logger.debug(
            f"Clock seeded from player: current_time={snap.current_time:.2f}, "
            f"duration={snap.duration}"
        )
        return self._apply(snap)

    def _apply(self, snap: PlaybackSnapshot) -> PlaybackSnapshot:
        self._snapshot = snap

        if snap.has_duration and not self._duration_known.is_set():
            logger.info(f"Content duration known: {snap.duration:.2f}s")
            self._duration_known.set()

        self.ticks.publish(snap)
        return snap

    async def wait_for_duration(self, timeout: float | None = None) -> float:
        """Wait until the content duration is known.

        Args:
            timeout: Max seconds to wait (None = infinite)

        Returns:
            Content duration in seconds

        Raises:
            DurationUnavailable: If the duration does not resolve in time
        """
        if not self._duration_known.is_set():
            try:
                await asyncio.wait_for(self._duration_known.wait(), timeout=timeout)
            except asyncio.TimeoutError as e:
                raise DurationUnavailable(
                    f"Content duration not available after {timeout}s"
                ) from e

        duration = self._snapshot.duration
        if not _usable_duration(duration):
            raise DurationUnavailable(f"Content duration invalid: {duration}")
        return duration

    @property
    def snapshot(self) -> PlaybackSnapshot:
        """Most recent snapshot."""
        return self._snapshot

    @property
    def update_count(self) -> int:
        """Number of player events mirrored so far."""
        return self._update_count

    @property
    def current_time(self) -> float:
        return self._snapshot.current_time

    @property
    def duration(self) -> float:
        return self._snapshot.duration

    @property
    def paused(self) -> bool:
        return self._snapshot.paused

    @property
    def seeking(self) -> bool:
        return self._snapshot.seeking

    @property
    def playback_rate(self) -> float:
        return self._snapshot.playback_rate

    @property
    def seekable_range(self) -> SeekableRange:
        return self._snapshot.seekable_range


class PlaybackClock:
    """Read-only view of a PlaybackClockMirror.

    Handed to the ad subsystem. Exposes the current snapshot and its
    properties; it has no way to feed events into the mirror, detach it
    from the player or publish ticks.
    """

    __slots__ = ("_mirror",)

    def __init__(self, mirror: PlaybackClockMirror) -> None:
        self._mirror = mirror

    @property
    def snapshot(self) -> PlaybackSnapshot:
        return self._mirror.snapshot

    @property
    def current_time(self) -> float:
        return self._mirror.current_time

    @property
    def duration(self) -> float:
        return self._mirror.duration

    @property
    def paused(self) -> bool:
        return self._mirror.paused

    @property
    def seeking(self) -> bool:
        return self._mirror.seeking

    @property
    def playback_rate(self) -> float:
        return self._mirror.playback_rate

    @property
    def seekable_range(self) -> SeekableRange:
        return self._mirror.seekable_range
