"""
Collaborator contracts for a playback session.

The content player, the ad-decisioning subsystem and the companion
display surface live outside this service. These protocols describe the
boundary the engine relies on; anything implementing them can be wired
into a PlaybackSession.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Protocol

from playback_service.events.channel import EventChannel, Subscription
from playback_service.models.creatives import CompanionCreative
from playback_service.models.events import AdEvent, PlayerEvent

if TYPE_CHECKING:
    from playback_service.clock.mirror import PlaybackClock


class ContentPlayer(Protocol):
    """Adaptive-streaming content player.

    Contract:
        - MUST publish one PlayerEvent per underlying media event on ``events``
        - current_time, duration, paused and playback_rate reflect the live
          media element; duration is NaN or None until metadata loads
        - play()/pause() are only ever called in response to ad-subsystem
          requests or session fallbacks, never spontaneously by the scheduler
    """

    events: EventChannel[PlayerEvent]

    @property
    def current_time(self) -> float: ...

    @property
    def duration(self) -> float | None: ...

    @property
    def paused(self) -> bool: ...

    @property
    def playback_rate(self) -> float: ...

    def play(self) -> None:
        """Resume or start content playback."""
        ...

    def pause(self) -> None:
        """Pause content playback."""
        ...


class ScheduleSource(Protocol):
    """Fetches the opaque ad schedule document for a piece of content."""

    async def fetch(self, duration: float) -> str:
        """Fetch the schedule document.

        Args:
            duration: Content duration in seconds

        Returns:
            Schedule document in the ad subsystem's wire format
        """
        ...


class AdsManager(Protocol):
    """Per-schedule handle produced by the ad subsystem."""

    def cue_points(self) -> Sequence[float]:
        """Break offsets in seconds from content start."""
        ...

    def subscribe(self, handler: Callable[[AdEvent], None]) -> Subscription:
        """Register for ad events; cancel the returned token to unsubscribe."""
        ...

    def init(self, width: int, height: int) -> None:
        """Size the linear ad slot."""
        ...

    def start(self) -> None:
        """Start the next ready break."""
        ...

    def destroy(self) -> None:
        """Release the manager and any ad playback resources."""
        ...


class AdsLoader(Protocol):
    """Entry point of the ad subsystem."""

    async def request_ads(
        self,
        document: str,
        clock: PlaybackClock,
    ) -> AdsManager:
        """Request ads for a schedule document.

        Args:
            document: Schedule document fetched by a ScheduleSource
            clock: Read-only playback clock the subsystem may consult

        Returns:
            AdsManager for the schedule

        Raises:
            Exception: If the subsystem cannot produce a manager
        """
        ...

    def content_complete(self) -> None:
        """Signal that content playback reached its end."""
        ...


class CompanionDisplay(Protocol):
    """Surface the companion creative is rendered into."""

    def render(self, creative: CompanionCreative) -> None:
        """Show a companion creative, replacing any current one."""
        ...

    def clear(self) -> None:
        """Remove any rendered companion creative."""
        ...
