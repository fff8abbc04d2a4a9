"""
Playback session orchestration.

Coordinates all components for one piece of content:
- Playback clock mirror (player events -> snapshots)
- Schedule source and ads loader (schedule document -> ads manager)
- Break scheduler (clock ticks + readiness -> start-break actions)
- Companion overlay (break/ad start -> creative with hold timer)

Every ad-side failure is local: it is logged, counted, and content
playback continues without ads.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Literal

from playback_service.clock.mirror import PlaybackClockMirror
from playback_service.companion.overlay import CompanionOverlay
from playback_service.config.playback_config import PlaybackConfig
from playback_service.errors import (
    BreakStartFailure,
    InvalidSchedule,
    PlaybackError,
    SubsystemInitFailure,
    SubsystemRuntimeError,
)
from playback_service.events.channel import Subscription
from playback_service.interfaces import (
    AdsLoader,
    AdsManager,
    CompanionDisplay,
    ContentPlayer,
    ScheduleSource,
)
from playback_service.metrics.prometheus import PlaybackMetrics
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
)
from playback_service.models.state import SchedulerState
from playback_service.schedule.cue_points import CuePoint, CuePointSchedule
from playback_service.scheduler.break_scheduler import BreakScheduler

logger = logging.getLogger(__name__)

# Type alias for session lifecycle
SessionStatus = Literal["created", "starting", "active", "content_only", "stopped"]


@dataclass
class SessionConfig:
    """Collaborators and settings for a playback session.

    Attributes:
        session_id: Session identifier
        player: Content player
        schedule_source: Fetches the ad schedule document
        ads_loader: Ad subsystem entry point
        display: Companion display surface
        settings: Timing and slot sizes
    """

    session_id: str
    player: ContentPlayer
    schedule_source: ScheduleSource
    ads_loader: AdsLoader
    display: CompanionDisplay
    settings: PlaybackConfig = field(default_factory=PlaybackConfig)


class PlaybackSession:
    """Ad-break synchronization for one content playback.

    Lifecycle:
    1. start(): attach the clock mirror and content-ended hook, seed the
       mirror from the player, then run bootstrap in a background task
    2. bootstrap: wait for duration -> fetch schedule -> request ads ->
       attach manager -> play content
    3. stop(): cancel bootstrap, unsubscribe, tear down overlay and manager

    Attributes:
        config: Session configuration
        metrics: Prometheus metrics
        mirror: Clock mirror fed by the player; the ad subsystem gets its view
        scheduler: Break scheduler
        overlay: Companion overlay
        status: Current lifecycle status
    """

    def __init__(self, config: SessionConfig, metrics: PlaybackMetrics | None = None) -> None:
        """Initialize playback session.

        Args:
            config: Session configuration
            metrics: Prometheus metrics (created per session if omitted)
        """
        self.config = config
        self.settings = config.settings
        self.metrics = metrics or PlaybackMetrics(session_id=config.session_id)

        self.mirror = PlaybackClockMirror()
        self.scheduler = BreakScheduler(
            start_break=self._start_break,
            snapshot_provider=lambda: self.mirror.snapshot,
            tolerance_s=self.settings.cue_tolerance_s,
        )
        self.scheduler.set_start_failure_callback(self._on_break_start_failure)
        self.overlay = CompanionOverlay(
            display=config.display,
            hold_seconds=self.settings.companion_hold_s,
            width=self.settings.companion_width,
            height=self.settings.companion_height,
            metrics=self.metrics,
        )

        self.status: SessionStatus = "created"
        self.last_error: PlaybackError | None = None

        self._manager: AdsManager | None = None
        self._ad_subscription: Subscription | None = None
        self._clock_subscription: Subscription | None = None
        self._ended_subscription: Subscription | None = None
        self._task: asyncio.Task | None = None

        self._content_paused_by_ads = False
        self._content_completed = False

    @property
    def session_id(self) -> str:
        return self.config.session_id

    async def start(self) -> None:
        """Start the session.

        Subscribes to the player synchronously so no early event is
        missed, then runs the bootstrap sequence in a background task.
        """
        if self.status != "created":
            logger.warning(
                f"Session {self.session_id} already started (status={self.status})",
                extra={"session_id": self.session_id},
            )
            return

        logger.info(
            f"Starting playback session {self.session_id}",
            extra={"session_id": self.session_id},
        )

        player_events = self.config.player.events
        # Mirror first so the ended hook sees the final snapshot
        self.mirror.attach(player_events)
        self._ended_subscription = player_events.subscribe(
            self._on_player_event, name="content-ended"
        )
        self._clock_subscription = self.mirror.ticks.subscribe(
            self.scheduler.on_clock_tick, name="break-scheduler"
        )
        # Metadata may have loaded before we subscribed
        self.mirror.seed(self.config.player)

        self.status = "starting"
        self._task = asyncio.create_task(self._bootstrap())

    async def wait_started(self) -> None:
        """Wait for the bootstrap sequence to finish."""
        if self._task is not None:
            await asyncio.shield(self._task)

    async def _bootstrap(self) -> None:
        """Duration -> schedule -> ads manager -> content playback."""
        try:
            duration = await self.mirror.wait_for_duration(self.settings.metadata_timeout_s)
            document = await self._fetch_schedule(duration)
            manager = await self._request_manager(document)
        except PlaybackError as e:
            self._fall_back_to_content(e)
            return

        if not self.attach_manager(manager):
            return

        self.status = "active"
        # A preroll may already have paused content from inside attach
        if not self._content_paused_by_ads:
            self.config.player.play()
        logger.info(
            f"Session {self.session_id} active with {len(self.scheduler.schedule)} breaks",
            extra={"session_id": self.session_id},
        )

    async def _fetch_schedule(self, duration: float) -> str:
        try:
            return await self.config.schedule_source.fetch(duration)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise SubsystemInitFailure(f"Schedule fetch failed: {e}") from e

    async def _request_manager(self, document: str) -> AdsManager:
        try:
            return await self.config.ads_loader.request_ads(document, self.mirror.view)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise SubsystemInitFailure(f"Ads manager unavailable: {e}") from e

    def attach_manager(self, manager: AdsManager) -> bool:
        """Replace the ads manager and arm the scheduler for its schedule.

        The previous manager is unsubscribed and destroyed and all
        scheduler counters reset before the new schedule is accepted.

        Args:
            manager: Ads manager produced by the loader

        Returns:
            True if the manager is attached and initialized
        """
        try:
            schedule = CuePointSchedule.load(manager.cue_points())
        except InvalidSchedule as e:
            # Prior schedule and manager stay in place
            logger.error(
                f"Rejected ads manager schedule: {e}",
                extra={"session_id": self.session_id},
            )
            self._destroy(manager)
            if self._manager is None:
                self._fall_back_to_content(e)
            else:
                self._record_error(e)
            return False

        self._teardown_manager()
        self.scheduler.load(schedule)
        self._manager = manager
        self._ad_subscription = manager.subscribe(self._on_ad_event)

        width, height = self.settings.linear_slot_size
        try:
            manager.init(width, height)
        except Exception as e:
            self._fall_back_to_content(SubsystemInitFailure(f"Ads manager init failed: {e}"))
            return False

        self.scheduler.evaluate(self.mirror.snapshot)
        self._update_phase()
        return True

    def _start_break(self, cue: CuePoint) -> None:
        if self._manager is None:
            raise SubsystemRuntimeError("No ads manager attached")
        self._manager.start()
        self.metrics.record_break_started()

    def _on_break_start_failure(self, failure: BreakStartFailure) -> None:
        self.metrics.record_break_start_failure()
        self._record_error(failure)

    def _on_ad_event(self, event: AdEvent) -> None:
        """Dispatch one ad-subsystem event."""
        if isinstance(event, AdBreakReadyEvent):
            self.metrics.record_readiness_signal()
            self.scheduler.on_break_ready(event.break_index)
        elif isinstance(event, BreakStartedEvent):
            self.scheduler.on_break_started()
            if event.companions:
                self.overlay.show(event.companions)
        elif isinstance(event, BreakEndedEvent):
            self.scheduler.on_break_ended()
        elif isinstance(event, AdStartedEvent):
            if event.companions:
                self.overlay.show(event.companions)
        elif isinstance(event, ContentPauseRequestedEvent):
            self._content_paused_by_ads = True
            self.config.player.pause()
        elif isinstance(event, ContentResumeRequestedEvent):
            self._content_paused_by_ads = False
            self.config.player.play()
        elif isinstance(event, AdErrorEvent):
            self._on_ad_error(event)
        self._update_phase()

    def _on_ad_error(self, event: AdErrorEvent) -> None:
        error = SubsystemRuntimeError(event.reason)
        logger.error(
            f"Ad subsystem error: {event.reason} (code={event.code})",
            extra={"session_id": self.session_id},
        )
        self._record_error(error)
        if self._content_paused_by_ads:
            self._content_paused_by_ads = False
            self.config.player.play()

    def _on_player_event(self, event: PlayerEvent) -> None:
        if event.type != "ended" or self._content_completed:
            return
        if self._manager is None:
            # No ads were requested, or they were abandoned
            return
        self._content_completed = True
        logger.info(
            f"Content ENDED at {self.mirror.current_time:.2f}s",
            extra={"session_id": self.session_id},
        )
        self.config.ads_loader.content_complete()

    def _fall_back_to_content(self, error: PlaybackError) -> None:
        """Abandon ad scheduling and play content unassisted."""
        logger.warning(
            f"Falling back to content for session {self.session_id}: {error}",
            extra={"session_id": self.session_id, "error_type": error.error_type},
        )
        self._record_error(error)
        self.metrics.record_content_fallback(error.error_type)
        self._teardown_manager()
        self.scheduler.reset()
        self._content_paused_by_ads = False
        self.status = "content_only"
        self._update_phase()
        self.config.player.play()

    def _teardown_manager(self) -> None:
        if self._ad_subscription is not None:
            self._ad_subscription.cancel()
            self._ad_subscription = None
        if self._manager is not None:
            self._destroy(self._manager)
            self._manager = None

    def _destroy(self, manager: AdsManager) -> None:
        try:
            manager.destroy()
        except Exception as e:
            logger.warning(f"Ads manager destroy failed: {e}")

    def _record_error(self, error: PlaybackError) -> None:
        self.last_error = error
        self.metrics.record_error(error.error_type)

    def _update_phase(self) -> None:
        self.metrics.set_scheduler_phase(SchedulerState.phase_value(self.scheduler.phase))

    async def stop(self) -> None:
        """Stop the session and release every subscription and timer."""
        if self.status == "stopped":
            return

        logger.info(
            f"Stopping playback session {self.session_id}",
            extra={"session_id": self.session_id},
        )

        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        self.mirror.detach()
        if self._ended_subscription is not None:
            self._ended_subscription.cancel()
            self._ended_subscription = None
        if self._clock_subscription is not None:
            self._clock_subscription.cancel()
            self._clock_subscription = None

        self.overlay.teardown()
        self._teardown_manager()
        self.status = "stopped"

    @property
    def manager(self) -> AdsManager | None:
        """Currently attached ads manager."""
        return self._manager

    @property
    def content_paused_by_ads(self) -> bool:
        """Whether an ad-requested pause is in effect."""
        return self._content_paused_by_ads
