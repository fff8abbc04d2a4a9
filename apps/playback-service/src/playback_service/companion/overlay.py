"""
Companion overlay lifecycle.

A companion creative is shown when a break (or an ad inside it) starts
and hidden after a fixed hold duration. Only one hide timer is ever
live: each new show cancels the previous timer before scheduling its
own, so the creative is cleared one hold duration after the last show.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from playback_service.interfaces import CompanionDisplay
from playback_service.models.creatives import CompanionCreative
from playback_service.models.state import CompanionState

if TYPE_CHECKING:
    from playback_service.metrics.prometheus import PlaybackMetrics

logger = logging.getLogger(__name__)

DEFAULT_HOLD_SECONDS = 15.0


def select_companion(
    companions: Sequence[CompanionCreative],
    width: int,
    height: int,
) -> CompanionCreative | None:
    """Pick the companion for a slot.

    Prefers an exact size match, otherwise the first offered creative.

    Args:
        companions: Creatives offered with the ad
        width: Slot width in pixels
        height: Slot height in pixels

    Returns:
        Selected creative, or None if nothing was offered
    """
    for creative in companions:
        if creative.matches_size(width, height):
            return creative
    return companions[0] if companions else None


class CompanionOverlay:
    """Owns CompanionState and the display it renders into.

    Attributes:
        display: Surface the creative is rendered into
        hold_seconds: How long a creative stays up after the last show
        width: Preferred slot width
        height: Preferred slot height
        state: Visibility and the live hide timer
        current: Creative currently rendered, if any
    """

    def __init__(
        self,
        display: CompanionDisplay,
        hold_seconds: float = DEFAULT_HOLD_SECONDS,
        width: int = 640,
        height: int = 375,
        metrics: PlaybackMetrics | None = None,
    ) -> None:
        self.display = display
        self.hold_seconds = hold_seconds
        self.width = width
        self.height = height
        self.metrics = metrics
        self.state = CompanionState()
        self.current: CompanionCreative | None = None

    def show(self, companions: Sequence[CompanionCreative]) -> bool:
        """Render a companion and restart the hide timer.

        Must be called from within a running event loop.

        Args:
            companions: Creatives offered with the ad or break

        Returns:
            True if a creative was rendered
        """
        creative = select_companion(companions, self.width, self.height)
        if creative is None:
            logger.debug("No companion offered, overlay unchanged")
            return False

        self._cancel_timer()

        try:
            self.display.render(creative)
        except Exception as e:
            logger.error(f"Companion render failed: {e}")
            self._hide()
            if self.metrics:
                self.metrics.record_error("companion_render")
            return False

        expire = self._expire(self.hold_seconds)
        try:
            timer = asyncio.create_task(expire)
        except RuntimeError as e:
            expire.close()
            logger.error(f"Companion hold timer unavailable: {e}")
            self._hide()
            raise

        self.current = creative
        self.state.hold_timer = timer
        self.state.visible = True

        logger.info(
            f"Companion SHOWN: {creative.width}x{creative.height}, "
            f"hold={self.hold_seconds}s"
        )
        if self.metrics:
            self.metrics.record_companion_shown()
        return True

    async def _expire(self, delay: float) -> None:
        """Hide the creative once the hold duration elapses."""
        await asyncio.sleep(delay)

        if self.state.hold_timer is not asyncio.current_task():
            # Superseded by a newer show
            return

        self.state.hold_timer = None
        logger.info(f"Companion hold expired after {delay}s")
        self._hide()
        if self.metrics:
            self.metrics.record_companion_cleared()

    def teardown(self) -> None:
        """Cancel any live timer and clear the creative unconditionally."""
        had_timer = self.state.has_live_timer
        self._cancel_timer()
        self._hide()
        logger.debug(f"Companion overlay torn down (timer_cancelled={had_timer})")

    def _cancel_timer(self) -> None:
        timer = self.state.hold_timer
        if timer is not None and not timer.done():
            timer.cancel()
        self.state.hold_timer = None

    def _hide(self) -> None:
        try:
            self.display.clear()
        except Exception as e:
            logger.error(f"Companion clear failed: {e}")
        self.state.visible = False
        self.current = None

    @property
    def visible(self) -> bool:
        """Whether a creative is currently rendered."""
        return self.state.visible
