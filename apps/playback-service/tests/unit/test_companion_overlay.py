"""
Unit tests for CompanionOverlay and companion selection.

Timers use a 50ms hold so expiry can be observed quickly.
"""

from __future__ import annotations

import asyncio

import pytest

from playback_service.companion.overlay import CompanionOverlay, select_companion
from playback_service.models.creatives import CompanionCreative

HOLD = 0.05


@pytest.fixture
def overlay(display) -> CompanionOverlay:
    return CompanionOverlay(display=display, hold_seconds=HOLD)


class TestSelectCompanion:
    """Tests for select_companion()."""

    def test_prefers_exact_size(self, companion_exact, companion_other) -> None:
        chosen = select_companion([companion_other, companion_exact], 640, 375)
        assert chosen is companion_exact

    def test_falls_back_to_first(self, companion_other) -> None:
        second = CompanionCreative(width=728, height=90, resource_url="https://cdn/b.png")

        chosen = select_companion([companion_other, second], 640, 375)

        assert chosen is companion_other

    def test_none_when_nothing_offered(self) -> None:
        assert select_companion([], 640, 375) is None


class TestCompanionCreative:
    """Tests for the creative model."""

    def test_requires_content(self) -> None:
        with pytest.raises(ValueError):
            CompanionCreative(width=640, height=375)

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError):
            CompanionCreative(width=0, height=375, resource_url="https://cdn/a.png")


class TestCompanionOverlayShow:
    """Tests for show()."""

    @pytest.mark.asyncio
    async def test_show_renders_and_arms_timer(self, overlay, display, companion_exact) -> None:
        assert overlay.show([companion_exact]) is True

        assert display.rendered == [companion_exact]
        assert overlay.visible is True
        assert overlay.current is companion_exact
        assert overlay.state.has_live_timer

        overlay.teardown()

    @pytest.mark.asyncio
    async def test_show_without_companions_is_noop(self, overlay, display) -> None:
        assert overlay.show([]) is False

        assert display.rendered == []
        assert overlay.visible is False
        assert overlay.state.hold_timer is None

    def test_show_outside_event_loop_leaves_overlay_hidden(
        self, overlay, display, companion_exact
    ) -> None:
        """Without a running loop no timer can be armed, so nothing stays visible."""
        with pytest.raises(RuntimeError):
            overlay.show([companion_exact])

        assert overlay.visible is False
        assert overlay.current is None
        assert overlay.state.hold_timer is None
        assert display.clear_calls == 1

    @pytest.mark.asyncio
    async def test_hold_expiry_clears_creative(self, overlay, display, companion_exact) -> None:
        overlay.show([companion_exact])

        await asyncio.sleep(HOLD * 3)

        assert display.clear_calls == 1
        assert overlay.visible is False
        assert overlay.state.hold_timer is None
        assert overlay.current is None

    @pytest.mark.asyncio
    async def test_consecutive_shows_keep_one_live_timer(
        self, overlay, display, companion_exact
    ) -> None:
        """After N shows exactly one timer is live; clear follows the last show."""
        timers = []
        for _ in range(4):
            overlay.show([companion_exact])
            timers.append(overlay.state.hold_timer)
            await asyncio.sleep(HOLD / 5)

        await asyncio.sleep(0)
        live = [t for t in timers if not t.done()]
        assert len(live) == 1
        assert live[0] is overlay.state.hold_timer
        assert display.clear_calls == 0
        assert overlay.visible is True

        await asyncio.sleep(HOLD * 3)

        assert display.clear_calls == 1
        assert overlay.visible is False

    @pytest.mark.asyncio
    async def test_render_failure_leaves_overlay_hidden(
        self, overlay, display, companion_exact
    ) -> None:
        display.render_error = RuntimeError("slot missing")

        assert overlay.show([companion_exact]) is False

        assert overlay.visible is False
        assert overlay.state.hold_timer is None

    @pytest.mark.asyncio
    async def test_render_failure_cancels_previous_timer(
        self, overlay, display, companion_exact
    ) -> None:
        overlay.show([companion_exact])
        previous = overlay.state.hold_timer

        display.render_error = RuntimeError("slot missing")
        overlay.show([companion_exact])
        await asyncio.sleep(0)

        assert previous.cancelled()
        assert overlay.visible is False
        assert overlay.state.hold_timer is None


class TestCompanionOverlayTeardown:
    """Tests for teardown()."""

    @pytest.mark.asyncio
    async def test_teardown_cancels_timer_and_clears(
        self, overlay, display, companion_exact
    ) -> None:
        overlay.show([companion_exact])
        timer = overlay.state.hold_timer

        overlay.teardown()
        await asyncio.sleep(0)

        assert timer.cancelled()
        assert display.clear_calls == 1
        assert overlay.visible is False

        await asyncio.sleep(HOLD * 2)
        assert display.clear_calls == 1

    def test_teardown_without_timer_still_clears(self, overlay, display) -> None:
        overlay.teardown()

        assert display.clear_calls == 1
        assert overlay.visible is False
