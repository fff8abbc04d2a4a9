"""
Unit tests for EventChannel and event models.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from playback_service.events.channel import EventChannel
from playback_service.models.events import (
    AdBreakReadyEvent,
    AdErrorEvent,
    AdStartedEvent,
    BreakEndedEvent,
    BreakStartedEvent,
    ContentPauseRequestedEvent,
    ContentResumeRequestedEvent,
    PlayerEvent,
    parse_ad_event,
)


class TestEventChannel:
    """Tests for publish/subscribe behavior."""

    def test_delivers_in_subscription_order(self) -> None:
        channel: EventChannel[int] = EventChannel("numbers")
        seen: list[tuple[str, int]] = []

        channel.subscribe(lambda e: seen.append(("a", e)))
        channel.subscribe(lambda e: seen.append(("b", e)))
        channel.publish(1)

        assert seen == [("a", 1), ("b", 1)]

    def test_cancel_stops_delivery(self) -> None:
        channel: EventChannel[int] = EventChannel("numbers")
        seen: list[int] = []

        subscription = channel.subscribe(seen.append)
        channel.publish(1)
        subscription.cancel()
        channel.publish(2)

        assert seen == [1]
        assert subscription.cancelled is True
        assert channel.subscriber_count == 0

    def test_cancel_is_idempotent(self) -> None:
        channel: EventChannel[int] = EventChannel("numbers")
        subscription = channel.subscribe(lambda e: None)

        subscription.cancel()
        subscription.cancel()

        assert channel.subscriber_count == 0

    def test_failing_handler_does_not_stop_dispatch(self) -> None:
        channel: EventChannel[int] = EventChannel("numbers")
        seen: list[int] = []

        def broken(event: int) -> None:
            raise RuntimeError("listener bug")

        channel.subscribe(broken)
        channel.subscribe(seen.append)
        channel.publish(7)

        assert seen == [7]

    def test_handler_cancelling_during_dispatch(self) -> None:
        """A handler may cancel a later subscription mid-publish."""
        channel: EventChannel[int] = EventChannel("numbers")
        seen: list[int] = []
        later = None

        def first(event: int) -> None:
            later.cancel()

        channel.subscribe(first)
        later = channel.subscribe(seen.append)
        channel.publish(1)

        assert seen == []

    def test_close_cancels_all(self) -> None:
        channel: EventChannel[int] = EventChannel("numbers")
        subs = [channel.subscribe(lambda e: None) for _ in range(3)]

        channel.close()

        assert channel.subscriber_count == 0
        assert all(s.cancelled for s in subs)


class TestAdEventParsing:
    """Tests for the ad event tagged variant."""

    @pytest.mark.parametrize(
        ("payload", "expected_type"),
        [
            ({"type": "ready"}, AdBreakReadyEvent),
            ({"type": "break_started"}, BreakStartedEvent),
            ({"type": "break_ended"}, BreakEndedEvent),
            ({"type": "ad_started", "ad_id": "ad-1"}, AdStartedEvent),
            ({"type": "content_pause_requested"}, ContentPauseRequestedEvent),
            ({"type": "content_resume_requested"}, ContentResumeRequestedEvent),
            ({"type": "error", "reason": "VAST timeout"}, AdErrorEvent),
        ],
    )
    def test_discriminates_on_type(self, payload: dict, expected_type: type) -> None:
        assert isinstance(parse_ad_event(payload), expected_type)

    def test_ready_with_break_index(self) -> None:
        event = parse_ad_event({"type": "ready", "break_index": 2})
        assert event.break_index == 2

    def test_break_started_with_companions(self) -> None:
        event = parse_ad_event(
            {
                "type": "break_started",
                "companions": [
                    {"width": 640, "height": 375, "resource_url": "https://cdn/a.png"}
                ],
            }
        )
        assert event.companions[0].width == 640

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            parse_ad_event({"type": "all_ads_completed"})

    def test_error_requires_reason(self) -> None:
        with pytest.raises(ValidationError):
            parse_ad_event({"type": "error"})

    def test_negative_break_index_rejected(self) -> None:
        with pytest.raises(ValidationError):
            parse_ad_event({"type": "ready", "break_index": -1})


class TestPlayerEvent:
    """Tests for PlayerEvent."""

    def test_unknown_player_event_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PlayerEvent(type="progress")

    def test_events_are_frozen(self) -> None:
        event = PlayerEvent(type="timeupdate", current_time=1.0)
        with pytest.raises(ValidationError):
            event.current_time = 2.0
