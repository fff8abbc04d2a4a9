"""
Pytest fixtures for playback service tests.

Includes fixtures for:
- FastAPI test client
- In-memory content player, ads loader/manager, schedule source and
  companion display implementing the collaborator protocols
- Session configuration with short timeouts
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

from playback_service.config.playback_config import PlaybackConfig
from playback_service.events.channel import EventChannel, Subscription
from playback_service.main import app
from playback_service.models.creatives import CompanionCreative
from playback_service.models.events import AdEvent, PlayerEvent, parse_ad_event
from playback_service.session.playback_session import SessionConfig

# =============================================================================
# FastAPI Test Client
# =============================================================================


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client fixture."""
    return TestClient(app)


# =============================================================================
# Collaborator fakes
# =============================================================================


class FakePlayer:
    """Content player that records play/pause and emits events on demand."""

    def __init__(self) -> None:
        self.events: EventChannel[PlayerEvent] = EventChannel("player")
        self.play_calls = 0
        self.pause_calls = 0
        self.current_time = 0.0
        self.duration: Optional[float] = None
        self.paused = True
        self.playback_rate = 1.0

    def play(self) -> None:
        self.play_calls += 1
        self.paused = False

    def pause(self) -> None:
        self.pause_calls += 1
        self.paused = True

    def emit(self, event_type: str, current_time: Optional[float] = None, **fields: Any) -> None:
        if current_time is not None:
            self.current_time = current_time
        if "duration" in fields:
            self.duration = fields.pop("duration")
        self.events.publish(
            PlayerEvent(
                type=event_type,
                current_time=self.current_time,
                duration=self.duration,
                **fields,
            )
        )

    def load_metadata(self, duration: float) -> None:
        self.emit("loadedmetadata", current_time=0.0, duration=duration)

    def tick(self, current_time: float) -> None:
        self.emit("timeupdate", current_time=current_time)


class FakeAdsManager:
    """Ads manager with a scripted cue list and an in-memory event channel."""

    def __init__(self, cues: Sequence[float] = (0.0, 15.0, 40.0)) -> None:
        self.cues = list(cues)
        self.channel: EventChannel[AdEvent] = EventChannel("ads")
        self.start_calls = 0
        self.start_error: Optional[Exception] = None
        self.init_error: Optional[Exception] = None
        self.init_args: Optional[tuple[int, int]] = None
        self.destroyed = False

    def cue_points(self) -> Sequence[float]:
        return self.cues

    def subscribe(self, handler) -> Subscription:
        return self.channel.subscribe(handler, name="session")

    def init(self, width: int, height: int) -> None:
        if self.init_error is not None:
            raise self.init_error
        self.init_args = (width, height)

    def start(self) -> None:
        if self.start_error is not None:
            raise self.start_error
        self.start_calls += 1

    def destroy(self) -> None:
        self.destroyed = True

    def emit(self, event_type: str, **fields: Any) -> None:
        self.channel.publish(parse_ad_event({"type": event_type, **fields}))


class FakeAdsLoader:
    """Ads loader returning a preset manager (or raising)."""

    def __init__(self, manager: Optional[FakeAdsManager] = None) -> None:
        self.manager = manager or FakeAdsManager()
        self.error: Optional[Exception] = None
        self.documents: list[str] = []
        self.clock = None
        self.content_complete_calls = 0

    async def request_ads(self, document: str, clock) -> FakeAdsManager:
        self.documents.append(document)
        self.clock = clock
        if self.error is not None:
            raise self.error
        return self.manager

    def content_complete(self) -> None:
        self.content_complete_calls += 1


class FakeScheduleSource:
    """Schedule source returning a fixed document."""

    def __init__(self, document: str = "<vmap/>") -> None:
        self.document = document
        self.error: Optional[Exception] = None
        self.durations: list[float] = []

    async def fetch(self, duration: float) -> str:
        self.durations.append(duration)
        if self.error is not None:
            raise self.error
        return self.document


class FakeDisplay:
    """Companion display recording renders and clears."""

    def __init__(self) -> None:
        self.rendered: list[CompanionCreative] = []
        self.clear_calls = 0
        self.render_error: Optional[Exception] = None

    def render(self, creative: CompanionCreative) -> None:
        if self.render_error is not None:
            raise self.render_error
        self.rendered.append(creative)

    def clear(self) -> None:
        self.clear_calls += 1


@pytest.fixture
def player() -> FakePlayer:
    return FakePlayer()


@pytest.fixture
def ads_manager() -> FakeAdsManager:
    return FakeAdsManager()


@pytest.fixture
def ads_loader(ads_manager: FakeAdsManager) -> FakeAdsLoader:
    return FakeAdsLoader(ads_manager)


@pytest.fixture
def schedule_source() -> FakeScheduleSource:
    return FakeScheduleSource()


@pytest.fixture
def display() -> FakeDisplay:
    return FakeDisplay()


@pytest.fixture
def make_manager():
    """Factory for additional ads managers."""
    return FakeAdsManager


@pytest.fixture
def playback_settings() -> PlaybackConfig:
    """Settings with short timers for tests."""
    return PlaybackConfig(metadata_timeout_s=0.1, companion_hold_s=0.05)


@pytest.fixture
def session_config(
    player: FakePlayer,
    schedule_source: FakeScheduleSource,
    ads_loader: FakeAdsLoader,
    display: FakeDisplay,
    playback_settings: PlaybackConfig,
) -> SessionConfig:
    """Session configuration wired to the fakes."""
    return SessionConfig(
        session_id="test-session",
        player=player,
        schedule_source=schedule_source,
        ads_loader=ads_loader,
        display=display,
        settings=playback_settings,
    )


# =============================================================================
# Companion creatives
# =============================================================================


@pytest.fixture
def companion_exact() -> CompanionCreative:
    return CompanionCreative(
        width=640,
        height=375,
        resource_url="https://cdn.example.com/companion-640x375.png",
        creative_type="image/png",
    )


@pytest.fixture
def companion_other() -> CompanionCreative:
    return CompanionCreative(
        width=300,
        height=250,
        html_content="<div>sponsor</div>",
    )
