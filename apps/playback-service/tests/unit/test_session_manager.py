"""
Unit tests for SessionManager.

Tests session lifecycle orchestration, idempotency, and registry management.
"""

from __future__ import annotations

from dataclasses import replace
from unittest.mock import AsyncMock, patch

import pytest

from playback_service.orchestrator.session_manager import SessionManager


@pytest.fixture
def manager() -> SessionManager:
    """Create a SessionManager instance."""
    return SessionManager()


class TestSessionManagerInitialization:
    """Test SessionManager initialization."""

    def test_manager_initializes_empty_registry(self, manager):
        """Manager starts with empty session registry."""
        assert manager.active_count == 0
        assert manager.list_sessions() == []
        assert len(manager._locks) == 0


class TestStartSession:
    """Test session creation."""

    @pytest.mark.asyncio
    async def test_start_session_creates_and_starts(self, manager, session_config):
        """Starting a session creates a PlaybackSession and starts it."""
        with patch(
            "playback_service.orchestrator.session_manager.PlaybackSession"
        ) as mock_session_class:
            mock_session = AsyncMock()
            mock_session_class.return_value = mock_session

            session = await manager.start_session(session_config)

            mock_session_class.assert_called_once_with(session_config)
            mock_session.start.assert_called_once()
            assert session is mock_session
            assert manager.get_session("test-session") is mock_session

    @pytest.mark.asyncio
    async def test_start_session_is_idempotent(self, manager, session_config):
        """Calling start_session twice for the same id creates one session."""
        with patch(
            "playback_service.orchestrator.session_manager.PlaybackSession"
        ) as mock_session_class:
            mock_session_class.return_value = AsyncMock()

            first = await manager.start_session(session_config)
            second = await manager.start_session(session_config)

            assert first is second
            assert mock_session_class.call_count == 1
            assert manager.active_count == 1

    @pytest.mark.asyncio
    async def test_failed_start_not_registered(self, manager, session_config):
        """A session whose start() raises is not added to the registry."""
        with patch(
            "playback_service.orchestrator.session_manager.PlaybackSession"
        ) as mock_session_class:
            mock_session = AsyncMock()
            mock_session.start.side_effect = RuntimeError("player unavailable")
            mock_session_class.return_value = mock_session

            with pytest.raises(RuntimeError):
                await manager.start_session(session_config)

            assert manager.get_session("test-session") is None


class TestStopSession:
    """Test session teardown."""

    @pytest.mark.asyncio
    async def test_stop_nonexistent_is_noop(self, manager):
        await manager.stop_session("missing")
        assert manager.active_count == 0

    @pytest.mark.asyncio
    async def test_stop_removes_even_if_stop_fails(self, manager, session_config):
        with patch(
            "playback_service.orchestrator.session_manager.PlaybackSession"
        ) as mock_session_class:
            mock_session = AsyncMock()
            mock_session.stop.side_effect = RuntimeError("teardown error")
            mock_session_class.return_value = mock_session

            await manager.start_session(session_config)
            await manager.stop_session("test-session")

            mock_session.stop.assert_called_once()
            assert manager.get_session("test-session") is None


class TestRestartSession:
    """Test session replacement."""

    @pytest.mark.asyncio
    async def test_restart_stops_old_session_first(self, manager, session_config):
        with patch(
            "playback_service.orchestrator.session_manager.PlaybackSession"
        ) as mock_session_class:
            old, new = AsyncMock(), AsyncMock()
            mock_session_class.side_effect = [old, new]

            await manager.start_session(session_config)
            restarted = await manager.restart_session(session_config)

            old.stop.assert_called_once()
            new.start.assert_called_once()
            assert restarted is new
            assert manager.get_session("test-session") is new

    @pytest.mark.asyncio
    async def test_restart_without_existing_session(self, manager, session_config):
        with patch(
            "playback_service.orchestrator.session_manager.PlaybackSession"
        ) as mock_session_class:
            mock_session_class.return_value = AsyncMock()

            await manager.restart_session(session_config)

            assert manager.active_count == 1


class TestCleanupAll:
    """Test shutdown cleanup with real sessions."""

    @pytest.mark.asyncio
    async def test_cleanup_all_stops_every_session(self, manager, session_config, player):
        first = await manager.start_session(session_config)
        second = await manager.start_session(replace(session_config, session_id="other"))
        player.load_metadata(60.0)
        await first.wait_started()
        await second.wait_started()

        await manager.cleanup_all()

        assert manager.active_count == 0
        assert first.status == "stopped"
        assert second.status == "stopped"
        assert player.events.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_cleanup_all_with_no_sessions(self, manager):
        await manager.cleanup_all()
        assert manager.active_count == 0
