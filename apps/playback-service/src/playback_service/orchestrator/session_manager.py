"""
Session Manager for playback session lifecycle orchestration.

Manages:
- Session registry (session_id -> PlaybackSession mapping)
- Lifecycle management (start/stop/restart sessions on demand)
- Idempotency (prevents duplicate sessions for the same id)
- Graceful cleanup on shutdown
"""

from __future__ import annotations

import asyncio
import logging

from playback_service.metrics.prometheus import PlaybackMetrics
from playback_service.session.playback_session import PlaybackSession, SessionConfig

logger = logging.getLogger(__name__)


class SessionManager:
    """Manages playback session lifecycle.

    Provides idempotent session creation and cleanup:
    - start_session(): Creates session if not exists, safe to call multiple times
    - stop_session(): Stops and removes session, handles nonexistent gracefully
    - restart_session(): Stops any existing session, then starts a fresh one
    - get_session(): Retrieves active session or None
    - cleanup_all(): Stops all sessions on shutdown

    Uses per-session locks to prevent concurrent creation and teardown.
    """

    def __init__(self) -> None:
        """Initialize session manager with empty registry."""
        self._sessions: dict[str, PlaybackSession] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._metrics = PlaybackMetrics(session_id="manager")
        logger.info("SessionManager initialized")

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        if session_id not in self._locks:
            self._locks[session_id] = asyncio.Lock()
        return self._locks[session_id]

    async def start_session(self, config: SessionConfig) -> PlaybackSession:
        """Start session (idempotent - safe to call multiple times).

        Args:
            config: Session configuration

        Returns:
            The new session, or the existing one for this id

        Raises:
            Exception: If session startup fails (session is not registered)
        """
        session_id = config.session_id

        async with self._lock_for(session_id):
            existing = self._sessions.get(session_id)
            if existing is not None:
                logger.debug(
                    f"Session {session_id} already exists, skipping creation",
                    extra={"session_id": session_id},
                )
                return existing

            return await self._create(config)

    async def _create(self, config: SessionConfig) -> PlaybackSession:
        session_id = config.session_id
        logger.info(
            f"Starting session {session_id}",
            extra={
                "session_id": session_id,
                "cue_tolerance_s": config.settings.cue_tolerance_s,
                "companion_hold_s": config.settings.companion_hold_s,
            },
        )

        try:
            session = PlaybackSession(config)
            await session.start()
        except Exception as e:
            logger.error(
                f"Failed to start session {session_id}: {e}",
                extra={"session_id": session_id, "error": str(e)},
                exc_info=True,
            )
            # Do NOT add to registry if startup failed
            raise

        self._sessions[session_id] = session
        self._metrics.set_active_sessions(len(self._sessions))
        logger.info(
            f"Session started for {session_id}",
            extra={"session_id": session_id, "active_sessions": len(self._sessions)},
        )
        return session

    async def stop_session(self, session_id: str) -> None:
        """Stop and remove session.

        If the session doesn't exist, this is a no-op. The session is
        removed from the registry even if its stop() fails.

        Args:
            session_id: Session identifier
        """
        if session_id not in self._locks:
            logger.debug(
                f"No lock for session {session_id}, session likely doesn't exist",
                extra={"session_id": session_id},
            )
            return

        async with self._locks[session_id]:
            await self._stop_locked(session_id)

    async def _stop_locked(self, session_id: str) -> None:
        session = self._sessions.get(session_id)
        if session is None:
            logger.debug(
                f"Session {session_id} not found, nothing to stop",
                extra={"session_id": session_id},
            )
            return

        try:
            await session.stop()
            logger.info(
                f"Session stopped for {session_id}",
                extra={"session_id": session_id},
            )
        except Exception as e:
            logger.error(
                f"Error stopping session {session_id}: {e}",
                extra={"session_id": session_id, "error": str(e)},
                exc_info=True,
            )
        finally:
            del self._sessions[session_id]
            self._metrics.set_active_sessions(len(self._sessions))

    async def restart_session(self, config: SessionConfig) -> PlaybackSession:
        """Replace any existing session for this id with a fresh one.

        Args:
            config: Session configuration

        Returns:
            The new session
        """
        async with self._lock_for(config.session_id):
            await self._stop_locked(config.session_id)
            return await self._create(config)

    def get_session(self, session_id: str) -> PlaybackSession | None:
        """Get active session if exists.

        Args:
            session_id: Session identifier

        Returns:
            PlaybackSession instance or None if not found
        """
        return self._sessions.get(session_id)

    def list_sessions(self) -> list[PlaybackSession]:
        """All active sessions, in creation order."""
        return list(self._sessions.values())

    @property
    def active_count(self) -> int:
        """Number of registered sessions."""
        return len(self._sessions)

    async def cleanup_all(self) -> None:
        """Stop and cleanup all active sessions.

        Called during service shutdown. Stops all sessions in parallel
        and continues even if some fail.
        """
        if not self._sessions:
            logger.info("No active sessions to cleanup")
            return

        session_ids = list(self._sessions.keys())
        logger.info(
            f"Cleaning up {len(session_ids)} active sessions",
            extra={"active_sessions": len(session_ids)},
        )

        results = await asyncio.gather(
            *(self.stop_session(session_id) for session_id in session_ids),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        if failures:
            logger.warning(
                f"Some sessions failed to stop cleanly: {len(failures)} failures",
                extra={"failure_count": len(failures)},
            )

        logger.info(
            "Session cleanup complete",
            extra={"total_stopped": len(session_ids), "failures": len(failures)},
        )
