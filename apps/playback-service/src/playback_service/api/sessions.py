"""
Playback session inspection API endpoints.

Read-only views of live sessions: scheduler counters, phase, loaded
schedule and the latest playback snapshot.
"""

import logging
import math
from typing import Optional

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel, Field

from playback_service.orchestrator.session_manager import SessionManager
from playback_service.session.playback_session import PlaybackSession

router = APIRouter()
logger = logging.getLogger(__name__)


class CuePointResponse(BaseModel):
    """Cue point as reported by the API."""

    index: int
    offset_seconds: float
    state: str


class SnapshotResponse(BaseModel):
    """Playback snapshot as reported by the API."""

    current_time: float
    duration: Optional[float] = Field(
        default=None, description="Content duration, null until metadata loads"
    )
    paused: bool
    seeking: bool
    playback_rate: float


class SessionSummary(BaseModel):
    """Short session listing entry."""

    session_id: str
    status: str
    phase: str


class SessionDetail(SessionSummary):
    """Full session state."""

    started_count: int
    ready_count: int
    break_in_progress: bool
    schedule: list[CuePointResponse]
    snapshot: SnapshotResponse
    companion_visible: bool
    last_error: Optional[str] = None


class SessionList(BaseModel):
    """Active sessions."""

    sessions: list[SessionSummary]
    count: int


def get_session_manager(request: Request) -> SessionManager:
    """Session manager owned by the application."""
    return request.app.state.session_manager


def _summary(session: PlaybackSession) -> SessionSummary:
    return SessionSummary(
        session_id=session.session_id,
        status=session.status,
        phase=session.scheduler.phase,
    )


def _detail(session: PlaybackSession) -> SessionDetail:
    state = session.scheduler.state
    snap = session.mirror.snapshot
    return SessionDetail(
        session_id=session.session_id,
        status=session.status,
        phase=session.scheduler.phase,
        started_count=state.started_count,
        ready_count=state.ready_count,
        break_in_progress=state.break_in_progress,
        schedule=[
            CuePointResponse(index=cue.index, offset_seconds=cue.offset_seconds, state=cue.state)
            for cue in session.scheduler.schedule
        ],
        snapshot=SnapshotResponse(
            current_time=snap.current_time,
            duration=snap.duration if math.isfinite(snap.duration) else None,
            paused=snap.paused,
            seeking=snap.seeking,
            playback_rate=snap.playback_rate,
        ),
        companion_visible=session.overlay.visible,
        last_error=str(session.last_error) if session.last_error else None,
    )


@router.get("", response_model=SessionList)
async def list_sessions(request: Request) -> SessionList:
    """List active playback sessions."""
    manager = get_session_manager(request)
    sessions = [_summary(s) for s in manager.list_sessions()]
    return SessionList(sessions=sessions, count=len(sessions))


@router.get("/{session_id}", response_model=SessionDetail)
async def get_session(session_id: str, request: Request) -> SessionDetail:
    """
    Get scheduler and playback state for one session.

    Args:
        session_id: Session identifier

    Returns:
        SessionDetail for the session

    Raises:
        HTTPException: 404 if no such session is active
    """
    session = get_session_manager(request).get_session(session_id)
    if session is None:
        logger.debug(f"Session lookup miss: {session_id}", extra={"session_id": session_id})
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session not found: {session_id}",
        )
    return _detail(session)
