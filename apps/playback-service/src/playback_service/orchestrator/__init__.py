"""
Orchestrator module for playback session lifecycle.

Components:
- SessionManager: session registry with idempotent start/stop
"""

from __future__ import annotations

from playback_service.orchestrator.session_manager import SessionManager

__all__ = [
    "SessionManager",
]
