"""
Companion overlay.

Components:
- CompanionOverlay: renders the companion creative and owns its hide timer
- select_companion: picks the creative for the configured slot size
"""

from __future__ import annotations

from playback_service.companion.overlay import CompanionOverlay, select_companion

__all__ = [
    "CompanionOverlay",
    "select_companion",
]
