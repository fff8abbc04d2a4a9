"""
Configuration module for playback service.

This module provides Pydantic-based configuration models
loaded from environment variables.

Exports:
    PlaybackConfig: Session timing and slot sizes (PLAYBACK_ prefix)
"""

from playback_service.config.playback_config import PlaybackConfig

__all__ = [
    "PlaybackConfig",
]
