"""
Metrics module for Prometheus observability.

Components:
- PlaybackMetrics: Prometheus metric definitions and helpers
"""

from __future__ import annotations

from playback_service.metrics.prometheus import PlaybackMetrics

__all__ = [
    "PlaybackMetrics",
]
