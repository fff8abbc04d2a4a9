"""
Event dispatch module.

Components:
- EventChannel: synchronous typed publish/subscribe channel
- Subscription: cancellation token for a registered handler
"""

from __future__ import annotations

from playback_service.events.channel import EventChannel, Subscription

__all__ = [
    "EventChannel",
    "Subscription",
]
