"""
Typed event channel with cancellable subscriptions.

Handlers run synchronously, in subscription order, inside publish().
A handler that raises is logged and skipped; dispatch to the remaining
handlers continues so one faulty listener cannot stall the session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Subscription:
    """Cancellation token returned by EventChannel.subscribe().

    Attributes:
        name: Label used in log messages
    """

    def __init__(self, channel: EventChannel, handler: Callable, name: str) -> None:
        self._channel = channel
        self._handler = handler
        self.name = name
        self._cancelled = False

    def cancel(self) -> None:
        """Stop delivering events to this subscription (idempotent)."""
        if self._cancelled:
            return
        self._cancelled = True
        self._channel._remove(self)

    @property
    def cancelled(self) -> bool:
        """Whether cancel() has been called."""
        return self._cancelled

    def _deliver(self, event: object) -> None:
        if not self._cancelled:
            self._handler(event)


class EventChannel(Generic[T]):
    """Synchronous publish/subscribe channel for one event type.

    Attributes:
        name: Channel name used in log messages
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._subscriptions: list[Subscription] = []

    def subscribe(self, handler: Callable[[T], None], name: str | None = None) -> Subscription:
        """Register a handler.

        Args:
            handler: Callable receiving each published event
            name: Optional label for logging

        Returns:
            Subscription token; call cancel() to unsubscribe
        """
        subscription = Subscription(self, handler, name or getattr(handler, "__name__", "handler"))
        self._subscriptions.append(subscription)
        logger.debug(
            f"Subscribed {subscription.name} to {self.name}, "
            f"subscribers={len(self._subscriptions)}"
        )
        return subscription

    def publish(self, event: T) -> None:
        """Deliver an event to every live subscription.

        Args:
            event: Event to dispatch
        """
        # Copy so handlers may cancel or subscribe while dispatching
        for subscription in list(self._subscriptions):
            try:
                subscription._deliver(event)
            except Exception as e:
                logger.error(
                    f"Handler {subscription.name} failed on {self.name}: {e}",
                    exc_info=True,
                )

    def close(self) -> None:
        """Cancel every subscription."""
        for subscription in list(self._subscriptions):
            subscription.cancel()

    def _remove(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    @property
    def subscriber_count(self) -> int:
        """Number of live subscriptions."""
        return len(self._subscriptions)
