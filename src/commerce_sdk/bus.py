"""Notification Bus - process-wide pub/sub for server-emitted events.

Events named by the API in the `_event` field of a response end up here
when the client uses the default event callback. Wildcard subscribers
receive everything.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable, Coroutine
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Notification(BaseModel):
    """A namespaced, non-bubbling, non-cancelable notification."""

    type: str
    bubbles: bool = False
    cancelable: bool = False


# Type for notification callbacks
NotificationCallback = Callable[[Notification], Coroutine[Any, Any, None]]


class Bus:
    """Simple notification bus with wildcard subscription support.

    Subscriber lists are guarded by an asyncio.Lock. Publishing never
    raises on behalf of a subscriber.
    """

    _subscriptions: dict[str, list[NotificationCallback]] = {}
    _lock: asyncio.Lock | None = None

    @classmethod
    def _get_lock(cls) -> asyncio.Lock:
        """Get or create the lock (lazy init for event loop safety)."""
        if cls._lock is None:
            cls._lock = asyncio.Lock()
        return cls._lock

    @classmethod
    async def publish(cls, notification: Notification) -> None:
        """Publish a notification to all subscribers.

        Args:
            notification: The notification; its `type` selects subscribers
        """
        async with cls._get_lock():
            # Copy subscriber lists to avoid mutation during iteration
            specific_subs = list(cls._subscriptions.get(notification.type, []))
            wildcard_subs = list(cls._subscriptions.get("*", []))

        for callback in specific_subs:
            try:
                await callback(notification)
            except Exception:
                logger.exception(f"Error in subscriber for {notification.type}")

        for callback in wildcard_subs:
            try:
                await callback(notification)
            except Exception:
                logger.exception(f"Error in wildcard subscriber for {notification.type}")

    @classmethod
    async def subscribe(
        cls, event_type: str, callback: NotificationCallback
    ) -> Callable[[], None]:
        """Subscribe to one notification type.

        Args:
            event_type: Full notification type (e.g., "Commercejs.cart.updated")
            callback: Async function called with the notification

        Returns:
            Unsubscribe function
        """
        return await cls._subscribe(event_type, callback)

    @classmethod
    async def subscribe_all(cls, callback: NotificationCallback) -> Callable[[], None]:
        """Subscribe to ALL notifications."""
        return await cls._subscribe("*", callback)

    @classmethod
    async def _subscribe(cls, key: str, callback: NotificationCallback) -> Callable[[], None]:
        async with cls._get_lock():
            cls._subscriptions.setdefault(key, []).append(callback)

        def unsubscribe() -> None:
            if key in cls._subscriptions and callback in cls._subscriptions[key]:
                cls._subscriptions[key].remove(callback)

        return unsubscribe

    @classmethod
    async def stream(cls) -> AsyncIterator[Notification]:
        """Yield every notification as it is published.

        Usage:
            async for notification in Bus.stream():
                print(notification.type)
        """
        queue: asyncio.Queue[Notification] = asyncio.Queue()

        async def on_notification(notification: Notification) -> None:
            await queue.put(notification)

        unsubscribe = await cls.subscribe_all(on_notification)

        try:
            while True:
                yield await queue.get()
        finally:
            unsubscribe()

    @classmethod
    def reset(cls) -> None:
        """Reset bus state (for testing)."""
        cls._subscriptions = {}
        cls._lock = None
