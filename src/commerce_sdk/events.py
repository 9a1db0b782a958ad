"""Event emission for server-emitted `_event` names.

The client only ever talks to an `EventCallback`. The default callback
adapts event names onto the process-wide notification `Bus`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from .bus import Bus, Notification

logger = logging.getLogger(__name__)

EVENT_NAMESPACE = "Commercejs"

EventCallback = Callable[[str], None]

# Strong references to in-flight publish tasks
_pending: set[asyncio.Task[None]] = set()


def notification_type(event_name: str) -> str:
    """Namespaced notification type for an API event name."""
    return f"{EVENT_NAMESPACE}.{event_name}"


def default_event_callback(event_name: str) -> None:
    """Publish `event_name` on the Bus without waiting for subscribers."""
    notification = Notification(type=notification_type(event_name))
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.debug(f"No running event loop, dropping {notification.type}")
        return

    task = loop.create_task(Bus.publish(notification))
    _pending.add(task)
    task.add_done_callback(_pending.discard)


def emit_event(callback: EventCallback, event_name: str) -> None:
    """Invoke an event callback, isolating any failure it raises."""
    try:
        callback(event_name)
    except Exception:
        logger.exception(f"Event callback failed for {event_name!r}")
