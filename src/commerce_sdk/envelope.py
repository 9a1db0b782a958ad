"""Server response envelope and normalization.

Object-shaped response bodies may carry two reserved keys next to the
domain data:

- `_event`: name of a business event to surface locally
- `_console`: debug diagnostics for the debug sink

Neither is ever returned to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .console import DebugSink
from .encoding import Shape, classify
from .events import EventCallback, emit_event

logger = logging.getLogger(__name__)

EVENT_KEY = "_event"
CONSOLE_KEY = "_console"


@dataclass
class ServerEnvelope:
    """Typed view of an object-shaped response body."""

    event: str | None = None
    diagnostics: list[Any] | None = None
    fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_body(cls, body: Mapping[str, Any]) -> ServerEnvelope:
        fields = {k: v for k, v in body.items() if k not in (EVENT_KEY, CONSOLE_KEY)}

        event = body.get(EVENT_KEY)
        if not isinstance(event, str) or not event:
            event = None

        console = body.get(CONSOLE_KEY)
        match classify(console):
            case Shape.SEQUENCE:
                diagnostics = list(console)
            case Shape.MAPPING:
                diagnostics = [console]
            case _:
                diagnostics = None

        return cls(event=event, diagnostics=diagnostics, fields=fields)


def normalize_response(
    body: Any,
    *,
    event_callback: EventCallback | None = None,
    debug_sink: DebugSink | None = None,
) -> Any:
    """Strip the envelope from a decoded response body.

    Args:
        body: Decoded JSON (or text) body
        event_callback: Called with the `_event` name, if any
        debug_sink: Receives `_console` diagnostics, if any

    Returns:
        Domain fields for object bodies; lists and scalars unchanged.
    """
    if classify(body) is not Shape.MAPPING:
        return body

    envelope = ServerEnvelope.from_body(body)

    if debug_sink is not None and envelope.diagnostics:
        try:
            debug_sink(*envelope.diagnostics)
        except Exception:
            logger.exception("Debug sink failed while forwarding diagnostics")

    if envelope.event is not None and event_callback is not None:
        emit_event(event_callback, envelope.event)

    return envelope.fields
