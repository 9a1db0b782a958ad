"""Debug console sink.

In debug mode the API attaches diagnostics to responses in `_console`,
shaped as `[level, *args]`. They are written to the
`commerce_sdk.console` logger.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

DebugSink = Callable[..., None]

LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "log": logging.INFO,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_notice_shown = False


def console_helper(level: str, *args: Any) -> None:
    """Write one diagnostic entry. Unknown levels log at INFO."""
    log_level = LEVELS.get(str(level).lower(), logging.INFO)
    logger.log(log_level, " ".join(str(arg) for arg in args))


def debugger_on_notice() -> None:
    """Log a one-time notice that debug mode is active."""
    global _notice_shown
    if _notice_shown:
        return
    _notice_shown = True
    logger.warning(
        "Commerce SDK debug mode is enabled. API diagnostics will be logged; "
        "disable debug mode in production."
    )
