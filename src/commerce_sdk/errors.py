"""SDK exceptions and transport failure translation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from .console import DebugSink

logger = logging.getLogger(__name__)


class CommerceSDKError(Exception):
    """Base class for all SDK errors."""


class ConfigurationError(CommerceSDKError, ValueError):
    """Raised when a client is constructed with unusable configuration."""


class CommerceError(CommerceSDKError):
    """Uniform error for any failed API request.

    Attributes:
        message: One-line summary including status code and text
        status_code: HTTP status, or 0 when no response was received
        status_text: HTTP reason phrase, or the kind of network failure
        data: Decoded response body, if any
        original_error: The exception this error was translated from
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        status_text: str,
        data: Any = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.status_text = status_text
        self.data = data
        self.original_error = original_error

    def __repr__(self) -> str:
        return f"CommerceError(status_code={self.status_code}, status_text={self.status_text!r})"


def decode_body(response: httpx.Response) -> Any:
    """Decode a response body as JSON, falling back to text."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _failure_details(error: httpx.HTTPError | TimeoutError) -> tuple[int, str, Any]:
    if isinstance(error, httpx.HTTPStatusError):
        response = error.response
        return response.status_code, response.reason_phrase, decode_body(response)
    if isinstance(error, (httpx.TimeoutException, TimeoutError)):
        return 0, "Request Timeout", None
    return 0, "Network Error", None


def translate_error(
    error: httpx.HTTPError | TimeoutError, debug_sink: DebugSink | None = None
) -> CommerceError:
    """Convert an httpx failure into a CommerceError.

    Failures without a response (DNS, refused connection, timeout, or the
    whole-request deadline expiring) get a synthetic status code of 0.

    Args:
        error: The transport failure or deadline TimeoutError
        debug_sink: Receives the formatted failure when debugging

    Returns:
        The translated error, ready to raise
    """
    status_code, status_text, data = _failure_details(error)

    if debug_sink is not None:
        header = f"[{status_code}] Type: {status_text}"
        msg = data if isinstance(data, str) else status_text
        try:
            debug_sink("error", header, msg, data)
        except Exception:
            logger.exception("Debug sink failed while reporting an error")

    return CommerceError(
        f"Unsuccessful response ({status_code}: {status_text}) received",
        status_code=status_code,
        status_text=status_text,
        data=data,
        original_error=error,
    )
