"""Commerce SDK - Python client for the Chec commerce API.

All resource calls go through Commerce.request, which:
- authenticates with the public key
- sends GET data as query parameters and flattens other payloads
- strips the `_event`/`_console` envelope keys from responses
- publishes `_event` names as notifications on the Bus
- raises CommerceError for any failed request
"""

from .bus import Bus, Notification
from .client import Commerce
from .config import ClientConfig
from .encoding import FormPayload, Shape, classify, encode
from .envelope import ServerEnvelope, normalize_response
from .errors import CommerceError, CommerceSDKError, ConfigurationError, translate_error
from .events import default_event_callback, emit_event

__all__ = [
    # Client
    "Commerce",
    "ClientConfig",
    # Pipeline
    "encode",
    "classify",
    "Shape",
    "FormPayload",
    "ServerEnvelope",
    "normalize_response",
    "translate_error",
    # Events
    "Bus",
    "Notification",
    "default_event_callback",
    "emit_event",
    # Errors
    "CommerceSDKError",
    "CommerceError",
    "ConfigurationError",
]
