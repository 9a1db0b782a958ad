"""Client configuration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any

from .console import DebugSink, console_helper
from .errors import ConfigurationError
from .events import EventCallback, default_event_callback

DEFAULT_URL = "https://api.chec.io/"
DEFAULT_VERSION = "v1"
DEFAULT_TIMEOUT_MS = 60000


@dataclass(frozen=True)
class ClientConfig:
    """Immutable settings of one Commerce client."""

    public_key: str = ""
    debug: bool = False

    # Connection settings
    url: str = DEFAULT_URL
    version: str = DEFAULT_VERSION
    timeout_ms: int | None = None

    # Extra httpx options: method/url/params/headers apply to the request,
    # everything else to httpx.AsyncClient
    transport_overrides: Mapping[str, Any] = field(default_factory=dict)

    # Hooks
    event_callback: EventCallback | None = default_event_callback
    debug_sink: DebugSink | None = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "transport_overrides", MappingProxyType(dict(self.transport_overrides))
        )

    @classmethod
    def build(
        cls, public_key: str, debug: bool = False, config: Mapping[str, Any] | None = None
    ) -> ClientConfig:
        """Build a config from a partial mapping of overrides.

        Raises:
            ConfigurationError: If the mapping holds unknown keys
        """
        options = dict(config or {})
        known = {f.name for f in fields(cls)} - {"public_key", "debug"}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration option(s): {', '.join(unknown)}")

        if debug and options.get("debug_sink") is None:
            options["debug_sink"] = console_helper
        return cls(public_key=public_key, debug=debug, **options)

    @property
    def active_debug_sink(self) -> DebugSink | None:
        """The debug sink, when debug mode is on."""
        return self.debug_sink if self.debug else None

    @property
    def timeout(self) -> float:
        """Request timeout in seconds."""
        return (self.timeout_ms or DEFAULT_TIMEOUT_MS) / 1000

    @property
    def base_url(self) -> str:
        """API root including the version segment, e.g. https://api.chec.io/v1/."""
        url = self.url if self.url.endswith("/") else f"{self.url}/"
        return f"{url}{self.version}/"
