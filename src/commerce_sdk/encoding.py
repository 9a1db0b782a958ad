"""Payload encoding for API requests.

Mutating requests carry nested data flattened into form fields with
bracket-suffixed keys:

    {"customer": {"email": "a@b.c"}}  ->  [("customer[email]", "a@b.c")]

GET requests skip the flattening and send query parameters instead.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Shape(Enum):
    """Structural kind of a payload or response value."""

    SCALAR = "scalar"
    MAPPING = "mapping"
    SEQUENCE = "sequence"


def classify(value: Any) -> Shape:
    """Classify a value as scalar, mapping, or sequence.

    Strings, bytes and file-like objects are scalars even though some of
    them are iterable.
    """
    if isinstance(value, (str, bytes, bytearray)) or hasattr(value, "read"):
        return Shape.SCALAR
    if isinstance(value, Mapping):
        return Shape.MAPPING
    if isinstance(value, Sequence):
        return Shape.SEQUENCE
    return Shape.SCALAR


def _form_value(value: Any) -> str:
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return ""
    return str(value)


@dataclass
class FormPayload:
    """Ordered flat sequence of (composite key, scalar value) pairs."""

    pairs: list[tuple[str, Any]] = field(default_factory=list)

    def append(self, key: str, value: Any) -> None:
        self.pairs.append((key, value))

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def as_dict(self) -> dict[str, Any]:
        return dict(self.pairs)

    def to_httpx(self) -> tuple[dict[str, str], list[tuple[str, Any]]]:
        """Split into httpx `data` and `files` arguments.

        Binary and file-like values become file parts, which switches
        httpx to a multipart/form-data body.
        """
        data: dict[str, str] = {}
        files: list[tuple[str, Any]] = []
        for key, value in self.pairs:
            if isinstance(value, (bytes, bytearray)) or hasattr(value, "read"):
                files.append((key, value))
            else:
                data[key] = _form_value(value)
        return data, files


def encode(
    data: Any,
    key_namespace: str | None = None,
    payload: FormPayload | None = None,
) -> FormPayload | Any:
    """Recursively flatten `data` into a FormPayload.

    Args:
        data: Value to encode. Scalars are returned unchanged.
        key_namespace: Composite key of `data` within the top-level value
        payload: Payload shared by the whole recursion; created on first use

    Returns:
        The payload, or `data` itself when it is a scalar.
    """
    match classify(data):
        case Shape.SCALAR:
            return data
        case Shape.MAPPING:
            items = data.items()
        case Shape.SEQUENCE:
            items = enumerate(data)

    if payload is None:
        payload = FormPayload()

    for key, value in items:
        data_key = str(key) if key_namespace is None else f"{key_namespace}[{key}]"

        if classify(value) is Shape.SCALAR:
            payload.append(data_key, value)
        else:
            encode(value, data_key, payload)

    return payload


def _json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def _query_value(value: Any) -> str:
    if classify(value) is Shape.SCALAR:
        return _form_value(value)
    return _json(value)


def query_params(data: Mapping[str, Any] | None) -> list[tuple[str, Any]] | None:
    """Render GET data as query parameters.

    Sequences repeat as `key[]`, mappings (also inside sequences) are
    compact JSON and `None` values are left out.
    """
    if data is None:
        return None

    params: list[tuple[str, Any]] = []
    for key, value in data.items():
        match classify(value):
            case Shape.SEQUENCE:
                params.extend((f"{key}[]", _query_value(item)) for item in value)
            case Shape.MAPPING:
                params.append((key, _json(value)))
            case Shape.SCALAR if value is not None:
                params.append((key, _form_value(value)))
    return params
