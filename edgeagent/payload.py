"""Defensive parsing of MQTT payloads and configuration text."""

from __future__ import annotations

import json
import unicodedata
from typing import Any

import yaml

MAX_PAYLOAD_SIZE = 256 * 1024
"""Largest payload, in bytes, that the agent accepts."""

MAX_JSON_DEPTH = 100
"""Default nesting depth up to which structures are traversed."""


class PayloadError(ValueError):
    """Raised when a payload or configuration text cannot be accepted."""


def _reject_constant(name: str) -> Any:
    raise PayloadError(f"non-standard JSON constant: {name}")


def _loads_json(text: str) -> Any:
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise PayloadError(f"malformed JSON: {exc}") from exc
    except RecursionError as exc:
        raise PayloadError("JSON nesting too deep") from exc


def _decode(data: bytes | bytearray) -> str:
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise PayloadError(f"payload is not valid UTF-8: {exc}") from exc


def parse_payload(data: bytes | bytearray | str) -> Any:
    """Parse a JSON payload, rejecting oversized, non-UTF-8 or malformed input."""
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    if len(raw) > MAX_PAYLOAD_SIZE:
        raise PayloadError(
            f"payload of {len(raw)} bytes exceeds limit of {MAX_PAYLOAD_SIZE} bytes"
        )
    return _loads_json(_decode(raw))


def json_depth(value: Any, limit: int = MAX_JSON_DEPTH) -> int:
    """Return the container nesting depth of ``value``, counted up to ``limit + 1``.

    Scalars have depth 0; each list or dict adds one level. Traversal stops
    below ``limit`` levels, so anything deeper reports ``limit + 1``.
    """
    if limit < 0:
        raise ValueError(f"limit must not be negative, got {limit}")
    deepest = 0
    stack: list[tuple[Any, int]] = [(value, 0)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, dict):
            children = node.values()
        elif isinstance(node, (list, tuple)):
            children = node
        else:
            continue
        depth += 1
        deepest = max(deepest, depth)
        if depth > limit:
            continue
        stack.extend((child, depth) for child in children)
    return deepest


def count_control_chars(text: str) -> int:
    """Count characters in the Unicode control category (Cc)."""
    return sum(1 for char in text if unicodedata.category(char) == "Cc")


def parse_config_text(text: str | bytes | bytearray) -> Any:
    """Parse configuration text as YAML, falling back to JSON."""
    if isinstance(text, (bytes, bytearray)):
        text = _decode(text)
    try:
        return yaml.safe_load(text)
    except (yaml.YAMLError, RecursionError) as yaml_exc:
        try:
            return _loads_json(text)
        except PayloadError:
            raise PayloadError(f"invalid configuration: {yaml_exc}") from yaml_exc