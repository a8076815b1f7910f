"""Validation of command arguments and configuration updates."""

from __future__ import annotations

from typing import Any

from edgeagent.params import get_u64_param

U16_MAX = 0xFFFF
"""Largest value a Modbus address or register value may take."""

VALID_LOG_LEVELS = ("trace", "debug", "info", "warn", "error")
"""Log levels accepted by the agent, lowest first."""

MIN_TELEMETRY_INTERVAL_SECS = 5
"""Shortest telemetry interval accepted from a config update."""

MAX_TELEMETRY_INTERVAL_SECS = 3600
"""Longest telemetry interval accepted from a config update."""

_HIGH_WORDS = frozenset({"high", "1", "true", "on"})
_LOW_WORDS = frozenset({"low", "0", "false", "off"})


class ValidationError(ValueError):
    """Raised when a command argument or setting is missing or out of range."""


def parse_u16_param(params: Any, key: str) -> int:
    """Return ``params[key]`` as an unsigned 16-bit integer.

    Raises ValidationError when the key is missing, is not an unsigned
    integer, or exceeds 65535.
    """
    value = get_u64_param(params, key)
    if value is None:
        raise ValidationError(f"Missing '{key}' parameter")
    if value > U16_MAX:
        raise ValidationError(
            f"{key.capitalize()} {value} exceeds maximum u16 value ({U16_MAX})"
        )
    return value


def parse_pin_state(text: Any) -> bool:
    """Interpret a textual pin state: high/1/true/on or low/0/false/off."""
    if not isinstance(text, str):
        raise ValidationError("Missing 'state' parameter (high/low)")
    word = text.lower()
    if word in _HIGH_WORDS:
        return True
    if word in _LOW_WORDS:
        return False
    raise ValidationError("Invalid state. Use 'high' or 'low'")


def validate_log_level(level: Any) -> str:
    """Return ``level`` in lower case if it names a known log level."""
    if not isinstance(level, str):
        raise ValidationError("Missing 'level' parameter")
    normalised = level.lower()
    if normalised not in VALID_LOG_LEVELS:
        listed = ", ".join(f'"{name}"' for name in VALID_LOG_LEVELS)
        raise ValidationError(f"Invalid level. Valid: [{listed}]")
    return normalised


def validate_telemetry_interval(interval: Any) -> int:
    """Return ``interval`` if it is a whole number of seconds from 5 to 3600."""
    if isinstance(interval, bool) or not isinstance(interval, int):
        raise ValidationError(
            f"Invalid telemetry interval {interval!r}: must be an integer"
        )
    if not MIN_TELEMETRY_INTERVAL_SECS <= interval <= MAX_TELEMETRY_INTERVAL_SECS:
        raise ValidationError(
            f"Invalid telemetry interval {interval}: must be between "
            f"{MIN_TELEMETRY_INTERVAL_SECS} and {MAX_TELEMETRY_INTERVAL_SECS} seconds"
        )
    return interval