"""Typed extraction of command parameters from decoded JSON objects."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_U64_MAX = 2**64 - 1


class MissingParameterError(ValueError):
    """Raised when a required parameter is absent or has the wrong type."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Missing required parameter: {key}")
        self.key = key


def _lookup(params: Any, key: str) -> Any:
    if isinstance(params, Mapping):
        return params.get(key)
    return None


def _as_u64(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    if 0 <= value <= _U64_MAX:
        return value
    return None


def get_str_param(params: Any, key: str) -> str | None:
    """Return ``params[key]`` if it is a string, otherwise None."""
    value = _lookup(params, key)
    return value if isinstance(value, str) else None


def get_u64_param(params: Any, key: str) -> int | None:
    """Return ``params[key]`` if it is an unsigned 64-bit integer, otherwise None."""
    return _as_u64(_lookup(params, key))


def get_bool_param(params: Any, key: str) -> bool | None:
    """Return ``params[key]`` if it is a boolean, otherwise None."""
    value = _lookup(params, key)
    return value if isinstance(value, bool) else None


def require_str_param(params: Any, key: str) -> str:
    """Return the string ``params[key]``; raise MissingParameterError otherwise."""
    value = get_str_param(params, key)
    if value is None:
        raise MissingParameterError(key)
    return value


def require_u64_param(params: Any, key: str) -> int:
    """Return the unsigned integer ``params[key]``; raise MissingParameterError otherwise."""
    value = get_u64_param(params, key)
    if value is None:
        raise MissingParameterError(key)
    return value