"""Thread-safe string interning for frequently repeated identifiers."""

from __future__ import annotations

import threading
from dataclasses import dataclass


class Interner:
    """Stores one copy of each distinct string and hands out integer keys."""

    __slots__ = ("_lock", "_keys", "_strings")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._keys: dict[str, int] = {}
        self._strings: list[str] = []

    def intern(self, s: str) -> int:
        """Return the key for ``s``, storing it first if it is new."""
        with self._lock:
            key = self._keys.get(s)
            if key is None:
                key = len(self._strings)
                self._strings.append(s)
                self._keys[s] = key
            return key

    def resolve(self, key: int) -> str:
        """Return the string for ``key``; raise KeyError if it was never issued."""
        value = self.try_resolve(key)
        if value is None:
            raise KeyError(f"unknown interned key: {key!r}")
        return value

    def try_resolve(self, key: int) -> str | None:
        """Return the string for ``key``, or None if it was never issued."""
        if isinstance(key, bool) or not isinstance(key, int):
            return None
        with self._lock:
            if 0 <= key < len(self._strings):
                return self._strings[key]
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._strings)

    def __contains__(self, s: object) -> bool:
        with self._lock:
            return s in self._keys


@dataclass(frozen=True)
class InternerStats:
    """Statistics about the shared interner."""

    string_count: int


_INTERNER = Interner()


def interner() -> Interner:
    """Return the process-wide interner."""
    return _INTERNER


def intern(s: str) -> int:
    """Intern ``s`` in the shared interner and return its key."""
    return _INTERNER.intern(s)


def resolve(key: int) -> str:
    """Return the string for ``key``; raise KeyError if it is not valid."""
    return _INTERNER.resolve(key)


def try_resolve(key: int) -> str | None:
    """Return the string for ``key``, or None if it is not valid."""
    return _INTERNER.try_resolve(key)


def intern_device_id(device_id: str) -> int:
    """Intern a device identifier."""
    return intern(device_id)


def intern_topic(topic: str) -> int:
    """Intern an MQTT topic."""
    return intern(topic)


def intern_register_name(name: str) -> int:
    """Intern a Modbus register name."""
    return intern(name)


def stats() -> InternerStats:
    """Return current statistics of the shared interner."""
    return InternerStats(string_count=len(_INTERNER))