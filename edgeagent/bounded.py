"""Fixed-capacity collections that drop new items instead of growing."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar, overload

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_REGISTER_READINGS = 128
"""Maximum number of register readings per Modbus read operation."""

MAX_ERRORS = 16
"""Maximum number of errors tracked per operation."""

MAX_GPIO_PINS = 32
"""Maximum number of GPIO pin states."""

MAX_SENSOR_BATCH = 64
"""Maximum batch size for sensor data."""


class BoundedList(Generic[T]):
    """A list with a hard capacity; pushes beyond it are dropped and logged."""

    __slots__ = ("_capacity", "_items")

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must not be negative, got {capacity}")
        self._capacity = capacity
        self._items: list[T] = []

    @property
    def capacity(self) -> int:
        """The maximum number of items the list can hold."""
        return self._capacity

    def push_bounded(self, item: T) -> bool:
        """Append ``item`` if there is room; return whether it was stored."""
        if len(self._items) >= self._capacity:
            logger.warning(
                "Bounded collection full (capacity: %d), item dropped", self._capacity
            )
            return False
        self._items.append(item)
        return True

    def is_full(self) -> bool:
        return len(self._items) >= self._capacity

    def remaining_capacity(self) -> int:
        return max(0, self._capacity - len(self._items))

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> list[T]: ...

    def __getitem__(self, index):
        return self._items[index]

    def __repr__(self) -> str:
        return f"BoundedList(capacity={self._capacity}, items={self._items!r})"


@dataclass(frozen=True)
class SensorReading:
    """A single sensor reading with metadata."""

    name: str
    value: float
    unit: str | None = None
    timestamp_ms: int = 0


class BoundedSensorBuffer:
    """A bounded buffer of sensor readings."""

    __slots__ = ("_readings",)

    def __init__(self, capacity: int = MAX_SENSOR_BATCH) -> None:
        self._readings: BoundedList[SensorReading] = BoundedList(capacity)

    def push(self, reading: SensorReading) -> bool:
        """Add a reading; return False if the buffer is full."""
        return self._readings.push_bounded(reading)

    def readings(self) -> list[SensorReading]:
        """Return the stored readings in insertion order."""
        return list(self._readings)

    def clear(self) -> None:
        self._readings.clear()

    def is_empty(self) -> bool:
        return len(self._readings) == 0

    def capacity(self) -> int:
        return self._readings.capacity

    def __len__(self) -> int:
        return len(self._readings)

    def __iter__(self) -> Iterator[SensorReading]:
        return iter(self._readings)


class BoundedErrors:
    """A bounded collector of error messages."""

    __slots__ = ("_errors",)

    def __init__(self, capacity: int = MAX_ERRORS) -> None:
        self._errors: BoundedList[str] = BoundedList(capacity)

    def push(self, error: str) -> bool:
        """Add an error message; return False if the collector is full."""
        return self._errors.push_bounded(error)

    def push_error(self, error: object) -> bool:
        """Add the string form of any error object."""
        return self.push(str(error))

    def errors(self) -> list[str]:
        """Return the collected messages in insertion order."""
        return list(self._errors)

    def has_errors(self) -> bool:
        return len(self._errors) > 0

    def is_empty(self) -> bool:
        return len(self._errors) == 0

    def clear(self) -> None:
        self._errors.clear()

    def __len__(self) -> int:
        return len(self._errors)

    def __iter__(self) -> Iterator[str]:
        return iter(self._errors)