"""Digital I/O pins driven through a single actor task.

Every pin operation is sent as a command over a bounded queue to one actor
task that owns the pin state, so callers on any coroutine can share a handle.
No hardware backend is present, so pins are simulated: output writes are
remembered and input pins read the remembered (optionally inverted) level.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Iterable

logger = logging.getLogger(__name__)

DEFAULT_GPIO_CHANNEL_SIZE = 64
"""Default number of commands that may wait in the actor's queue."""

MIN_GPIO_CHANNEL_SIZE = 16
"""Smallest queue size a handle will use."""

DEFAULT_GPIO_TIMEOUT_SECS = 5
"""Default timeout for pin operations."""

_ACTOR_DEAD = "GPIO actor dead"


class GpioError(RuntimeError):
    """Raised when a GPIO operation fails or the actor is not running."""


class PinState(Enum):
    """Logic level of a pin."""

    HIGH = "High"
    LOW = "Low"

    @staticmethod
    def from_bool(value: bool) -> PinState:
        """HIGH for a true value, LOW otherwise."""
        return PinState.HIGH if value else PinState.LOW

    def inverted(self) -> PinState:
        return PinState.LOW if self is PinState.HIGH else PinState.HIGH

    def __bool__(self) -> bool:
        return self is PinState.HIGH


@dataclass(frozen=True)
class GpioPinConfig:
    """Configuration of one pin."""

    name: str
    pin: int
    direction: str = "input"
    pull: str = "none"
    invert: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.pin <= 255:
            raise ValueError(f"pin number must be between 0 and 255, got {self.pin}")


@dataclass(frozen=True)
class GpioPinValue:
    """A pin reading with metadata."""

    name: str
    pin: int
    direction: str
    state: PinState
    timestamp: str


@dataclass
class GpioReadResult:
    """Readings of all input pins and the errors met while reading them."""

    values: list[GpioPinValue] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class _GpioActor:
    """Owns the pin state; only ever touched from the actor task."""

    def __init__(self, configs: list[GpioPinConfig]) -> None:
        self.configs: list[GpioPinConfig] = []
        self.states: dict[int, PinState] = {}
        self._load(configs)

    def _load(self, configs: list[GpioPinConfig]) -> None:
        self.configs = list(configs)
        self.states = {config.pin: PinState.LOW for config in self.configs}

    def init(self) -> None:
        if self.configs:
            logger.warning(
                "GPIO configured but not available on this platform (simulation mode)"
            )

    def read_all(self) -> GpioReadResult:
        result = GpioReadResult()
        for config in self.configs:
            if config.direction != "input":
                continue
            state = self.states.get(config.pin, PinState.LOW)
            if config.invert:
                state = state.inverted()
            result.values.append(
                GpioPinValue(
                    name=config.name,
                    pin=config.pin,
                    direction=config.direction,
                    state=state,
                    timestamp=_now(),
                )
            )
        return result

    def read_pin(self, pin: int) -> PinState:
        try:
            return self.states[pin]
        except KeyError:
            raise GpioError(f"Pin {pin} not configured") from None

    def write_pin(self, pin: int, value: bool) -> None:
        config = next(
            (c for c in self.configs if c.pin == pin and c.direction == "output"),
            None,
        )
        if config is None:
            raise GpioError(f"Pin {pin} not configured as output")
        actual = not value if config.invert else bool(value)
        state = PinState.from_bool(actual)
        self.states[pin] = state
        logger.debug(
            "Simulated GPIO pin %d set to %s (invert=%s)", pin, state.value, config.invert
        )

    def pin_count(self) -> int:
        return len(self.configs)

    def is_available(self) -> bool:
        return False

    def reconfigure(self, configs: list[GpioPinConfig]) -> None:
        logger.info("Reconfiguring GPIO with %d pins", len(configs))
        self._load(configs)
        self.init()


@dataclass
class _Command:
    action: Callable[..., Any]
    args: tuple[Any, ...]
    future: asyncio.Future


class GpioHandle:
    """Handle used to talk to the GPIO actor.

    Call :meth:`start` from a running event loop (or use ``async with``)
    before sending commands, and :meth:`close` when done.
    """

    def __init__(
        self,
        configs: Iterable[GpioPinConfig] = (),
        timeout_secs: float = DEFAULT_GPIO_TIMEOUT_SECS,
        channel_size: int = DEFAULT_GPIO_CHANNEL_SIZE,
    ) -> None:
        self._configs = list(configs)
        self._timeout = timeout_secs
        self._channel_size = max(channel_size, MIN_GPIO_CHANNEL_SIZE)
        self._queue: asyncio.Queue[_Command] | None = None
        self._task: asyncio.Task | None = None
        self._closed = False

    def channel_size(self) -> int:
        """The effective queue size."""
        return self._channel_size

    def start(self) -> None:
        """Spawn the actor task on the running event loop."""
        if self._task is not None:
            raise GpioError("GPIO actor already started")
        loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue(maxsize=self._channel_size)
        actor = _GpioActor(self._configs)
        self._task = loop.create_task(self._run(actor, self._queue))

    async def close(self) -> None:
        """Stop the actor; commands still queued fail with GpioError."""
        self._closed = True
        task, queue = self._task, self._queue
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if queue is not None:
            while not queue.empty():
                cmd = queue.get_nowait()
                if not cmd.future.done():
                    cmd.future.set_exception(GpioError(_ACTOR_DEAD))

    async def __aenter__(self) -> GpioHandle:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @staticmethod
    async def _run(actor: _GpioActor, queue: asyncio.Queue[_Command]) -> None:
        logger.info("GPIO actor started with %d pins configured", len(actor.configs))
        try:
            while True:
                cmd = await queue.get()
                if cmd.future.done():
                    continue
                try:
                    result = cmd.action(actor, *cmd.args)
                except GpioError as exc:
                    cmd.future.set_exception(exc)
                else:
                    cmd.future.set_result(result)
        finally:
            logger.info("GPIO actor stopped")

    def _alive(self) -> bool:
        return not self._closed and self._task is not None and not self._task.done()

    async def _send(self, action: Callable[..., Any], *args: Any) -> asyncio.Future:
        if not self._alive() or self._queue is None:
            raise GpioError(_ACTOR_DEAD)
        future = asyncio.get_running_loop().create_future()
        await self._queue.put(_Command(action, args, future))
        return future

    async def _wait(self, future: asyncio.Future, label: str) -> Any:
        try:
            return await asyncio.wait_for(future, self._timeout)
        except asyncio.TimeoutError:
            raise GpioError(f"{label} timed out after {self._timeout}s") from None

    async def init(self) -> None:
        """Initialise the pins."""
        future = await self._send(_GpioActor.init)
        await self._wait(future, "GPIO init")

    async def read_all(self) -> GpioReadResult:
        """Read every configured input pin; failures land in ``errors``."""
        try:
            future = await self._send(_GpioActor.read_all)
        except GpioError:
            return GpioReadResult(errors=[_ACTOR_DEAD])
        try:
            return await asyncio.wait_for(future, self._timeout)
        except asyncio.TimeoutError:
            return GpioReadResult(errors=["GPIO read timeout"])
        except GpioError:
            return GpioReadResult(errors=["GPIO actor response error"])

    async def read_pin(self, pin: int) -> PinState:
        """Read the level of one configured pin."""
        future = await self._send(_GpioActor.read_pin, pin)
        return await self._wait(future, f"GPIO read pin {pin}")

    async def write_pin(self, pin: int, value: bool) -> None:
        """Drive an output pin, honouring its invert setting."""
        future = await self._send(_GpioActor.write_pin, pin, value)
        await self._wait(future, f"GPIO write pin {pin}")

    async def pin_count(self) -> int:
        """Number of configured pins, or 0 if the actor is not running."""
        try:
            future = await self._send(_GpioActor.pin_count)
            return await future
        except GpioError:
            return 0

    async def is_available(self) -> bool:
        """Whether real GPIO hardware is driving the pins."""
        try:
            future = await self._send(_GpioActor.is_available)
            return await future
        except GpioError:
            return False

    async def reconfigure(self, configs: Iterable[GpioPinConfig]) -> None:
        """Replace the pin configuration and reinitialise."""
        future = await self._send(_GpioActor.reconfigure, list(configs))
        await future