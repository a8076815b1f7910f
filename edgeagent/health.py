"""Health, readiness and metrics reporting, with a small HTTP endpoint."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import threading
import time
from dataclasses import asdict, dataclass
from http import HTTPStatus
from typing import Any

logger = logging.getLogger(__name__)

AGENT_VERSION = "1.2.2"

STATUS_HEALTHY = "healthy"
STATUS_DEGRADED = "degraded"
STATUS_UNHEALTHY = "unhealthy"

_MAX_HEADER_LINES = 100


@dataclass(frozen=True)
class HealthResponse:
    """Overall service status."""

    status: str
    version: str
    uptime_secs: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ReadinessChecks:
    """Individual readiness checks."""

    config_loaded: bool
    mqtt_connected: bool
    device_activated: bool


@dataclass(frozen=True)
class ReadinessResponse:
    """Whether the service is ready, with the checks behind the answer."""

    ready: bool
    checks: ReadinessChecks

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MetricsResponse:
    """Basic runtime counters."""

    uptime_secs: int
    mqtt_messages_sent: int
    mqtt_messages_received: int
    modbus_reads: int
    script_executions: int
    offline_queue_size: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class HealthState:
    """Health flags and counters shared between the agent and the endpoint."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._start = time.monotonic()
        self._config_loaded = False
        self._mqtt_connected = False
        self._device_activated = False
        self._mqtt_sent = 0
        self._mqtt_received = 0
        self._modbus_reads = 0
        self._script_executions = 0
        self._offline_queue_size = 0

    def uptime_secs(self) -> int:
        """Whole seconds since this state was created."""
        return int(time.monotonic() - self._start)

    def set_config_loaded(self, loaded: bool) -> None:
        with self._lock:
            self._config_loaded = bool(loaded)

    def set_mqtt_connected(self, connected: bool) -> None:
        with self._lock:
            self._mqtt_connected = bool(connected)

    def set_device_activated(self, activated: bool) -> None:
        with self._lock:
            self._device_activated = bool(activated)

    def inc_mqtt_sent(self) -> None:
        with self._lock:
            self._mqtt_sent += 1

    def inc_mqtt_received(self) -> None:
        with self._lock:
            self._mqtt_received += 1

    def inc_modbus_reads(self) -> None:
        with self._lock:
            self._modbus_reads += 1

    def inc_script_executions(self) -> None:
        with self._lock:
            self._script_executions += 1

    def set_offline_queue_size(self, size: int) -> None:
        if size < 0:
            raise ValueError(f"queue size must not be negative, got {size}")
        with self._lock:
            self._offline_queue_size = size

    def is_ready(self) -> bool:
        """Ready once configuration is loaded and the device is activated."""
        with self._lock:
            return self._config_loaded and self._device_activated

    def health(self) -> HealthResponse:
        with self._lock:
            if self._config_loaded and self._device_activated:
                status = STATUS_HEALTHY
            elif self._config_loaded:
                status = STATUS_DEGRADED
            else:
                status = STATUS_UNHEALTHY
        return HealthResponse(status, AGENT_VERSION, self.uptime_secs())

    def readiness(self) -> ReadinessResponse:
        with self._lock:
            checks = ReadinessChecks(
                config_loaded=self._config_loaded,
                mqtt_connected=self._mqtt_connected,
                device_activated=self._device_activated,
            )
        return ReadinessResponse(
            ready=checks.config_loaded and checks.device_activated, checks=checks
        )

    def metrics(self) -> MetricsResponse:
        with self._lock:
            return MetricsResponse(
                uptime_secs=self.uptime_secs(),
                mqtt_messages_sent=self._mqtt_sent,
                mqtt_messages_received=self._mqtt_received,
                modbus_reads=self._modbus_reads,
                script_executions=self._script_executions,
                offline_queue_size=self._offline_queue_size,
            )


def _route(method: str, path: str, state: HealthState) -> tuple[HTTPStatus, Any]:
    routes = {
        "/health": _health_reply,
        "/ready": _ready_reply,
        "/metrics": _metrics_reply,
    }
    handler = routes.get(path)
    if handler is None:
        return HTTPStatus.NOT_FOUND, {"error": "not found"}
    if method != "GET":
        return HTTPStatus.METHOD_NOT_ALLOWED, {"error": "method not allowed"}
    return handler(state)


def _health_reply(state: HealthState) -> tuple[HTTPStatus, Any]:
    health = state.health()
    if health.status in (STATUS_HEALTHY, STATUS_DEGRADED):
        code = HTTPStatus.OK
    else:
        code = HTTPStatus.SERVICE_UNAVAILABLE
    return code, health.to_dict()


def _ready_reply(state: HealthState) -> tuple[HTTPStatus, Any]:
    readiness = state.readiness()
    code = HTTPStatus.OK if readiness.ready else HTTPStatus.SERVICE_UNAVAILABLE
    return code, readiness.to_dict()


def _metrics_reply(state: HealthState) -> tuple[HTTPStatus, Any]:
    return HTTPStatus.OK, state.metrics().to_dict()


async def _serve_connection(
    reader: asyncio.StreamReader, writer: asyncio.StreamWriter, state: HealthState
) -> None:
    try:
        request_line = await reader.readline()
        for _ in range(_MAX_HEADER_LINES):
            line = await reader.readline()
            if line in (b"\r\n", b"\n", b""):
                break
        parts = request_line.decode("latin-1").split()
        if len(parts) < 2:
            status, body = HTTPStatus.BAD_REQUEST, {"error": "bad request"}
        else:
            path = parts[1].split("?", 1)[0]
            status, body = _route(parts[0].upper(), path, state)
        payload = json.dumps(body).encode("utf-8")
        head = (
            f"HTTP/1.1 {status.value} {status.phrase}\r\n"
            "Content-Type: application/json\r\n"
            f"Content-Length: {len(payload)}\r\n"
            "Connection: close\r\n\r\n"
        )
        writer.write(head.encode("ascii") + payload)
        await writer.drain()
    except (ConnectionError, asyncio.IncompleteReadError) as exc:
        logger.debug("Health connection dropped: %s", exc)
    finally:
        writer.close()
        with contextlib.suppress(ConnectionError):
            await writer.wait_closed()


def _split_addr(addr: str | tuple[str, int]) -> tuple[str, int]:
    if isinstance(addr, tuple):
        host, port = addr
        return host, int(port)
    host, sep, port = addr.rpartition(":")
    if not sep or not host:
        raise ValueError(f"address must be host:port, got {addr!r}")
    return host.strip("[]"), int(port)


async def start_health_server(
    addr: str | tuple[str, int], state: HealthState
) -> asyncio.AbstractServer:
    """Bind the health endpoint and start serving /health, /ready and /metrics.

    Raises OSError if the address cannot be bound.
    """
    host, port = _split_addr(addr)
    logger.info("Starting health check server on %s:%d", host, port)

    async def handler(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        await _serve_connection(reader, writer, state)

    try:
        server = await asyncio.start_server(handler, host, port)
    except OSError as exc:
        logger.error("Failed to bind health server to %s:%d: %s", host, port, exc)
        raise
    return server