# edgeagent

Building blocks for an industrial IoT edge agent: the parts that an agent
running next to PLCs and sensors uses to hold data, check what it receives,
drive pins and report its own health.

## Modules

- **`edgeagent.bounded`**: `BoundedList`, `BoundedSensorBuffer` (of
  `SensorReading`) and `BoundedErrors` hold at most a fixed number of items.
  A push beyond that limit returns `False` and logs a warning; the item is
  dropped.
- **`edgeagent.payload`**: `parse_payload` decodes a JSON payload and raises
  `PayloadError` if it is larger than 256 KiB, not UTF-8, or malformed.
  `json_depth` measures nesting, `count_control_chars` counts control
  characters, and `parse_config_text` reads YAML, then tries JSON if YAML fails.
- **`edgeagent.modbus_frame`**: `parse_frame` checks a Modbus TCP response
  (MBAP header, length, exception bit) and returns a `ModbusFrame`.
  `parse_read_response` decodes coil bytes or 16-bit register values. Any
  problem raises `FrameError`.
- **`edgeagent.interning`**: `intern`, `resolve`, `try_resolve`,
  `intern_device_id`, `intern_topic`, `intern_register_name` and `stats` work
  on one process-wide, thread-safe `Interner`.
- **`edgeagent.health`**: `HealthState` keeps readiness flags and counters.
  `start_health_server` serves them over HTTP on asyncio.
- **`edgeagent.gpio`**: `GpioHandle` is an asyncio actor for digital pins that
  are configured with `GpioPinConfig`. Errors raise `GpioError`.
- **`edgeagent.ratelimit`**: `RateLimiter` is a sliding-window limiter.
- **`edgeagent.params`**: `get_str_param`, `get_u64_param` and
  `get_bool_param` pull typed values out of decoded command parameters.
  `require_str_param` and `require_u64_param` raise `MissingParameterError`
  when the value is absent or has the wrong type.
- **`edgeagent.validation`**: `parse_u16_param`, `parse_pin_state`,
  `validate_log_level` and `validate_telemetry_interval` raise
  `ValidationError` for bad input.

## Examples

Bounded error collection:

```python
from edgeagent.bounded import BoundedErrors

errors = BoundedErrors(2)
errors.push("Error 1")
errors.push_error(ValueError("Error 2"))
assert not errors.push("Error 3")   # full, dropped
assert errors.has_errors()
```

Checking a Modbus TCP read-holding-registers response:

```python
from edgeagent.modbus_frame import parse_frame

frame = parse_frame(bytes.fromhex("0001 0000 0007 01 03 04 0001 0002"))
print(frame.function_code, frame.data)   # 3 (1, 2)
```

Untrusted payloads:

```python
from edgeagent.payload import PayloadError, json_depth, parse_payload

value = parse_payload(b'{"a": [1]}')
print(json_depth(value))   # 2
try:
    parse_payload(b"{not json")
except PayloadError as exc:
    print(exc)
```

Command arguments:

```python
from edgeagent.params import require_str_param
from edgeagent.validation import ValidationError, parse_pin_state, parse_u16_param

device = require_str_param({"device": "plc1"}, "device")
assert parse_pin_state("ON") is True
try:
    parse_u16_param({"address": 70000}, "address")
except ValidationError as exc:
    print(exc)   # Address 70000 exceeds maximum u16 value (65535)
```

Rate limiting with an injectable clock:

```python
from edgeagent.ratelimit import RateLimiter

limiter = RateLimiter(max_commands=2, window=60)
assert limiter.check() and limiter.check()
assert not limiter.check()
```

Health and readiness:

```python
from edgeagent.health import HealthState

state = HealthState()
state.set_config_loaded(True)
print(state.health().status)   # "degraded"
state.set_device_activated(True)
print(state.health().status)   # "healthy"
state.inc_mqtt_sent()
print(state.metrics().mqtt_messages_sent)   # 1
```

`start_health_server(addr, state)` takes `"host:port"` or a `(host, port)`
tuple and returns the running `asyncio` server. It answers `GET /health` (200
when healthy or degraded, 503 when unhealthy), `GET /ready` (200 when ready,
otherwise 503) and `GET /metrics` (200), each with a JSON body. Any other path
gets 404, and any method other than GET gets 405.

```python
import asyncio
from edgeagent.health import HealthState, start_health_server

async def main():
    server = await start_health_server("127.0.0.1:8080", HealthState())
    async with server:
        await server.serve_forever()

asyncio.run(main())
```

GPIO:

```python
import asyncio
from edgeagent.gpio import GpioHandle, GpioPinConfig

async def main():
    pins = [GpioPinConfig("relay", 17, direction="output"), GpioPinConfig("door", 4)]
    async with GpioHandle(pins) as gpio:
        await gpio.init()
        await gpio.write_pin(17, True)
        print(await gpio.read_pin(17))            # PinState.HIGH
        print((await gpio.read_all()).values)     # the "door" input pin

asyncio.run(main())
```

String interning:

```python
from edgeagent.interning import intern, resolve

key = intern("device-001")
assert intern("device-001") == key
assert resolve(key) == "device-001"
```

## What this package does not do

- It does not connect to an MQTT broker or a cloud platform, and it has no
  command dispatcher. It provides the parameter helpers, validators and rate
  limiter that such a dispatcher would use.
- It does not talk to Modbus devices. It only checks and decodes response
  frames, and it has no Modbus error classes.
- GPIO is always simulated. Writes to output pins are remembered and read
  back, and `GpioHandle.is_available()` returns `False`. No hardware pins are
  driven.
- It does not store programs, scripts or configuration on disk.
- There is no command-line entry point.

## Tests

The test suite uses pytest and pytest-asyncio. Both are listed in the `test`
extra.