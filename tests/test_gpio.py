import pytest

from edgeagent.gpio import (
    DEFAULT_GPIO_CHANNEL_SIZE,
    GpioError,
    GpioHandle,
    GpioPinConfig,
    GpioReadResult,
    PinState,
)


def _configs():
    return [
        GpioPinConfig(name="door", pin=17, direction="input"),
        GpioPinConfig(name="alarm", pin=18, direction="input", invert=True),
        GpioPinConfig(name="pump", pin=22, direction="output"),
        GpioPinConfig(name="valve", pin=23, direction="output", invert=True),
    ]


def test_pin_state_conversion():
    assert PinState.from_bool(True) is PinState.HIGH
    assert PinState.from_bool(False) is PinState.LOW
    assert bool(PinState.HIGH) is True
    assert bool(PinState.LOW) is False


def test_pin_state_inverted():
    assert PinState.HIGH.inverted() is PinState.LOW
    assert PinState.LOW.inverted() is PinState.HIGH


def test_gpio_read_result_default():
    result = GpioReadResult()
    assert result.values == []
    assert result.errors == []


def test_default_channel_size():
    assert DEFAULT_GPIO_CHANNEL_SIZE == 64
    assert GpioHandle([]).channel_size() == 64


def test_channel_size_minimum():
    assert GpioHandle([], channel_size=4).channel_size() == 16
    assert GpioHandle([], channel_size=100).channel_size() == 100


def test_config_rejects_bad_pin():
    with pytest.raises(ValueError):
        GpioPinConfig(name="bad", pin=300)


def test_start_requires_running_loop():
    with pytest.raises(RuntimeError):
        GpioHandle([]).start()


@pytest.mark.asyncio
async def test_read_all_reports_inputs_with_invert():
    async with GpioHandle(_configs()) as handle:
        await handle.init()
        result = await handle.read_all()
    assert result.errors == []
    assert [(v.name, v.pin, v.state) for v in result.values] == [
        ("door", 17, PinState.LOW),
        ("alarm", 18, PinState.HIGH),
    ]
    assert all(v.direction == "input" for v in result.values)


@pytest.mark.asyncio
async def test_write_output_pin_then_read():
    async with GpioHandle(_configs()) as handle:
        await handle.write_pin(22, True)
        assert await handle.read_pin(22) is PinState.HIGH
        await handle.write_pin(22, False)
        assert await handle.read_pin(22) is PinState.LOW


@pytest.mark.asyncio
async def test_write_inverted_output_pin():
    async with GpioHandle(_configs()) as handle:
        await handle.write_pin(23, True)
        assert await handle.read_pin(23) is PinState.LOW


@pytest.mark.asyncio
async def test_write_input_pin_fails():
    async with GpioHandle(_configs()) as handle:
        with pytest.raises(GpioError, match="not configured as output"):
            await handle.write_pin(17, True)


@pytest.mark.asyncio
async def test_read_unknown_pin_fails():
    async with GpioHandle(_configs()) as handle:
        with pytest.raises(GpioError, match="Pin 5 not configured"):
            await handle.read_pin(5)


@pytest.mark.asyncio
async def test_pin_count_and_availability():
    async with GpioHandle(_configs()) as handle:
        assert await handle.pin_count() == 4
        assert await handle.is_available() is False


@pytest.mark.asyncio
async def test_reconfigure_resets_state():
    async with GpioHandle(_configs()) as handle:
        await handle.write_pin(22, True)
        await handle.reconfigure([GpioPinConfig(name="button", pin=5)])
        assert await handle.pin_count() == 1
        assert await handle.read_pin(5) is PinState.LOW
        with pytest.raises(GpioError):
            await handle.read_pin(22)
        result = await handle.read_all()
    assert [v.name for v in result.values] == ["button"]


@pytest.mark.asyncio
async def test_closed_handle_reports_dead_actor():
    handle = GpioHandle(_configs())
    handle.start()
    await handle.close()
    result = await handle.read_all()
    assert result.values == []
    assert result.errors == ["GPIO actor dead"]
    assert await handle.pin_count() == 0
    assert await handle.is_available() is False
    with pytest.raises(GpioError, match="GPIO actor dead"):
        await handle.write_pin(22, True)


@pytest.mark.asyncio
async def test_unstarted_handle_raises():
    handle = GpioHandle(_configs())
    with pytest.raises(GpioError, match="GPIO actor dead"):
        await handle.init()


@pytest.mark.asyncio
async def test_double_start_rejected():
    handle = GpioHandle([])
    handle.start()
    try:
        with pytest.raises(GpioError, match="already started"):
            handle.start()
    finally:
        await handle.close()