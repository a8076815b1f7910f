"""Building blocks for an industrial IoT edge agent: bounded buffers, payload and Modbus frame checks, simulated GPIO, health state and command validation."""

__version__ = "1.2.2"