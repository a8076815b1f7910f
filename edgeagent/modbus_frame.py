"""Validation and decoding of Modbus TCP response frames."""

from __future__ import annotations

import struct
from dataclasses import dataclass

MBAP_HEADER_SIZE = 7
"""Size of the Modbus TCP application protocol header."""

MAX_PDU_SIZE = 253
"""Largest Modbus protocol data unit."""

VALID_READ_FUNCTION_CODES = frozenset({0x01, 0x02, 0x03, 0x04})
"""Read-only function codes allowed by the security policy."""

_COIL_CODES = frozenset({0x01, 0x02})
_REGISTER_CODES = frozenset({0x03, 0x04})
_EXCEPTION_BIT = 0x80


class FrameError(ValueError):
    """Raised when a frame is malformed, truncated or unsupported."""


@dataclass(frozen=True)
class MbapHeader:
    """The MBAP header that precedes every Modbus TCP PDU."""

    transaction_id: int
    protocol_id: int
    length: int
    unit_id: int


@dataclass(frozen=True)
class ModbusFrame:
    """A validated response frame.

    ``function_code`` has the exception bit removed. ``data`` holds raw
    bit-packed bytes for coil reads, register values for register reads, and
    None for exceptions and other function codes.
    """

    header: MbapHeader
    pdu: bytes
    function_code: int | None = None
    is_exception: bool = False
    exception_code: int | None = None
    data: bytes | tuple[int, ...] | None = None


def parse_frame(data: bytes | bytearray) -> ModbusFrame:
    """Validate and decode a Modbus TCP response.

    Bytes beyond the length given in the header are ignored.
    """
    raw = bytes(data)
    if len(raw) < MBAP_HEADER_SIZE:
        raise FrameError(
            f"frame of {len(raw)} bytes is shorter than the {MBAP_HEADER_SIZE}-byte header"
        )
    transaction_id, protocol_id, length, unit_id = struct.unpack_from(">HHHB", raw)
    if protocol_id != 0:
        raise FrameError(f"protocol id {protocol_id} is not Modbus TCP")
    if length == 0 or length > MAX_PDU_SIZE + 1:
        raise FrameError(f"invalid length field {length}")
    end = MBAP_HEADER_SIZE + length - 1
    if len(raw) < end:
        raise FrameError(f"incomplete frame: need {end} bytes, have {len(raw)}")

    header = MbapHeader(transaction_id, protocol_id, length, unit_id)
    pdu = raw[MBAP_HEADER_SIZE:end]
    if not pdu:
        return ModbusFrame(header=header, pdu=pdu)

    raw_code = pdu[0]
    function_code = raw_code & ~_EXCEPTION_BIT & 0xFF
    if raw_code & _EXCEPTION_BIT:
        return ModbusFrame(
            header=header,
            pdu=pdu,
            function_code=function_code,
            is_exception=True,
            exception_code=pdu[1] if len(pdu) > 1 else None,
        )

    decoded = None
    if function_code in VALID_READ_FUNCTION_CODES:
        decoded = parse_read_response(pdu, function_code)
    return ModbusFrame(header=header, pdu=pdu, function_code=function_code, data=decoded)


def parse_read_response(
    pdu: bytes | bytearray, function_code: int
) -> bytes | tuple[int, ...]:
    """Decode the data of a read response PDU.

    Coil and discrete-input reads return the bit-packed bytes; register reads
    return the big-endian 16-bit values.
    """
    if len(pdu) < 2:
        raise FrameError("read response shorter than two bytes")
    byte_count = pdu[1]
    if len(pdu) < 2 + byte_count:
        raise FrameError(
            f"truncated read response: byte count {byte_count}, have {len(pdu) - 2}"
        )
    payload = bytes(pdu[2 : 2 + byte_count])
    if function_code in _COIL_CODES:
        return payload
    if function_code in _REGISTER_CODES:
        if byte_count % 2:
            raise FrameError(f"register data of {byte_count} bytes is not 16-bit aligned")
        return struct.unpack(f">{byte_count // 2}H", payload)
    raise FrameError(f"unsupported function code {function_code}")