"""Protocol-buffer compatible wire encoding.

Only the subset of the protobuf wire format the QuestNav messages need:
varints (enums, bools, int32, uint32), 64-bit doubles and length-delimited
fields (strings and nested messages). Field numbers are carried explicitly
by every message so peers built from the upstream ``.proto`` files decode
our bytes and vice versa.
"""

from __future__ import annotations

import struct
from typing import Iterator, Tuple, Union

WIRE_VARINT = 0
WIRE_FIXED64 = 1
WIRE_LENGTH_DELIMITED = 2
WIRE_FIXED32 = 5

_UINT64_MASK = (1 << 64) - 1
_UINT32_MASK = (1 << 32) - 1


class WireFormatError(ValueError):
    """Raised when a buffer is not a valid encoding."""


FieldValue = Union[int, bytes]


def encode_varint(value: int) -> bytes:
    """Encode an unsigned varint. Negative values use 64-bit two's complement."""
    value &= _UINT64_MASK
    out = bytearray()
    while True:
        bits = value & 0x7F
        value >>= 7
        if value:
            out.append(bits | 0x80)
        else:
            out.append(bits)
            return bytes(out)


def decode_varint(data: bytes, offset: int) -> Tuple[int, int]:
    """Decode a varint at ``offset``. Returns (value, new_offset)."""
    result = 0
    shift = 0
    while True:
        if offset >= len(data):
            raise WireFormatError("Truncated varint")
        byte = data[offset]
        offset += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result & _UINT64_MASK, offset
        shift += 7
        if shift >= 64:
            raise WireFormatError("Varint too long")


def to_int32(value: int) -> int:
    """Reinterpret a decoded varint as a signed 32-bit integer."""
    value &= _UINT32_MASK
    return value - (1 << 32) if value & 0x80000000 else value


def to_uint32(value: int) -> int:
    return value & _UINT32_MASK


class MessageWriter:
    """Accumulates encoded fields for one message.

    Default values (0, False, 0.0, "") are skipped, as proto3 does.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def _tag(self, field_number: int, wire_type: int) -> None:
        self._buffer.extend(encode_varint((field_number << 3) | wire_type))

    def varint(self, field_number: int, value: int) -> MessageWriter:
        if value:
            self._tag(field_number, WIRE_VARINT)
            self._buffer.extend(encode_varint(int(value)))
        return self

    def boolean(self, field_number: int, value: bool) -> MessageWriter:
        return self.varint(field_number, 1 if value else 0)

    def double(self, field_number: int, value: float) -> MessageWriter:
        # -0.0 and NaN are not "default" and must survive the trip
        if value != 0.0 or struct.pack("<d", value) != struct.pack("<d", 0.0):
            self._tag(field_number, WIRE_FIXED64)
            self._buffer.extend(struct.pack("<d", value))
        return self

    def string(self, field_number: int, value: str) -> MessageWriter:
        if value:
            self.raw_bytes(field_number, value.encode("utf-8"))
        return self

    def raw_bytes(self, field_number: int, value: bytes) -> MessageWriter:
        self._tag(field_number, WIRE_LENGTH_DELIMITED)
        self._buffer.extend(encode_varint(len(value)))
        self._buffer.extend(value)
        return self

    def message(self, field_number: int, encoded: bytes) -> MessageWriter:
        """Write an embedded message. Always present, even when empty."""
        return self.raw_bytes(field_number, encoded)

    def to_bytes(self) -> bytes:
        return bytes(self._buffer)


def iter_fields(data: bytes) -> Iterator[Tuple[int, int, FieldValue]]:
    """Yield ``(field_number, wire_type, value)`` for each field in ``data``.

    Varints come back as ``int``, fixed-width and length-delimited values
    as raw ``bytes``. Callers skip field numbers they do not know.
    """
    offset = 0
    length = len(data)
    while offset < length:
        key, offset = decode_varint(data, offset)
        field_number = key >> 3
        wire_type = key & 0x07
        if field_number == 0:
            raise WireFormatError("Invalid field number 0")

        if wire_type == WIRE_VARINT:
            value, offset = decode_varint(data, offset)
            yield field_number, wire_type, value
        elif wire_type == WIRE_FIXED64:
            end = offset + 8
            if end > length:
                raise WireFormatError("Truncated fixed64 field")
            yield field_number, wire_type, data[offset:end]
            offset = end
        elif wire_type == WIRE_LENGTH_DELIMITED:
            size, offset = decode_varint(data, offset)
            end = offset + size
            if end > length:
                raise WireFormatError("Truncated length-delimited field")
            yield field_number, wire_type, data[offset:end]
            offset = end
        elif wire_type == WIRE_FIXED32:
            end = offset + 4
            if end > length:
                raise WireFormatError("Truncated fixed32 field")
            yield field_number, wire_type, data[offset:end]
            offset = end
        else:
            raise WireFormatError(f"Unsupported wire type {wire_type}")


def read_double(raw: FieldValue) -> float:
    if not isinstance(raw, bytes) or len(raw) != 8:
        raise WireFormatError("Expected 8-byte double")
    return struct.unpack("<d", raw)[0]


def read_string(raw: FieldValue) -> str:
    if not isinstance(raw, bytes):
        raise WireFormatError("Expected length-delimited string")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise WireFormatError(f"Invalid UTF-8 string: {e}") from e


def expect_wire_type(field_number: int, wire_type: int, expected: int) -> None:
    if wire_type != expected:
        raise WireFormatError(
            f"Field {field_number}: wire type {wire_type}, expected {expected}"
        )


__all__ = [
    "MessageWriter",
    "WireFormatError",
    "decode_varint",
    "encode_varint",
    "expect_wire_type",
    "iter_fields",
    "read_double",
    "read_string",
    "to_int32",
    "to_uint32",
]
