"""Protocol buffers wire format: varints, fields and declarative messages."""

from __future__ import annotations

import dataclasses
import functools
import struct
from collections.abc import Iterator
from enum import Enum, IntEnum
from typing import Any, TypeVar

from .errors import DecodeProtoError, VarintTooLargeError

_U32 = (1 << 32) - 1
_U64 = (1 << 64) - 1
_WIRE_KEY = "orcread.wire"

M = TypeVar("M", bound="Message")


class WireType(IntEnum):
    """The low three bits of a field key."""

    VARINT = 0
    I64 = 1
    LEN = 2
    SGROUP = 3
    EGROUP = 4
    I32 = 5


class FieldKind(Enum):
    """Scalar and composite field types of a message."""

    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    SINT32 = "sint32"
    SINT64 = "sint64"
    BOOL = "bool"
    ENUM = "enum"
    DOUBLE = "double"
    FIXED64 = "fixed64"
    SFIXED64 = "sfixed64"
    FLOAT = "float"
    FIXED32 = "fixed32"
    SFIXED32 = "sfixed32"
    STRING = "string"
    BYTES = "bytes"
    MESSAGE = "message"

    @property
    def wire_type(self) -> WireType:
        return _WIRE_TYPES[self]

    @property
    def packable(self) -> bool:
        return self.wire_type is not WireType.LEN


_WIRE_TYPES = {
    **dict.fromkeys(
        (
            FieldKind.INT32,
            FieldKind.INT64,
            FieldKind.UINT32,
            FieldKind.UINT64,
            FieldKind.SINT32,
            FieldKind.SINT64,
            FieldKind.BOOL,
            FieldKind.ENUM,
        ),
        WireType.VARINT,
    ),
    **dict.fromkeys(
        (FieldKind.DOUBLE, FieldKind.FIXED64, FieldKind.SFIXED64), WireType.I64
    ),
    **dict.fromkeys(
        (FieldKind.FLOAT, FieldKind.FIXED32, FieldKind.SFIXED32), WireType.I32
    ),
    **dict.fromkeys(
        (FieldKind.STRING, FieldKind.BYTES, FieldKind.MESSAGE), WireType.LEN
    ),
}

_FIXED_FORMATS = {
    FieldKind.DOUBLE: "<d",
    FieldKind.FIXED64: "<Q",
    FieldKind.SFIXED64: "<q",
    FieldKind.FLOAT: "<f",
    FieldKind.FIXED32: "<I",
    FieldKind.SFIXED32: "<i",
}


class Repetition(Enum):
    """How a field occurs: once, or repeated with or without packing."""

    SINGLE = "single"
    PACKED = "packed"
    UNPACKED = "unpacked"


@dataclasses.dataclass(frozen=True)
class _FieldInfo:
    number: int
    kind: FieldKind
    message_type: type | None
    repetition: Repetition
    enum: type | None


def encode_varint(value: int) -> bytes:
    """Encode an integer as a base-128 varint; negatives use 64-bit two's complement."""
    if value < 0:
        if value < -(1 << 63):
            raise ValueError(f"varint out of range: {value}")
        value &= _U64
    if value > _U64:
        raise ValueError(f"varint out of range: {value}")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def decode_varint(data: bytes, pos: int) -> tuple[int, int]:
    """Decode a varint at ``pos``; return the value and the position after it."""
    result = 0
    for shift in range(0, 70, 7):
        if pos >= len(data):
            raise DecodeProtoError("truncated varint")
        byte = data[pos]
        pos += 1
        if shift == 63 and byte > 1:
            raise VarintTooLargeError()
        result |= (byte & 0x7F) << shift
        if byte < 0x80:
            return result, pos
    raise VarintTooLargeError()


def encode_zigzag(value: int) -> int:
    """Map a signed integer onto an unsigned one, small magnitudes first."""
    return (value << 1) ^ (value >> 63)


def decode_zigzag(value: int) -> int:
    """Invert :func:`encode_zigzag`."""
    return (value >> 1) ^ -(value & 1)


def _take(data: bytes, pos: int, size: int) -> tuple[bytes, int]:
    end = pos + size
    if end > len(data):
        raise DecodeProtoError("buffer underflow")
    return data[pos:end], end


def iter_fields(data: bytes) -> Iterator[tuple[int, WireType, Any]]:
    """Yield ``(number, wire_type, raw)`` for each field in an encoded message.

    ``raw`` is an int for varints and bytes for every other wire type.
    """
    data = bytes(data)
    pos = 0
    while pos < len(data):
        key, pos = decode_varint(data, pos)
        number = key >> 3
        if number == 0:
            raise DecodeProtoError("invalid field number 0")
        try:
            wire_type = WireType(key & 0x7)
        except ValueError:
            raise DecodeProtoError(f"invalid wire type {key & 0x7}") from None
        if wire_type is WireType.VARINT:
            value, pos = decode_varint(data, pos)
        elif wire_type is WireType.I64:
            value, pos = _take(data, pos, 8)
        elif wire_type is WireType.I32:
            value, pos = _take(data, pos, 4)
        elif wire_type is WireType.LEN:
            length, pos = decode_varint(data, pos)
            value, pos = _take(data, pos, length)
        else:
            raise DecodeProtoError("groups are not supported")
        yield number, wire_type, value


def field(number, kind, repeated=False, enum=None):
    """Declare a message field for use in a dataclass body.

    ``kind`` is a :class:`FieldKind` or a :class:`Message` subclass.
    ``repeated`` is a bool (packed when the kind allows) or a :class:`Repetition`.
    """
    message_type = None
    if isinstance(kind, type) and issubclass(kind, Message):
        message_type, kind = kind, FieldKind.MESSAGE
    elif not isinstance(kind, FieldKind):
        raise TypeError(f"unsupported field kind: {kind!r}")
    if repeated is True:
        repetition = Repetition.PACKED if kind.packable else Repetition.UNPACKED
    elif repeated is False:
        repetition = Repetition.SINGLE
    else:
        repetition = Repetition(repeated)
    if repetition is Repetition.PACKED and not kind.packable:
        raise TypeError(f"{kind.value} fields cannot be packed")
    info = _FieldInfo(number, kind, message_type, repetition, enum)
    if repetition is Repetition.SINGLE:
        return dataclasses.field(default=None, metadata={_WIRE_KEY: info})
    return dataclasses.field(default_factory=list, metadata={_WIRE_KEY: info})


@functools.lru_cache(maxsize=None)
def _specs(cls: type) -> dict[int, tuple[str, _FieldInfo]]:
    return {
        f.metadata[_WIRE_KEY].number: (f.name, f.metadata[_WIRE_KEY])
        for f in dataclasses.fields(cls)
        if _WIRE_KEY in f.metadata
    }


def _convert_varint(info: _FieldInfo, raw: int) -> Any:
    kind = info.kind
    if kind is FieldKind.BOOL:
        return raw != 0
    if kind is FieldKind.UINT64:
        return raw
    if kind is FieldKind.UINT32:
        return raw & _U32
    if kind is FieldKind.SINT64:
        return decode_zigzag(raw)
    if kind is FieldKind.SINT32:
        return decode_zigzag(raw & _U32)
    if kind is FieldKind.INT64:
        raw &= _U64
        return raw - (1 << 64) if raw >= 1 << 63 else raw
    raw &= _U32
    value = raw - (1 << 32) if raw >= 1 << 31 else raw
    if info.enum is not None:
        try:
            return info.enum(value)
        except ValueError:
            return value
    return value


def _decode_value(info: _FieldInfo, wire_type: WireType, raw: Any) -> Any:
    if wire_type is not info.kind.wire_type:
        raise DecodeProtoError(
            f"field {info.number}: expected wire type {info.kind.wire_type.name}, "
            f"got {wire_type.name}"
        )
    if wire_type is WireType.VARINT:
        return _convert_varint(info, raw)
    if info.kind in _FIXED_FORMATS:
        return struct.unpack(_FIXED_FORMATS[info.kind], raw)[0]
    if info.kind is FieldKind.STRING:
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeProtoError(exc) from exc
    if info.kind is FieldKind.BYTES:
        return raw
    return info.message_type.decode(raw)


def _unpack(info: _FieldInfo, payload: bytes) -> Iterator[Any]:
    wire_type = info.kind.wire_type
    pos = 0
    if wire_type is WireType.VARINT:
        while pos < len(payload):
            raw, pos = decode_varint(payload, pos)
            yield _convert_varint(info, raw)
        return
    fmt = _FIXED_FORMATS[info.kind]
    size = struct.calcsize(fmt)
    if len(payload) % size:
        raise DecodeProtoError(f"packed field {info.number} has a partial element")
    for (value,) in struct.iter_unpack(fmt, payload):
        yield value


def _encode_payload(info: _FieldInfo, value: Any) -> bytes:
    kind = info.kind
    if kind.wire_type is WireType.VARINT:
        if kind is FieldKind.BOOL:
            return encode_varint(1 if value else 0)
        if kind in (FieldKind.SINT32, FieldKind.SINT64):
            return encode_varint(encode_zigzag(int(value)))
        return encode_varint(int(value))
    if kind in _FIXED_FORMATS:
        return struct.pack(_FIXED_FORMATS[kind], value)
    if kind is FieldKind.STRING:
        body = value.encode("utf-8")
    elif kind is FieldKind.BYTES:
        body = bytes(value)
    else:
        body = value.encode()
    return encode_varint(len(body)) + body


def _key(number: int, wire_type: WireType) -> bytes:
    return encode_varint((number << 3) | wire_type)


class Message:
    """Base class for dataclass messages whose fields are declared with :func:`field`."""

    @classmethod
    def decode(cls: type[M], data: bytes) -> M:
        """Decode an encoded message, skipping fields this class does not know."""
        specs = _specs(cls)
        values: dict[str, Any] = {}
        nested: dict[str, tuple[_FieldInfo, list[bytes]]] = {}
        for number, wire_type, raw in iter_fields(data):
            entry = specs.get(number)
            if entry is None:
                continue
            name, info = entry
            if info.repetition is Repetition.SINGLE:
                if info.kind is FieldKind.MESSAGE:
                    if wire_type is not WireType.LEN:
                        raise DecodeProtoError(
                            f"field {number}: expected wire type LEN, got {wire_type.name}"
                        )
                    # Concatenated encodings of a message merge into one.
                    nested.setdefault(name, (info, []))[1].append(raw)
                else:
                    values[name] = _decode_value(info, wire_type, raw)
                continue
            bucket = values.setdefault(name, [])
            if wire_type is WireType.LEN and info.kind.packable:
                bucket.extend(_unpack(info, raw))
            else:
                bucket.append(_decode_value(info, wire_type, raw))
        for name, (info, chunks) in nested.items():
            values[name] = info.message_type.decode(b"".join(chunks))
        return cls(**values)

    def encode(self) -> bytes:
        """Encode the message in field-number order, leaving out unset fields."""
        out = bytearray()
        for number, (name, info) in sorted(_specs(type(self)).items()):
            value = getattr(self, name)
            if info.repetition is Repetition.SINGLE:
                if value is not None:
                    out += _key(number, info.kind.wire_type)
                    out += _encode_payload(info, value)
            elif not value:
                continue
            elif info.repetition is Repetition.PACKED:
                payload = b"".join(_encode_payload(info, item) for item in value)
                out += _key(number, WireType.LEN)
                out += encode_varint(len(payload))
                out += payload
            else:
                for item in value:
                    out += _key(number, info.kind.wire_type)
                    out += _encode_payload(info, item)
        return bytes(out)