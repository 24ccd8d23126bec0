"""Exceptions raised while reading ORC files."""

from __future__ import annotations

from typing import Any


def _debug_str(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def _kind_name(kind: Any) -> str:
    return str(getattr(kind, "name", kind))


class OrcError(Exception):
    """Base class of every error raised by this package."""


class SeekError(OrcError):
    """Seeking within the input failed."""

    def __init__(self, source: BaseException | str) -> None:
        self.source = source
        super().__init__(f"Failed to seek, source: {source}")


class IoError(OrcError):
    """Reading from the input failed."""

    def __init__(self, source: BaseException | str) -> None:
        self.source = source
        super().__init__(f"Failed to read, source: {source}")


class EmptyFileError(OrcError):
    """The input holds no bytes."""

    def __init__(self) -> None:
        super().__init__("Empty file")


class InvalidInputError(OrcError):
    """The caller passed input that cannot be used."""

    def __init__(self, msg: str) -> None:
        self.msg = msg
        super().__init__(f"Invalid input, message: {msg}")


class OutOfSpecError(OrcError):
    """The file does not follow the ORC specification."""

    def __init__(self, msg: str) -> None:
        self.msg = msg
        super().__init__(f"Out of spec, message: {msg}")


class DecodeFloatError(OrcError):
    """A floating point stream could not be decoded."""

    def __init__(self, source: BaseException | str) -> None:
        self.source = source
        super().__init__(f"Failed to decode float, source: {source}")


class DecodeProtoError(OrcError):
    """A protocol buffers message could not be decoded."""

    def __init__(self, source: BaseException | str) -> None:
        self.source = source
        super().__init__(f"Failed to decode proto, source: {source}")


class NoTypesError(OrcError):
    """The file footer lists no types."""

    def __init__(self) -> None:
        super().__init__("No types found")


class UnsupportedTypeError(OrcError):
    """The file uses a type this reader cannot handle."""

    def __init__(self, kind: Any) -> None:
        self.kind = kind
        super().__init__(f"unsupported type: {_kind_name(kind)}")


class FieldNotFoundError(OrcError):
    """A named field does not exist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Field not found: {_debug_str(name)}")


class InvalidColumnError(OrcError):
    """A column is not usable."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Invalid column : {_debug_str(name)}")


class InvalidColumnEncodingError(OrcError):
    """A column uses an encoding that does not fit its type."""

    def __init__(self, name: str, encoding: Any) -> None:
        self.name = name
        self.encoding = encoding
        super().__init__(
            f"Invalid encoding for column '{name}': {_kind_name(encoding)}"
        )


class AddDaysError(OrcError):
    """Adding days to a date overflowed."""

    def __init__(self) -> None:
        super().__init__("Failed to add day to a date")


class InvalidUtf8Error(OrcError):
    """Bytes that should be UTF-8 text are not."""

    def __init__(self, source: BaseException | str) -> None:
        self.source = source
        super().__init__(f"Invalid utf8, source: {source}")


class OutOfBoundError(OrcError):
    """An index lies outside the valid range."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"Out of bound at: {index}")


class ConvertRecordBatchError(OrcError):
    """Decoded columns could not be assembled into a record batch."""

    def __init__(self, source: BaseException | str) -> None:
        self.source = source
        super().__init__(f"Failed to convert to record batch: {source}")


class VarintTooLargeError(OrcError):
    """A variable-length integer does not fit in 64 bits."""

    def __init__(self) -> None:
        super().__init__("Varint being decoded is too large")


class UnexpectedError(OrcError):
    """An internal condition that should not happen."""

    def __init__(self, msg: str) -> None:
        self.msg = msg
        super().__init__(f"unexpected: {msg}")


class DecompressionError(OrcError):
    """A compressed block could not be decompressed."""

    def __init__(self, codec: str, source: BaseException | str) -> None:
        self.codec = codec
        self.source = source
        super().__init__(f"Failed to build {codec} decoder: {source}")


class ArrowError(OrcError):
    """Building a columnar array failed."""

    def __init__(self, source: BaseException | str) -> None:
        self.source = source
        super().__init__(f"Arrow error: {source}")