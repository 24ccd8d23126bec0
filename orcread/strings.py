"""Decoders for string and binary columns, direct and dictionary encoded."""

from __future__ import annotations

import dataclasses
import io
import itertools
from collections.abc import Iterable, Iterator, Sequence
from typing import Any, BinaryIO

from .decoders import (
    ArrayBatchDecoder,
    PrimitiveArrayDecoder,
    derive_present,
    populate_lengths_with_nulls,
)
from .errors import ArrowError, IoError


def _as_stream(data: bytes | bytearray | memoryview | BinaryIO) -> BinaryIO:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(data))
    return data


def _read_up_to(stream: BinaryIO, length: int) -> bytes:
    """Read ``length`` bytes, or fewer if the stream ends first."""
    chunks = []
    remaining = length
    try:
        while remaining > 0:
            chunk = stream.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
    except OSError as exc:
        raise IoError(exc) from exc
    return b"".join(chunks)


class ByteArrayDecoder(ArrayBatchDecoder):
    """Decodes a binary column from a LENGTH stream and a DATA byte stream."""

    def __init__(
        self,
        data: bytes | bytearray | memoryview | BinaryIO,
        lengths: Iterable[int],
        present: Iterable[bool] | None = None,
    ) -> None:
        self._data = _as_stream(data)
        self._lengths = iter(lengths)
        self._present = None if present is None else iter(present)

    def _convert(self, value: bytes) -> Any:
        return value

    def next_batch(
        self, batch_size: int, parent_present: Sequence[bool] | None = None
    ) -> list[Any]:
        present = derive_present(self._present, parent_present, batch_size)
        to_fetch = (
            batch_size
            if present is None
            else sum(1 for is_present in present if is_present)
        )
        lengths = [int(length) for length in itertools.islice(self._lengths, to_fetch)]
        total = sum(lengths)
        buffer = _read_up_to(self._data, total)
        if len(buffer) < total:
            raise ArrowError(
                f"offsets need {total} bytes but only {len(buffer)} are available"
            )
        lengths = populate_lengths_with_nulls(lengths, batch_size, present)
        flags: Iterator[bool] | Sequence[bool] = (
            present if present is not None else itertools.repeat(True)
        )
        values = []
        start = 0
        for length, is_present in zip(lengths, flags):
            end = start + length
            values.append(self._convert(buffer[start:end]) if is_present else None)
            start = end
        return values


class StringArrayDecoder(ByteArrayDecoder):
    """Decodes a directly encoded UTF-8 string column."""

    def _convert(self, value: bytes) -> str:
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ArrowError(f"Invalid UTF8 sequence: {exc}") from exc


@dataclasses.dataclass(frozen=True)
class DictionaryArray:
    """Keys into a shared list of string values; ``None`` keys are nulls."""

    keys: tuple[int | None, ...]
    values: tuple[str | None, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple(self.keys))
        object.__setattr__(self, "values", tuple(self.values))
        for key in self.keys:
            if key is not None and not 0 <= key < len(self.values):
                raise ArrowError(
                    f"Invalid dictionary key {key} for dictionary of "
                    f"length {len(self.values)}"
                )

    def __len__(self) -> int:
        return len(self.keys)

    def __iter__(self) -> Iterator[str | None]:
        return iter(self.to_list())

    def __getitem__(self, index: int) -> str | None:
        key = self.keys[index]
        return None if key is None else self.values[key]

    def to_list(self) -> list[str | None]:
        """Return the looked-up values, ``None`` for null rows."""
        return [None if key is None else self.values[key] for key in self.keys]


class DictionaryStringArrayDecoder(ArrayBatchDecoder):
    """Decodes a dictionary encoded string column into dictionary arrays."""

    def __init__(
        self, indexes: PrimitiveArrayDecoder, dictionary: Sequence[str | None]
    ) -> None:
        self._indexes = indexes
        self.dictionary = tuple(dictionary)

    def next_batch(
        self, batch_size: int, parent_present: Sequence[bool] | None = None
    ) -> DictionaryArray:
        keys = self._indexes.next_batch(batch_size, parent_present)
        return DictionaryArray(keys, self.dictionary)


def new_dictionary_string_decoder(
    dictionary_data: bytes | bytearray | memoryview | BinaryIO,
    dictionary_lengths: Iterable[int],
    dictionary_size: int,
    indexes: Iterable[int],
    present: Iterable[bool] | None = None,
) -> DictionaryStringArrayDecoder:
    """Read the whole dictionary up front and return a decoder over its indexes."""
    dictionary = StringArrayDecoder(dictionary_data, dictionary_lengths).next_batch(
        dictionary_size
    )
    return DictionaryStringArrayDecoder(
        PrimitiveArrayDecoder(indexes, present), dictionary
    )