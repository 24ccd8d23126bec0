"""Decoders for nested columns: structs, lists and maps."""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from .decoders import ArrayBatchDecoder, derive_present, populate_lengths_with_nulls
from .errors import ArrowError


def _lengths_to_fetch(present: Sequence[bool] | None, batch_size: int) -> int:
    if present is None:
        return batch_size
    return sum(1 for is_present in present if is_present)


def _take_lengths(lengths: Iterator[int], count: int) -> list[int]:
    return [int(length) for length in itertools.islice(lengths, count)]


def _split(
    values: Sequence[Any], lengths: Sequence[int], present: Sequence[bool] | None
) -> list[list[Any] | None]:
    """Cut ``values`` into consecutive runs of ``lengths``; null rows become ``None``."""
    rows: list[list[Any] | None] = []
    start = 0
    flags = present if present is not None else itertools.repeat(True)
    for length, is_present in zip(lengths, flags):
        end = start + length
        rows.append(list(values[start:end]) if is_present else None)
        start = end
    return rows


class StructArrayDecoder(ArrayBatchDecoder):
    """Decodes a struct column into rows of ``{field name: value}``."""

    def __init__(
        self,
        fields: Sequence[str],
        decoders: Sequence[ArrayBatchDecoder],
        present: Iterable[bool] | None = None,
    ) -> None:
        if len(fields) != len(decoders):
            raise ArrowError(
                f"struct has {len(fields)} fields but {len(decoders)} decoders"
            )
        self.fields = tuple(fields)
        self._decoders = list(decoders)
        self._present = None if present is None else iter(present)

    def next_batch(
        self, batch_size: int, parent_present: Sequence[bool] | None = None
    ) -> list[dict[str, Any] | None]:
        present = derive_present(self._present, parent_present, batch_size)
        children = [
            decoder.next_batch(batch_size, present) for decoder in self._decoders
        ]
        if present is not None:
            row_count = len(present)
        elif children:
            row_count = len(children[0])
        else:
            row_count = batch_size
        for name, child in zip(self.fields, children):
            if len(child) != row_count:
                raise ArrowError(
                    f"child '{name}' has {len(child)} values, expected {row_count}"
                )
        flags = present if present is not None else [True] * row_count
        return [
            dict(zip(self.fields, (child[row] for child in children)))
            if is_present
            else None
            for row, is_present in enumerate(flags)
        ]


class ListArrayDecoder(ArrayBatchDecoder):
    """Decodes a list column into rows of lists."""

    def __init__(
        self,
        inner: ArrayBatchDecoder,
        lengths: Iterable[int],
        present: Iterable[bool] | None = None,
    ) -> None:
        self._inner = inner
        self._lengths = iter(lengths)
        self._present = None if present is None else iter(present)

    def next_batch(
        self, batch_size: int, parent_present: Sequence[bool] | None = None
    ) -> list[list[Any] | None]:
        present = derive_present(self._present, parent_present, batch_size)
        lengths = _take_lengths(self._lengths, _lengths_to_fetch(present, batch_size))
        total = sum(lengths)
        child = self._inner.next_batch(total, None)
        if len(child) != total:
            raise ArrowError(
                f"list child has {len(child)} values, offsets need {total}"
            )
        lengths = populate_lengths_with_nulls(lengths, batch_size, present)
        return _split(child, lengths, present)


class MapArrayDecoder(ArrayBatchDecoder):
    """Decodes a map column into rows of ``(key, value)`` pairs."""

    def __init__(
        self,
        keys: ArrayBatchDecoder,
        values: ArrayBatchDecoder,
        lengths: Iterable[int],
        present: Iterable[bool] | None = None,
    ) -> None:
        self._keys = keys
        self._values = values
        self._lengths = iter(lengths)
        self._present = None if present is None else iter(present)

    def next_batch(
        self, batch_size: int, parent_present: Sequence[bool] | None = None
    ) -> list[list[tuple[Any, Any]] | None]:
        present = derive_present(self._present, parent_present, batch_size)
        lengths = _take_lengths(self._lengths, _lengths_to_fetch(present, batch_size))
        total = sum(lengths)
        keys = self._keys.next_batch(total, None)
        values = self._values.next_batch(total, None)
        if len(keys) != len(values):
            raise ArrowError(
                f"map has {len(keys)} keys but {len(values)} values"
            )
        if len(keys) != total:
            raise ArrowError(f"map has {len(keys)} entries, offsets need {total}")
        if any(key is None for key in keys):
            raise ArrowError("map keys cannot be null")
        entries = list(zip(keys, values))
        lengths = populate_lengths_with_nulls(lengths, batch_size, present)
        return _split(entries, lengths, present)