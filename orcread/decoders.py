"""Batch decoding of column value streams into nullable arrays and record batches."""

from __future__ import annotations

import abc
import dataclasses
import itertools
from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from .errors import ConvertRecordBatchError, UnexpectedError

_TOO_SHORT = "array less than expected length"


def merge_parent_present(
    parent_present: Sequence[bool], present: Iterable[bool]
) -> list[bool]:
    """Combine a parent's presence flags with a child's.

    The child only has flags for the rows its parent marks present; those
    are pulled from ``present`` one at a time, as needed.
    """
    child = iter(present)
    merged = []
    for is_present in parent_present:
        if is_present:
            try:
                merged.append(bool(next(child)))
            except StopIteration:
                raise UnexpectedError(_TOO_SHORT) from None
        else:
            merged.append(False)
    return merged


def derive_present(
    present: Iterator[bool] | None,
    parent_present: Sequence[bool] | None,
    batch_size: int,
) -> list[bool] | None:
    """Work out the presence flags for the next batch, or ``None`` if all present.

    ``present`` is consumed lazily: with a parent, only as many flags are
    taken as the parent has present rows.
    """
    if present is not None:
        window = itertools.islice(present, batch_size)
        if parent_present is not None:
            return merge_parent_present(parent_present, window)
        return [bool(flag) for flag in window]
    if parent_present is not None:
        return list(parent_present)
    return None


def populate_lengths_with_nulls(
    lengths: Sequence[int], batch_size: int, present: Sequence[bool] | None
) -> list[int]:
    """Insert a zero length for every null row."""
    if present is None:
        return [int(length) for length in lengths]
    remaining = iter(lengths)
    result = []
    for is_present in present:
        if is_present:
            try:
                result.append(int(next(remaining)))
            except StopIteration:
                raise UnexpectedError(_TOO_SHORT) from None
        else:
            result.append(0)
    return result


def null_mask(present: Sequence[bool] | None) -> list[bool] | None:
    """Return validity flags, or ``None`` when no row is null."""
    if present is None or all(present):
        return None
    return list(present)


class ArrayBatchDecoder(abc.ABC):
    """Decodes one column into arrays, one batch at a time."""

    @abc.abstractmethod
    def next_batch(
        self, batch_size: int, parent_present: Sequence[bool] | None = None
    ) -> list[Any]:
        """Return up to ``batch_size`` values, ``None`` marking nulls.

        When ``parent_present`` is given, the rows its parent marks null are
        null here too and take no value from this column's streams.
        """


class PrimitiveArrayDecoder(ArrayBatchDecoder):
    """Decoder for columns holding one scalar value per present row."""

    def __init__(
        self, values: Iterable[Any], present: Iterable[bool] | None = None
    ) -> None:
        self._values = iter(values)
        self._present = None if present is None else iter(present)

    def _convert(self, value: Any) -> Any:
        return value

    def _next_value(self) -> Any:
        try:
            return self._convert(next(self._values))
        except StopIteration:
            raise UnexpectedError(_TOO_SHORT) from None

    def next_batch(
        self, batch_size: int, parent_present: Sequence[bool] | None = None
    ) -> list[Any]:
        present = derive_present(self._present, parent_present, batch_size)
        if present is None:
            return [
                self._convert(value)
                for value in itertools.islice(self._values, batch_size)
            ]
        return [self._next_value() if is_present else None for is_present in present]


class BooleanArrayDecoder(PrimitiveArrayDecoder):
    """Decoder for boolean columns."""

    def _convert(self, value: Any) -> bool:
        return bool(value)


@dataclasses.dataclass(frozen=True)
class RecordBatch:
    """Named columns of equal length."""

    names: tuple[str, ...]
    columns: tuple[list[Any], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", tuple(self.names))
        object.__setattr__(self, "columns", tuple(self.columns))
        if len(self.names) != len(self.columns):
            raise ConvertRecordBatchError(
                f"{len(self.names)} names for {len(self.columns)} columns"
            )
        lengths = {len(column) for column in self.columns}
        if len(lengths) > 1:
            raise ConvertRecordBatchError(
                "all columns in a record batch must have the same length"
            )

    @property
    def num_rows(self) -> int:
        return len(self.columns[0]) if self.columns else 0

    def column(self, index: int) -> list[Any]:
        """Return the column at ``index``."""
        return self.columns[index]


class StripeBatchDecoder:
    """Turns the column decoders of one stripe into record batches."""

    def __init__(
        self,
        names: Sequence[str],
        decoders: Sequence[ArrayBatchDecoder],
        number_of_rows: int,
        batch_size: int,
    ) -> None:
        self.names = tuple(names)
        self.decoders = list(decoders)
        self.number_of_rows = number_of_rows
        self.batch_size = batch_size
        self._index = 0

    def _decode_columns(self, remaining: int) -> list[list[Any]]:
        chunk = min(self.batch_size, remaining)
        arrays = []
        for decoder in self.decoders:
            array = decoder.next_batch(chunk, None)
            if not array:
                break
            arrays.append(array)
        return arrays

    def __iter__(self) -> Iterator[RecordBatch]:
        while self._index < self.number_of_rows:
            arrays = self._decode_columns(self.number_of_rows - self._index)
            if not arrays:
                return
            yield RecordBatch(self.names[: len(arrays)], tuple(arrays))
            self._index += self.batch_size