"""Decoding of ORC timestamp streams into nanoseconds since the Unix epoch."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

# ORC timestamps count seconds from 1 January 2015; this is that instant
# in seconds since the Unix epoch.
TIMESTAMP_BASE_SECONDS_SINCE_EPOCH = 1_420_070_400
NANOSECONDS_IN_SECOND = 1_000_000_000


def decode_nanos(encoded: int) -> int:
    """Decode a SECONDARY stream value into nanoseconds.

    The low three bits count truncated trailing zeros; the rest is the value.
    """
    zeros = encoded & 0x7
    nanos = encoded >> 3
    if zeros:
        nanos *= 10 ** (zeros + 1)
    return nanos


def decode_timestamps(data: Iterable[int], secondary: Iterable[int]) -> Iterator[int]:
    """Combine seconds and nanosecond streams into nanoseconds since the epoch.

    Stops as soon as either stream runs out.
    """
    for seconds_since_orc_base, encoded_nanos in zip(data, secondary):
        yield (
            seconds_since_orc_base + TIMESTAMP_BASE_SECONDS_SINCE_EPOCH
        ) * NANOSECONDS_IN_SECOND + decode_nanos(encoded_nanos)