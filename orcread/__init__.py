"""Building blocks for ORC columnar data: metadata messages and column batch decoders."""

__version__ = "0.1.0"
__all__ = [
    "errors",
    "wire",
    "proto",
    "timestamp",
    "decoders",
    "nested",
    "strings",
]