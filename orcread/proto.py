"""ORC metadata messages: file tail, stripe footers, types and statistics."""

from __future__ import annotations

import dataclasses
from enum import IntEnum

from .wire import FieldKind, Message, Repetition, field


class ProtoEnum(IntEnum):
    """An enumeration whose member names match the protocol definition."""

    def as_str_name(self) -> str:
        """Return the name used for this value in the protocol definition."""
        return self.name

    @classmethod
    def from_str_name(cls, value: str):
        """Return the member named ``value``, or ``None`` if there is none."""
        return cls.__members__.get(value)


class StreamKind(ProtoEnum):
    """Kinds of stream stored in a stripe."""

    PRESENT = 0
    DATA = 1
    LENGTH = 2
    DICTIONARY_DATA = 3
    DICTIONARY_COUNT = 4
    SECONDARY = 5
    ROW_INDEX = 6
    BLOOM_FILTER = 7
    BLOOM_FILTER_UTF8 = 8
    ENCRYPTED_INDEX = 9
    ENCRYPTED_DATA = 10
    STRIPE_STATISTICS = 100
    FILE_STATISTICS = 101


class ColumnEncodingKind(ProtoEnum):
    """How the values of a column are encoded."""

    DIRECT = 0
    DICTIONARY = 1
    DIRECT_V2 = 2
    DICTIONARY_V2 = 3


class TypeKind(ProtoEnum):
    """Column data types."""

    BOOLEAN = 0
    BYTE = 1
    SHORT = 2
    INT = 3
    LONG = 4
    FLOAT = 5
    DOUBLE = 6
    STRING = 7
    BINARY = 8
    TIMESTAMP = 9
    LIST = 10
    MAP = 11
    STRUCT = 12
    UNION = 13
    DECIMAL = 14
    DATE = 15
    VARCHAR = 16
    CHAR = 17
    TIMESTAMP_INSTANT = 18


class EncryptionAlgorithm(ProtoEnum):
    """Algorithms used for column encryption."""

    UNKNOWN_ENCRYPTION = 0
    AES_CTR_128 = 1
    AES_CTR_256 = 2


class KeyProviderKind(ProtoEnum):
    """Which key provider encrypted the local keys."""

    UNKNOWN = 0
    HADOOP = 1
    AWS = 2
    GCP = 3
    AZURE = 4


class CalendarKind(ProtoEnum):
    """Calendar used for dates and timestamps."""

    UNKNOWN_CALENDAR = 0
    JULIAN_GREGORIAN = 1
    PROLEPTIC_GREGORIAN = 2


class CompressionKind(ProtoEnum):
    """Compression codec applied to streams."""

    NONE = 0
    ZLIB = 1
    SNAPPY = 2
    LZO = 3
    LZ4 = 4
    ZSTD = 5


@dataclasses.dataclass
class IntegerStatistics(Message):
    minimum: int | None = field(1, FieldKind.SINT64)
    maximum: int | None = field(2, FieldKind.SINT64)
    sum: int | None = field(3, FieldKind.SINT64)


@dataclasses.dataclass
class DoubleStatistics(Message):
    minimum: float | None = field(1, FieldKind.DOUBLE)
    maximum: float | None = field(2, FieldKind.DOUBLE)
    sum: float | None = field(3, FieldKind.DOUBLE)


@dataclasses.dataclass
class StringStatistics(Message):
    minimum: str | None = field(1, FieldKind.STRING)
    maximum: str | None = field(2, FieldKind.STRING)
    # Total length of all strings in a stripe.
    sum: int | None = field(3, FieldKind.SINT64)
    lower_bound: str | None = field(4, FieldKind.STRING)
    upper_bound: str | None = field(5, FieldKind.STRING)


@dataclasses.dataclass
class BucketStatistics(Message):
    count: list[int] = field(1, FieldKind.UINT64, repeated=True)


@dataclasses.dataclass
class DecimalStatistics(Message):
    minimum: str | None = field(1, FieldKind.STRING)
    maximum: str | None = field(2, FieldKind.STRING)
    sum: str | None = field(3, FieldKind.STRING)


@dataclasses.dataclass
class DateStatistics(Message):
    """Minimum and maximum in days since the epoch."""

    minimum: int | None = field(1, FieldKind.SINT32)
    maximum: int | None = field(2, FieldKind.SINT32)


@dataclasses.dataclass
class TimestampStatistics(Message):
    """Minimum and maximum in milliseconds since the epoch."""

    minimum: int | None = field(1, FieldKind.SINT64)
    maximum: int | None = field(2, FieldKind.SINT64)
    minimum_utc: int | None = field(3, FieldKind.SINT64)
    maximum_utc: int | None = field(4, FieldKind.SINT64)
    minimum_nanos: int | None = field(5, FieldKind.INT32)
    maximum_nanos: int | None = field(6, FieldKind.INT32)


@dataclasses.dataclass
class BinaryStatistics(Message):
    # Total binary blob length in a stripe.
    sum: int | None = field(1, FieldKind.SINT64)


@dataclasses.dataclass
class CollectionStatistics(Message):
    """Statistics for list and map columns."""

    min_children: int | None = field(1, FieldKind.UINT64)
    max_children: int | None = field(2, FieldKind.UINT64)
    total_children: int | None = field(3, FieldKind.UINT64)


@dataclasses.dataclass
class ColumnStatistics(Message):
    number_of_values: int | None = field(1, FieldKind.UINT64)
    int_statistics: IntegerStatistics | None = field(2, IntegerStatistics)
    double_statistics: DoubleStatistics | None = field(3, DoubleStatistics)
    string_statistics: StringStatistics | None = field(4, StringStatistics)
    bucket_statistics: BucketStatistics | None = field(5, BucketStatistics)
    decimal_statistics: DecimalStatistics | None = field(6, DecimalStatistics)
    date_statistics: DateStatistics | None = field(7, DateStatistics)
    binary_statistics: BinaryStatistics | None = field(8, BinaryStatistics)
    timestamp_statistics: TimestampStatistics | None = field(9, TimestampStatistics)
    has_null: bool | None = field(10, FieldKind.BOOL)
    bytes_on_disk: int | None = field(11, FieldKind.UINT64)
    collection_statistics: CollectionStatistics | None = field(
        12, CollectionStatistics
    )


@dataclasses.dataclass
class RowIndexEntry(Message):
    positions: list[int] = field(1, FieldKind.UINT64, repeated=True)
    statistics: ColumnStatistics | None = field(2, ColumnStatistics)


@dataclasses.dataclass
class RowIndex(Message):
    entry: list[RowIndexEntry] = field(1, RowIndexEntry, repeated=True)


@dataclasses.dataclass
class BloomFilter(Message):
    num_hash_functions: int | None = field(1, FieldKind.UINT32)
    bitset: list[int] = field(2, FieldKind.FIXED64, repeated=Repetition.UNPACKED)
    utf8bitset: bytes | None = field(3, FieldKind.BYTES)


@dataclasses.dataclass
class BloomFilterIndex(Message):
    bloom_filter: list[BloomFilter] = field(1, BloomFilter, repeated=True)


@dataclasses.dataclass
class Stream(Message):
    kind: StreamKind | int | None = field(1, FieldKind.ENUM, enum=StreamKind)
    column: int | None = field(2, FieldKind.UINT32)
    length: int | None = field(3, FieldKind.UINT64)


@dataclasses.dataclass
class ColumnEncoding(Message):
    kind: ColumnEncodingKind | int | None = field(
        1, FieldKind.ENUM, enum=ColumnEncodingKind
    )
    dictionary_size: int | None = field(2, FieldKind.UINT32)
    # 0 or missing: none or original; 1: UTC for timestamps.
    bloom_encoding: int | None = field(3, FieldKind.UINT32)


@dataclasses.dataclass
class StripeEncryptionVariant(Message):
    streams: list[Stream] = field(1, Stream, repeated=True)
    encoding: list[ColumnEncoding] = field(2, ColumnEncoding, repeated=True)


@dataclasses.dataclass
class StripeFooter(Message):
    streams: list[Stream] = field(1, Stream, repeated=True)
    columns: list[ColumnEncoding] = field(2, ColumnEncoding, repeated=True)
    writer_timezone: str | None = field(3, FieldKind.STRING)
    encryption: list[StripeEncryptionVariant] = field(
        4, StripeEncryptionVariant, repeated=True
    )


@dataclasses.dataclass
class StringPair(Message):
    key: str | None = field(1, FieldKind.STRING)
    value: str | None = field(2, FieldKind.STRING)


@dataclasses.dataclass
class Type(Message):
    kind: TypeKind | int | None = field(1, FieldKind.ENUM, enum=TypeKind)
    subtypes: list[int] = field(2, FieldKind.UINT32, repeated=True)
    field_names: list[str] = field(3, FieldKind.STRING, repeated=True)
    maximum_length: int | None = field(4, FieldKind.UINT32)
    precision: int | None = field(5, FieldKind.UINT32)
    scale: int | None = field(6, FieldKind.UINT32)
    attributes: list[StringPair] = field(7, StringPair, repeated=True)


@dataclasses.dataclass
class StripeInformation(Message):
    offset: int | None = field(1, FieldKind.UINT64)
    index_length: int | None = field(2, FieldKind.UINT64)
    data_length: int | None = field(3, FieldKind.UINT64)
    footer_length: int | None = field(4, FieldKind.UINT64)
    number_of_rows: int | None = field(5, FieldKind.UINT64)
    encrypt_stripe_id: int | None = field(6, FieldKind.UINT64)
    encrypted_local_keys: list[bytes] = field(7, FieldKind.BYTES, repeated=True)


@dataclasses.dataclass
class UserMetadataItem(Message):
    name: str | None = field(1, FieldKind.STRING)
    value: bytes | None = field(2, FieldKind.BYTES)


@dataclasses.dataclass
class StripeStatistics(Message):
    col_stats: list[ColumnStatistics] = field(1, ColumnStatistics, repeated=True)


@dataclasses.dataclass
class Metadata(Message):
    stripe_stats: list[StripeStatistics] = field(1, StripeStatistics, repeated=True)


@dataclasses.dataclass
class ColumnarStripeStatistics(Message):
    col_stats: list[ColumnStatistics] = field(1, ColumnStatistics, repeated=True)


@dataclasses.dataclass
class FileStatistics(Message):
    column: list[ColumnStatistics] = field(1, ColumnStatistics, repeated=True)


@dataclasses.dataclass
class DataMask(Message):
    name: str | None = field(1, FieldKind.STRING)
    mask_parameters: list[str] = field(2, FieldKind.STRING, repeated=True)
    columns: list[int] = field(3, FieldKind.UINT32, repeated=True)


@dataclasses.dataclass
class EncryptionKey(Message):
    key_name: str | None = field(1, FieldKind.STRING)
    key_version: int | None = field(2, FieldKind.UINT32)
    algorithm: EncryptionAlgorithm | int | None = field(
        3, FieldKind.ENUM, enum=EncryptionAlgorithm
    )


@dataclasses.dataclass
class EncryptionVariant(Message):
    root: int | None = field(1, FieldKind.UINT32)
    key: int | None = field(2, FieldKind.UINT32)
    encrypted_key: bytes | None = field(3, FieldKind.BYTES)
    stripe_statistics: list[Stream] = field(4, Stream, repeated=True)
    file_statistics: bytes | None = field(5, FieldKind.BYTES)


@dataclasses.dataclass
class Encryption(Message):
    mask: list[DataMask] = field(1, DataMask, repeated=True)
    key: list[EncryptionKey] = field(2, EncryptionKey, repeated=True)
    variants: list[EncryptionVariant] = field(3, EncryptionVariant, repeated=True)
    key_provider: KeyProviderKind | int | None = field(
        4, FieldKind.ENUM, enum=KeyProviderKind
    )


@dataclasses.dataclass
class Footer(Message):
    header_length: int | None = field(1, FieldKind.UINT64)
    content_length: int | None = field(2, FieldKind.UINT64)
    stripes: list[StripeInformation] = field(3, StripeInformation, repeated=True)
    types: list[Type] = field(4, Type, repeated=True)
    metadata: list[UserMetadataItem] = field(5, UserMetadataItem, repeated=True)
    number_of_rows: int | None = field(6, FieldKind.UINT64)
    statistics: list[ColumnStatistics] = field(7, ColumnStatistics, repeated=True)
    row_index_stride: int | None = field(8, FieldKind.UINT32)
    writer: int | None = field(9, FieldKind.UINT32)
    encryption: Encryption | None = field(10, Encryption)
    calendar: CalendarKind | int | None = field(11, FieldKind.ENUM, enum=CalendarKind)
    software_version: str | None = field(12, FieldKind.STRING)


@dataclasses.dataclass
class PostScript(Message):
    footer_length: int | None = field(1, FieldKind.UINT64)
    compression: CompressionKind | int | None = field(
        2, FieldKind.ENUM, enum=CompressionKind
    )
    compression_block_size: int | None = field(3, FieldKind.UINT64)
    version: list[int] = field(4, FieldKind.UINT32, repeated=True)
    metadata_length: int | None = field(5, FieldKind.UINT64)
    writer_version: int | None = field(6, FieldKind.UINT32)
    stripe_statistics_length: int | None = field(7, FieldKind.UINT64)
    magic: str | None = field(8000, FieldKind.STRING)


@dataclasses.dataclass
class FileTail(Message):
    postscript: PostScript | None = field(1, PostScript)
    footer: Footer | None = field(2, Footer)
    file_length: int | None = field(3, FieldKind.UINT64)
    postscript_length: int | None = field(4, FieldKind.UINT64)