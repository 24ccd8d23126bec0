import pytest

from orcread.errors import DecodeProtoError
from orcread.proto import (
    BloomFilter,
    CalendarKind,
    ColumnEncoding,
    ColumnEncodingKind,
    ColumnStatistics,
    CompressionKind,
    DateStatistics,
    Encryption,
    EncryptionAlgorithm,
    EncryptionKey,
    FileTail,
    Footer,
    IntegerStatistics,
    KeyProviderKind,
    PostScript,
    Stream,
    StreamKind,
    StringStatistics,
    StripeFooter,
    StripeInformation,
    Type,
    TypeKind,
    UserMetadataItem,
)


@pytest.mark.parametrize(
    "member, name",
    [
        (StreamKind.DICTIONARY_DATA, "DICTIONARY_DATA"),
        (StreamKind.BLOOM_FILTER_UTF8, "BLOOM_FILTER_UTF8"),
        (ColumnEncodingKind.DIRECT_V2, "DIRECT_V2"),
        (TypeKind.TIMESTAMP_INSTANT, "TIMESTAMP_INSTANT"),
        (EncryptionAlgorithm.AES_CTR_256, "AES_CTR_256"),
        (KeyProviderKind.AZURE, "AZURE"),
        (CalendarKind.PROLEPTIC_GREGORIAN, "PROLEPTIC_GREGORIAN"),
        (CompressionKind.NONE, "NONE"),
    ],
)
def test_enum_names_round_trip(member, name):
    assert member.as_str_name() == name
    assert type(member).from_str_name(name) is member


def test_from_str_name_unknown_is_none():
    assert CompressionKind.from_str_name("BROTLI") is None
    assert TypeKind.from_str_name("boolean") is None


def test_enum_numbers_follow_the_format():
    assert StreamKind.from_str_name("STRIPE_STATISTICS") == 100
    assert StreamKind.from_str_name("FILE_STATISTICS") == 101
    assert TypeKind.from_str_name("DATE") == 15
    assert CompressionKind.from_str_name("ZSTD") == 5


def test_sint64_statistics_wire_bytes():
    assert IntegerStatistics(minimum=-1).encode() == b"\x08\x01"


def test_packed_subtypes_wire_bytes():
    assert Type(subtypes=[1, 2]).encode() == b"\x12\x02\x01\x02"


def test_bloom_filter_bitset_is_unpacked():
    encoded = BloomFilter(bitset=[1, 2]).encode()
    assert encoded == (
        b"\x11" + (1).to_bytes(8, "little") + b"\x11" + (2).to_bytes(8, "little")
    )
    assert BloomFilter.decode(encoded).bitset == [1, 2]


def test_stream_round_trip_decodes_enum():
    stream = Stream(kind=StreamKind.DATA, column=3, length=10)
    decoded = Stream.decode(stream.encode())
    assert decoded == stream
    assert decoded.kind is StreamKind.DATA


def test_unknown_enum_value_is_kept_as_int():
    decoded = Stream.decode(b"\x08\x63")
    assert decoded.kind == 0x63
    assert not isinstance(decoded.kind, StreamKind)


def test_postscript_round_trip_with_high_field_number():
    postscript = PostScript(
        footer_length=120,
        compression=CompressionKind.ZLIB,
        compression_block_size=262144,
        version=[0, 12],
        metadata_length=40,
        writer_version=6,
        magic="ORC",
    )
    decoded = PostScript.decode(postscript.encode())
    assert decoded == postscript
    assert decoded.compression is CompressionKind.ZLIB
    assert decoded.magic == "ORC"


def test_footer_round_trip_with_nested_messages():
    footer = Footer(
        header_length=3,
        content_length=500,
        stripes=[
            StripeInformation(
                offset=3,
                index_length=10,
                data_length=200,
                footer_length=30,
                number_of_rows=5,
            )
        ],
        types=[
            Type(kind=TypeKind.STRUCT, subtypes=[1, 2], field_names=["a", "b"]),
            Type(kind=TypeKind.FLOAT),
            Type(kind=TypeKind.STRING),
        ],
        metadata=[UserMetadataItem(name="origin", value=b"\x00\xffdata")],
        number_of_rows=5,
        statistics=[
            ColumnStatistics(
                number_of_values=5,
                has_null=True,
                int_statistics=IntegerStatistics(minimum=-5, maximum=5, sum=0),
                string_statistics=StringStatistics(minimum="a", maximum="eeeee"),
                date_statistics=DateStatistics(minimum=-1, maximum=2932896),
            )
        ],
        row_index_stride=10000,
        writer=1,
        encryption=Encryption(
            key=[
                EncryptionKey(
                    key_name="placeholder",
                    key_version=1,
                    algorithm=EncryptionAlgorithm.AES_CTR_128,
                )
            ],
            key_provider=KeyProviderKind.HADOOP,
        ),
        calendar=CalendarKind.JULIAN_GREGORIAN,
        software_version="1.7.2",
    )
    decoded = Footer.decode(footer.encode())
    assert decoded == footer
    assert decoded.types[0].kind is TypeKind.STRUCT
    assert decoded.statistics[0].int_statistics.minimum == -5


def test_stripe_footer_round_trip():
    stripe_footer = StripeFooter(
        streams=[
            Stream(kind=StreamKind.PRESENT, column=1, length=4),
            Stream(kind=StreamKind.DATA, column=1, length=20),
        ],
        columns=[
            ColumnEncoding(kind=ColumnEncodingKind.DIRECT),
            ColumnEncoding(kind=ColumnEncodingKind.DICTIONARY_V2, dictionary_size=2),
        ],
        writer_timezone="UTC",
    )
    decoded = StripeFooter.decode(stripe_footer.encode())
    assert decoded == stripe_footer
    assert decoded.columns[1].kind is ColumnEncodingKind.DICTIONARY_V2


def test_file_tail_round_trip():
    tail = FileTail(
        postscript=PostScript(footer_length=7, magic="ORC"),
        footer=Footer(number_of_rows=0),
        file_length=42,
        postscript_length=7,
    )
    assert FileTail.decode(tail.encode()) == tail


def test_empty_message_decodes_to_defaults():
    footer = Footer.decode(b"")
    assert footer == Footer()
    assert footer.stripes == []
    assert footer.number_of_rows is None


def test_truncated_message_raises():
    with pytest.raises(DecodeProtoError):
        Footer.decode(b"\x1a\x05\x01")