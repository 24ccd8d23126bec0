# orcread

Pure-Python pieces for working with Apache ORC columnar data: the protobuf
messages that describe an ORC file tail and its stripes, a small protobuf
wire-format codec, and decoders that turn already-decoded ORC column streams
into batches of plain Python values.

No third-party libraries are needed at runtime.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `orcread.errors` – the `OrcError` hierarchy used throughout the package,
  for example `OutOfSpecError`, `VarintTooLargeError`, `DecodeProtoError`,
  `UnexpectedError`, `ConvertRecordBatchError` and `ArrowError`.
- `orcread.wire` – protobuf wire format: `encode_varint`, `decode_varint`,
  `encode_zigzag`, `decode_zigzag`, `iter_fields`, and a `Message` base class
  for dataclasses whose fields are declared with `field(number, kind, ...)`.
  `Message.decode` skips unknown fields; `Message.encode` writes fields in
  number order and leaves out unset ones.
- `orcread.proto` – the ORC metadata messages (`PostScript`, `Footer`,
  `StripeFooter`, `StripeInformation`, `Type`, `Stream`, `ColumnEncoding`,
  the statistics messages, encryption messages, `FileTail`, …) and the enums
  `StreamKind`, `ColumnEncodingKind`, `TypeKind`, `CompressionKind`,
  `CalendarKind`, `EncryptionAlgorithm` and `KeyProviderKind`. Every enum has
  `as_str_name()` and `from_str_name()` (which returns `None` for an unknown
  name).
- `orcread.timestamp` – `decode_nanos` decodes one SECONDARY stream value;
  `decode_timestamps` combines the DATA (seconds since 2015-01-01) and
  SECONDARY streams into nanoseconds since the Unix epoch, stopping when
  either stream runs out.
- `orcread.decoders` – `PrimitiveArrayDecoder` and `BooleanArrayDecoder`,
  the present-stream helpers `merge_parent_present`, `derive_present`,
  `populate_lengths_with_nulls` and `null_mask`, the `RecordBatch` container
  and `StripeBatchDecoder`, which yields record batches of at most
  `batch_size` rows.
- `orcread.nested` – `StructArrayDecoder` (rows are dicts),
  `ListArrayDecoder` (rows are lists) and `MapArrayDecoder` (rows are lists
  of `(key, value)` pairs; null keys are rejected).
- `orcread.strings` – `ByteArrayDecoder` for binary columns,
  `StringArrayDecoder` for direct UTF-8 strings, and dictionary-encoded
  strings via `new_dictionary_string_decoder`, whose batches are
  `DictionaryArray` objects (`to_list()` gives the looked-up values).

In every batch a null row is `None`.

## Examples

Round-tripping a metadata message:

```python
from orcread.proto import CompressionKind, PostScript

data = PostScript(footer_length=100, compression=CompressionKind.ZLIB, magic="ORC").encode()
postscript = PostScript.decode(data)
print(postscript.compression.as_str_name())  # ZLIB
```

Decoding a column with a present stream in batches:

```python
from orcread.decoders import PrimitiveArrayDecoder, StripeBatchDecoder

decoder = StripeBatchDecoder(
    names=["id"],
    decoders=[PrimitiveArrayDecoder([1, 2, 3], [True, False, True, True])],
    number_of_rows=4,
    batch_size=2,
)
for batch in decoder:
    print(batch.column(0))  # [1, None], then [2, 3]
```

A dictionary-encoded string column:

```python
from orcread.strings import new_dictionary_string_decoder

decoder = new_dictionary_string_decoder(b"abcefgh", [3, 4], 2, [0, 1, 0])
print(decoder.next_batch(3).to_list())  # ['abc', 'efgh', 'abc']
```

## What this package does not do

It does not open ORC files or read byte ranges from them, does not locate
and parse the file tail on its own, and does not decompress stream blocks
(zlib, snappy, LZO, LZ4 or zstd). It also does not decode the run-length,
boolean, byte or floating-point stream encodings: the decoders take values
that have already been decoded, as Python iterables, plus raw bytes for
string and binary data. Decimal, union and timestamp-with-local-timezone
columns have no decoder.