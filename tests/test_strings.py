import io

import pytest

from orcread.decoders import PrimitiveArrayDecoder
from orcread.errors import ArrowError
from orcread.strings import (
    ByteArrayDecoder,
    DictionaryArray,
    DictionaryStringArrayDecoder,
    StringArrayDecoder,
    new_dictionary_string_decoder,
)


def test_binary_direct():
    decoder = ByteArrayDecoder(b"abcdefgh", [4, 4])
    assert decoder.next_batch(2) == [b"abcd", b"efgh"]


def test_binary_accepts_file_like_data():
    decoder = ByteArrayDecoder(io.BytesIO(b"abcdefgh"), [4, 4])
    assert decoder.next_batch(2) == [b"abcd", b"efgh"]


def test_string_direct_with_nulls():
    decoder = StringArrayDecoder(b"aeee", [1, 3], [True, False, True])
    assert decoder.next_batch(3) == ["a", None, "eee"]


def test_string_batches_concatenate_to_whole():
    data = b"abcdefgh" * 4
    whole = StringArrayDecoder(data, [4] * 8).next_batch(8)
    decoder = StringArrayDecoder(data, [4] * 8)
    parts = decoder.next_batch(3) + decoder.next_batch(5)
    assert parts == whole
    assert whole == ["abcd", "efgh"] * 4


def test_string_respects_parent_present():
    decoder = StringArrayDecoder(b"abcd", [2, 2])
    assert decoder.next_batch(3, [True, False, True]) == ["ab", None, "cd"]


def test_string_multibyte_utf8():
    text = "大熊和奏"
    encoded = text.encode("utf-8")
    decoder = StringArrayDecoder(encoded + b"a", [len(encoded), 1])
    assert decoder.next_batch(2) == [text, "a"]


def test_invalid_utf8_raises():
    decoder = StringArrayDecoder(b"\xff\xfe", [2])
    with pytest.raises(ArrowError):
        decoder.next_batch(1)


def test_short_data_raises():
    decoder = ByteArrayDecoder(b"abc", [4])
    with pytest.raises(ArrowError):
        decoder.next_batch(1)


def test_dictionary_decoder_round_trip():
    decoder = new_dictionary_string_decoder(b"abcefgh", [3, 4], 2, [0, 1, 0, 1])
    array = decoder.next_batch(4)
    assert array.to_list() == ["abc", "efgh", "abc", "efgh"]
    assert len(array) == 4


def test_dictionary_decoder_with_nulls():
    decoder = new_dictionary_string_decoder(
        b"abcefgh", [3, 4], 2, [1, 0], [True, False, True]
    )
    array = decoder.next_batch(3)
    assert array.to_list() == ["efgh", None, "abc"]
    assert array[1] is None


def test_dictionary_decoder_batches():
    decoder = new_dictionary_string_decoder(b"abcefgh", [3, 4], 2, [0, 1, 1])
    first = decoder.next_batch(2)
    second = decoder.next_batch(2)
    assert first.to_list() + second.to_list() == ["abc", "efgh", "efgh"]


def test_dictionary_array_rejects_out_of_range_key():
    with pytest.raises(ArrowError):
        DictionaryArray([0, 2], ["abc", "efgh"])


def test_dictionary_decoder_out_of_range_index_raises():
    decoder = DictionaryStringArrayDecoder(
        PrimitiveArrayDecoder([5]), ["abc", "efgh"]
    )
    with pytest.raises(ArrowError):
        decoder.next_batch(1)


def test_dictionary_array_iterates_values():
    array = DictionaryArray([1, None, 0], ["abc", "efgh"])
    assert list(array) == array.to_list()
    assert list(array) == ["efgh", None, "abc"]