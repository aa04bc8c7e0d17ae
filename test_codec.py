import pytest

from codec import (
    MASK32,
    decode32be,
    decode32be_vect,
    encode32be,
    encode32be_vect,
    encode64be,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        (0, b"\x00\x00\x00\x00"),
        (1, b"\x00\x00\x00\x01"),
        (0x6A09E667, b"\x6a\x09\xe6\x67"),
        (MASK32, b"\xff\xff\xff\xff"),
    ],
)
def test_encode32be(value, expected):
    assert encode32be(value) == expected
    assert decode32be(expected) == value


def test_encode32be_reduces_to_word_width():
    assert encode32be(MASK32 + 2) == b"\x00\x00\x00\x01"


def test_encode64be_bit_count_trailer():
    # 2**35 bits, i.e. a 4 GiB message.
    assert encode64be(1 << 35) == b"\x00\x00\x00\x08\x00\x00\x00\x00"
    assert encode64be(24) == b"\x00" * 7 + b"\x18"
    assert encode64be(1 << 64) == b"\x00" * 8


def test_vector_codec_is_word_by_word():
    words = [0x01234567, 0x89ABCDEF, 0xDEADBEEF, 0x00000000]
    encoded = encode32be_vect(words)

    assert encoded == b"".join(encode32be(w) for w in words)
    assert decode32be_vect(encoded, 4) == words


def test_decode32be_vect_reads_prefix_of_buffer():
    data = bytearray(range(64))
    assert decode32be_vect(data, 2) == [0x00010203, 0x04050607]


def test_decode32be_vect_rejects_short_input():
    with pytest.raises(ValueError):
        decode32be_vect(b"\x00" * 7, 2)


@pytest.mark.parametrize("data", [b"", b"\x01", b"\x01\x02", b"\x01\x02\x03"])
def test_decode32be_rejects_short_input(data):
    with pytest.raises(ValueError):
        decode32be(data)
