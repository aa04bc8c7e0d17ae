import hashlib
import random

import pytest

from codec import MASK32, decode32be_vect
from compress import (
    K_VALUES,
    Scratch,
    build_message_schedule,
    compress64,
    compression,
    expand_message_schedule,
    sha256_transform,
)
from sha256 import _H0


def _abc_block() -> bytes:
    # "abc" padded to a single block: 0x80 marker, zeros, 24-bit length.
    return b"abc" + b"\x80" + b"\x00" * 52 + (24).to_bytes(8, "big")


def _random_blocks(count, seed=1234):
    rng = random.Random(seed)
    return [bytes(rng.getrandbits(8) for _ in range(64)) for _ in range(count)]


def test_round_constants_table():
    assert len(K_VALUES) == 64
    assert K_VALUES[0] == 0x428A2F98
    assert K_VALUES[63] == 0xC67178F2


def test_transform_single_block_matches_hashlib():
    state = list(_H0)
    sha256_transform(state, _abc_block())

    assert state == decode32be_vect(hashlib.sha256(b"abc").digest(), 8)


def test_schedule_starts_with_block_words():
    block = _abc_block()
    w = build_message_schedule(block)

    assert len(w) == 64
    assert w[0] == 0x61626380
    assert w[15] == 24
    assert all(0 <= word <= MASK32 for word in w)


def test_expand_matches_build():
    for block in _random_blocks(4):
        w = build_message_schedule(block)
        assert expand_message_schedule(w[:16]) == w


@pytest.mark.parametrize("block", _random_blocks(5))
def test_rotating_window_matches_shifting_rounds(block):
    """The in-place transform agrees with 64 explicit `compression` rounds
    followed by the feed-forward addition."""
    ws = build_message_schedule(block)
    work = compress64(_H0, ws)
    expected = [(h + x) & MASK32 for h, x in zip(_H0, work)]

    state = list(_H0)
    sha256_transform(state, block)

    assert state == expected


def test_single_round_shifts_registers():
    out = compression(1, 2, 3, 4, 5, 6, 7, 8, 0x67452301, K_VALUES[0])

    # Only a and e are recomputed; the rest shift down one place.
    assert out[1:4] == (1, 2, 3)
    assert out[5:] == (5, 6, 7)


def test_scratch_reuse_does_not_leak_between_blocks():
    blocks = _random_blocks(3, seed=99)
    scratch = Scratch()

    shared = list(_H0)
    fresh = list(_H0)
    for block in blocks:
        sha256_transform(shared, block, scratch)
        sha256_transform(fresh, block)

    assert shared == fresh


def test_transform_accepts_memoryview_block():
    data = memoryview(b"\x00" * 64 + _abc_block())
    a = list(_H0)
    b = list(_H0)

    sha256_transform(a, data[64:128])
    sha256_transform(b, _abc_block())

    assert a == b


@pytest.mark.parametrize("size", [0, 63, 65, 128])
def test_transform_rejects_wrong_block_size(size):
    with pytest.raises(ValueError):
        sha256_transform(list(_H0), b"\x00" * size)


def test_compress64_rejects_short_schedule():
    with pytest.raises(ValueError):
        compress64(_H0, [0] * 63)
    with pytest.raises(ValueError):
        expand_message_schedule([0] * 15)
