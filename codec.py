"""Big-endian word codec used by the SHA-256 transform and finalizer.

SHA-256 reads and writes every 32-bit word most-significant byte first, and
the trailing message length is a 64-bit big-endian integer.  The helpers here
are pure and total: values are reduced to the word width before encoding.
"""

from __future__ import annotations

import struct
from typing import Iterable, List


MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF


def encode32be(value: int) -> bytes:
    """Encode a 32-bit word as 4 big-endian bytes."""
    return (value & MASK32).to_bytes(4, byteorder="big")


def decode32be(data: bytes) -> int:
    """Decode the first 4 bytes of `data` as a big-endian 32-bit word."""
    if len(data) < 4:
        raise ValueError(f"Need 4 bytes to decode a word, got {len(data)}")
    return int.from_bytes(data[:4], byteorder="big")


def encode64be(value: int) -> bytes:
    """Encode a 64-bit integer as 8 big-endian bytes."""
    return (value & MASK64).to_bytes(8, byteorder="big")


def encode32be_vect(words: Iterable[int]) -> bytes:
    """Encode consecutive 32-bit words into one big-endian byte string."""
    values = [w & MASK32 for w in words]
    return struct.pack(f">{len(values)}I", *values)


def decode32be_vect(data: bytes, count: int) -> List[int]:
    """Decode `count` consecutive big-endian words from the start of `data`.

    Raises
    ------
    ValueError
        If `data` holds fewer than ``4 * count`` bytes.
    """
    if len(data) < 4 * count:
        raise ValueError(
            f"Need {4 * count} bytes to decode {count} words, got {len(data)}"
        )
    return list(struct.unpack_from(f">{count}I", data))
