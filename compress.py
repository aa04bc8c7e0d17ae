"""SHA-256 block compression (FIPS 180-4, section 6.2.2).

One compression round, for working registers `(a, b, c, d, e, f, g, h)`,
round constant `k` and message schedule word `w`:

    S1    = (e >>> 6) ^ (e >>> 11) ^ (e >>> 25)
    ch    = (e & f) ^ (~e & g)
    temp1 = h + S1 + ch + k + w

    S0    = (a >>> 2) ^ (a >>> 13) ^ (a >>> 22)
    maj   = (a & b) ^ (a & c) ^ (b & c)
    temp2 = S0 + maj

    a' = temp1 + temp2
    e' = d + temp1

and every other register shifts one place (b' = a, c' = b, ..., h' = g).

`sha256_transform` avoids the shift by treating the eight working variables
as a rotating window: in round `i` the register playing role `j` (0 for `a`,
7 for `h`) is `S[(j - i) % 8]`, so only two slots are written per round and
the roles cycle every 8 rounds.

All additions are performed modulo 2**32.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from codec import MASK32, decode32be_vect


BLOCK_SIZE = 64

# First 32 bits of the fractional parts of the cube roots of the first 64 primes.
K_VALUES: Tuple[int, ...] = (
    0x428A2F98, 0x71374491, 0xB5C0FBCF, 0xE9B5DBA5, 0x3956C25B, 0x59F111F1, 0x923F82A4, 0xAB1C5ED5,
    0xD807AA98, 0x12835B01, 0x243185BE, 0x550C7DC3, 0x72BE5D74, 0x80DEB1FE, 0x9BDC06A7, 0xC19BF174,
    0xE49B69C1, 0xEFBE4786, 0x0FC19DC6, 0x240CA1CC, 0x2DE92C6F, 0x4A7484AA, 0x5CB0A9DC, 0x76F988DA,
    0x983E5152, 0xA831C66D, 0xB00327C8, 0xBF597FC7, 0xC6E00BF3, 0xD5A79147, 0x06CA6351, 0x14292967,
    0x27B70A85, 0x2E1B2138, 0x4D2C6DFC, 0x53380D13, 0x650A7354, 0x766A0ABB, 0x81C2C92E, 0x92722C85,
    0xA2BFE8A1, 0xA81A664B, 0xC24B8B70, 0xC76C51A3, 0xD192E819, 0xD6990624, 0xF40E3585, 0x106AA070,
    0x19A4C116, 0x1E376C08, 0x2748774C, 0x34B0BCB5, 0x391C0CB3, 0x4ED8AA4A, 0x5B9CCA4F, 0x682E6FF3,
    0x748F82EE, 0x78A5636F, 0x84C87814, 0x8CC70208, 0x90BEFFFA, 0xA4506CEB, 0xBEF9A3F7, 0xC67178F2,
)


def _rotr(x: int, n: int) -> int:
    """Right-rotate a 32-bit word `x` by `n` bits."""
    x &= MASK32
    return ((x >> n) | (x << (32 - n))) & MASK32


def _shr(x: int, n: int) -> int:
    return (x & MASK32) >> n


def _ch(x: int, y: int, z: int) -> int:
    """Choose: bits of `y` where `x` is set, bits of `z` elsewhere."""
    return (x & (y ^ z)) ^ z


def _maj(x: int, y: int, z: int) -> int:
    """Bitwise majority of three words."""
    return (x & (y | z)) | (y & z)


def _big_sigma0(x: int) -> int:
    return _rotr(x, 2) ^ _rotr(x, 13) ^ _rotr(x, 22)


def _big_sigma1(x: int) -> int:
    return _rotr(x, 6) ^ _rotr(x, 11) ^ _rotr(x, 25)


def _small_sigma0(x: int) -> int:
    """SHA-256 function σ0 used in the message schedule."""
    return _rotr(x, 7) ^ _rotr(x, 18) ^ _shr(x, 3)


def _small_sigma1(x: int) -> int:
    """SHA-256 function σ1 used in the message schedule."""
    return _rotr(x, 17) ^ _rotr(x, 19) ^ _shr(x, 10)


@dataclass
class Scratch:
    """Per-stream scratch space for the transform.

    `w` holds the 64-word message schedule and `s` the 8 working variables.
    Neither carries meaning between calls; keeping them here lets one hashing
    stream reuse the same lists for every block it compresses.
    """

    w: List[int] = field(default_factory=lambda: [0] * 64)
    s: List[int] = field(default_factory=lambda: [0] * 8)


def _extend_schedule(w: List[int]) -> None:
    """Derive w[16..63] in place from w[0..15]."""
    for i in range(16, 64):
        w[i] = (
            _small_sigma1(w[i - 2]) + w[i - 7] + _small_sigma0(w[i - 15]) + w[i - 16]
        ) & MASK32


def build_message_schedule(block: bytes, w: Optional[List[int]] = None) -> List[int]:
    """Fill and return the 64-word schedule w[0..63] for a 64-byte block.

    If `w` is given (a list of at least 64 words) it is overwritten in place.
    """
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"Expected 64-byte block, got {len(block)}")
    if w is None:
        w = [0] * 64

    w[0:16] = decode32be_vect(block, 16)
    _extend_schedule(w)
    return w


def expand_message_schedule(w: Sequence[int]) -> List[int]:
    """Expand W[0..15] to the full 64-word schedule, returning a new list.

    Any words beyond the first 16 are ignored and recomputed.
    """
    if len(w) < 16:
        raise ValueError(
            f"Message schedule must contain at least 16 words, got {len(w)}"
        )

    schedule = [word & MASK32 for word in w[:16]] + [0] * 48
    _extend_schedule(schedule)
    return schedule


def compression(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    w: int,
    k: int,
) -> Tuple[int, int, int, int, int, int, int, int]:
    """Perform one SHA-256 compression round.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        32-bit words representing the current working state.
    w : int
        Message schedule word `w[i]`.
    k : int
        Round constant `k[i]`.

    Returns
    -------
    (a_new, b_new, c_new, d_new, e_new, f_new, g_new, h_new) : tuple[int, ...]
        Working state after the round, all reduced modulo 2**32.
    """
    temp1 = (h + _big_sigma1(e) + _ch(e, f, g) + k + w) & MASK32
    temp2 = (_big_sigma0(a) + _maj(a, b, c)) & MASK32

    return (
        (temp1 + temp2) & MASK32,
        a & MASK32,
        b & MASK32,
        c & MASK32,
        (d + temp1) & MASK32,
        e & MASK32,
        f & MASK32,
        g & MASK32,
    )


def compress64(
    state: Sequence[int], ws: Sequence[int]
) -> Tuple[int, int, int, int, int, int, int, int]:
    """Run all 64 rounds over `ws` starting from `state`.

    Returns the working variables after round 63, *before* the feed-forward
    addition into the chaining value.
    """
    if len(state) != 8:
        raise ValueError(f"compress64 expects 8 state words, got {len(state)}")
    if len(ws) != 64:
        raise ValueError(f"compress64 expects 64 message schedule words, got {len(ws)}")

    work = tuple(state)
    for i in range(64):
        work = compression(*work, ws[i], K_VALUES[i])
    return work


def sha256_transform(
    state: List[int], block: bytes, scratch: Optional[Scratch] = None
) -> None:
    """Compress one 64-byte block into `state` in place.

    `state` is the 8-word chaining value; on return it holds
    ``state[j] + S[j] (mod 2**32)`` where `S` are the working variables after
    64 rounds.  `scratch` is reused for the schedule and working variables
    when provided.
    """
    if len(state) != 8:
        raise ValueError(f"Expected 8 state words, got {len(state)}")
    if scratch is None:
        scratch = Scratch()

    w = build_message_schedule(block, scratch.w)
    s = scratch.s
    s[:] = state

    for i in range(64):
        a = s[(0 - i) % 8]
        di = (3 - i) % 8
        e = s[(4 - i) % 8]
        hi = (7 - i) % 8

        t = (
            s[hi]
            + _big_sigma1(e)
            + _ch(e, s[(5 - i) % 8], s[(6 - i) % 8])
            + K_VALUES[i]
            + w[i]
        ) & MASK32
        s[di] = (s[di] + t) & MASK32
        s[hi] = (t + _big_sigma0(a) + _maj(a, s[(1 - i) % 8], s[(2 - i) % 8])) & MASK32

    for j in range(8):
        state[j] = (state[j] + s[j]) & MASK32
