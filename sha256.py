"""Streaming SHA-256 built on `sha256_transform` from `compress.py`.

This module provides:

- `Sha256Context` plus `sha256_init`, `sha256_update` and `sha256_final` for
  incremental hashing;
- `hash_buffer(data)` and `double_hash(data)` one-shot helpers;
- `hash_stream(fileobj)` to hash anything with a binary ``read()``.

A context is consumed by `sha256_final`: the pending buffer is overwritten by
the padding, so calling `sha256_update` or `sha256_final` again without
`sha256_init` gives an undefined (wrong) digest.  This is not checked.

The bit counter is kept modulo 2**64.  Inputs longer than 2**64 bits wrap the
counter silently, exactly like the 64-bit length field of the standard.

A context is not safe to mutate from several threads at once; give each
stream its own context.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import BinaryIO, List

from codec import MASK64, encode32be_vect, encode64be
from compress import BLOCK_SIZE, Scratch, sha256_transform


logger = logging.getLogger(__name__)

DIGEST_SIZE = 32

# Initial hash values (first 32 bits of the fractional parts of the
# square roots of the first 8 primes 2..19), as per FIPS 180-4.
_H0 = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

_PAD = b"\x80" + b"\x00" * 63


@dataclass
class Sha256Context:
    """Running state of one SHA-256 computation.

    ``state``
        The 8-word chaining value.
    ``buf``
        64-byte pending buffer; the first ``(count >> 3) & 0x3f`` bytes are
        input not yet compressed.
    ``count``
        Bits ingested since initialisation, modulo 2**64.
    """

    state: List[int] = field(default_factory=lambda: list(_H0))
    buf: bytearray = field(default_factory=lambda: bytearray(BLOCK_SIZE))
    count: int = 0
    scratch: Scratch = field(default_factory=Scratch, repr=False, compare=False)

    def copy(self) -> "Sha256Context":
        """Return an independent snapshot, e.g. to hash a shared prefix once."""
        return Sha256Context(list(self.state), bytearray(self.buf), self.count)


def sha256_init(ctx: Sha256Context) -> None:
    """Reset `ctx` to the initial SHA-256 state with nothing buffered."""
    ctx.count = 0
    ctx.state[:] = _H0


def sha256_update(ctx: Sha256Context, data: bytes) -> None:
    """Feed `data` into `ctx`.

    Full blocks are compressed straight out of `data`; only a partial block
    at either end goes through the pending buffer.
    """
    if isinstance(data, str):
        raise TypeError("Strings must be encoded before hashing")

    src = memoryview(data)
    if not src.c_contiguous:
        src = memoryview(bytes(src))
    src = src.cast("B")
    length = len(src)
    if length == 0:
        return

    # Bytes left in the buffer from previous updates.
    r = (ctx.count >> 3) & 0x3F

    ctx.count = (ctx.count + (length << 3)) & MASK64

    if length < BLOCK_SIZE - r:
        ctx.buf[r : r + length] = src
        return

    # Finish the pending block.
    fill = BLOCK_SIZE - r
    ctx.buf[r:] = src[:fill]
    sha256_transform(ctx.state, ctx.buf, ctx.scratch)
    pos = fill

    while length - pos >= BLOCK_SIZE:
        sha256_transform(ctx.state, src[pos : pos + BLOCK_SIZE], ctx.scratch)
        pos += BLOCK_SIZE

    tail = length - pos
    ctx.buf[:tail] = src[pos:]


def sha256_pad(ctx: Sha256Context) -> None:
    """Append the padding and the 64-bit bit count, compressing the result.

    The trailer must sit in the last 8 bytes of a block.  When fewer than 9
    bytes remain after the buffered data, the ``0x80`` marker finishes the
    current block and the trailer goes into an extra all-zero block.
    """
    r = (ctx.count >> 3) & 0x3F

    if r < 56:
        ctx.buf[r:56] = _PAD[: 56 - r]
    else:
        ctx.buf[r:] = _PAD[: BLOCK_SIZE - r]
        sha256_transform(ctx.state, ctx.buf, ctx.scratch)
        ctx.buf[:56] = bytes(56)

    ctx.buf[56:] = encode64be(ctx.count)
    sha256_transform(ctx.state, ctx.buf, ctx.scratch)


def sha256_final(ctx: Sha256Context) -> bytes:
    """Pad `ctx` and return the 32-byte digest.  `ctx` must be re-initialised
    before reuse."""
    sha256_pad(ctx)
    return encode32be_vect(ctx.state)


def hash_buffer(data: bytes) -> bytes:
    """SHA-256 of `data` in one call."""
    ctx = Sha256Context()
    sha256_update(ctx, data)
    return sha256_final(ctx)


def hash_buffer_hex(data: bytes) -> str:
    """Convenience helper returning the SHA-256 hex digest of `data`."""
    return hash_buffer(data).hex()


def double_hash(data: bytes) -> bytes:
    """SHA-256 of the SHA-256 digest of `data`.

    The second pass hashes exactly the 32 digest bytes, whatever the length
    of `data`.
    """
    return hash_buffer(hash_buffer(data))


def double_hash_legacy(data: bytes) -> bytes:
    """Double hash that re-hashes ``len(data)`` bytes of the first digest.

    Some implementations feed the first digest back in with the length of
    the *original* input.  For inputs of up to 32 bytes that means hashing a
    prefix of the digest, which is reproduced here for compatibility.
    Longer inputs would read past the end of the digest and are rejected.

    Raises
    ------
    ValueError
        If `data` is longer than 32 bytes.
    """
    if len(data) > DIGEST_SIZE:
        raise ValueError(
            f"Legacy double hash is only defined for inputs of at most "
            f"{DIGEST_SIZE} bytes, got {len(data)}"
        )
    ctx = Sha256Context()
    sha256_update(ctx, data)
    first = sha256_final(ctx)

    sha256_init(ctx)
    sha256_update(ctx, first[: len(data)])
    return sha256_final(ctx)


def hash_stream(fileobj: BinaryIO, chunk_size: int = 65536) -> bytes:
    """Hash everything readable from `fileobj`, `chunk_size` bytes at a time."""
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    ctx = Sha256Context()
    total = 0
    while True:
        chunk = fileobj.read(chunk_size)
        if not chunk:
            break
        sha256_update(ctx, chunk)
        total += len(chunk)

    digest = sha256_final(ctx)
    logger.debug("Hashed %d bytes from stream: %s", total, digest.hex())
    return digest
