"""Known-answer vector files for the SHA-256 implementation.

Vector files are YAML documents with a top-level ``vectors`` list (see
``data/vectors.yaml``).  `load_vectors` parses and validates one, and
`check_vectors` runs each vector through the streaming API, returning the
mismatches.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import yaml

from sha256 import Sha256Context, hash_buffer, sha256_final, sha256_update


logger = logging.getLogger(__name__)

DEFAULT_VECTORS_PATH = os.path.join(os.path.dirname(__file__), "data", "vectors.yaml")

# Upper bound on the bytes handed to a single update when expanding `repeat`.
_REPEAT_CHUNK = 65536


class VectorFileError(ValueError):
    """Raised when a vector file is not in the expected shape."""


@dataclass(frozen=True)
class Vector:
    name: str
    message: bytes
    digest: bytes
    repeat: int = 1
    double: bool = False

    @property
    def length(self) -> int:
        return len(self.message) * self.repeat


def _str_field(name: str, entry: dict, key: str) -> str:
    # Unquoted YAML scalars may resolve to ints, floats or None.
    value = entry[key]
    if not isinstance(value, str):
        raise VectorFileError(
            f"{name}: '{key}' must be a quoted string, got {type(value).__name__} {value!r}"
        )
    return value


def _hex_field(name: str, entry: dict, key: str) -> bytes:
    value = _str_field(name, entry, key)
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise VectorFileError(f"{name}: invalid hex in '{key}' ({e})") from e


def _parse_entry(index: int, entry: object) -> Vector:
    if not isinstance(entry, dict):
        raise VectorFileError(f"Vector #{index} must be a mapping, got {type(entry).__name__}")

    name = str(entry.get("name", f"vector-{index}"))

    if "message" in entry and "message_hex" in entry:
        raise VectorFileError(f"{name}: give either 'message' or 'message_hex', not both")
    if "message_hex" in entry:
        message = _hex_field(name, entry, "message_hex")
    elif "message" in entry:
        message = _str_field(name, entry, "message").encode("utf-8")
    else:
        raise VectorFileError(f"{name}: missing 'message' or 'message_hex'")

    if "digest_hex" not in entry:
        raise VectorFileError(f"{name}: missing 'digest_hex'")
    digest = _hex_field(name, entry, "digest_hex")

    if len(digest) != 32:
        raise VectorFileError(f"{name}: digest must be 32 bytes, got {len(digest)}")

    repeat = entry.get("repeat", 1)
    if not isinstance(repeat, int) or isinstance(repeat, bool) or repeat < 1:
        raise VectorFileError(f"{name}: 'repeat' must be a positive integer, got {repeat!r}")

    double = entry.get("double", False)
    if not isinstance(double, bool):
        raise VectorFileError(f"{name}: 'double' must be true or false, got {double!r}")

    return Vector(
        name=name,
        message=message,
        digest=digest,
        repeat=repeat,
        double=double,
    )


def load_vectors(path: Optional[str] = None) -> List[Vector]:
    """Read and validate the vector file at `path` (the bundled file by default)."""
    if path is None:
        path = DEFAULT_VECTORS_PATH

    with open(path, "r", encoding="utf-8") as f:
        try:
            document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise VectorFileError(f"{path}: not valid YAML ({e})") from e

    if not isinstance(document, dict) or not isinstance(document.get("vectors"), list):
        raise VectorFileError(f"{path}: expected a mapping with a 'vectors' list")

    vectors = [_parse_entry(i, entry) for i, entry in enumerate(document["vectors"])]
    logger.debug("Loaded %d vectors from %s", len(vectors), path)
    return vectors


def compute_vector(vector: Vector) -> bytes:
    """Digest of `vector`'s input, streamed so `repeat` never builds the full message."""
    ctx = Sha256Context()

    if vector.message and vector.repeat > 1:
        per_chunk = max(1, min(vector.repeat, _REPEAT_CHUNK // len(vector.message)))
        chunk = vector.message * per_chunk
        full, rest = divmod(vector.repeat, per_chunk)
        for _ in range(full):
            sha256_update(ctx, chunk)
        sha256_update(ctx, vector.message * rest)
    else:
        sha256_update(ctx, vector.message)

    digest = sha256_final(ctx)
    if vector.double:
        digest = hash_buffer(digest)
    return digest


def check_vectors(vectors: Iterable[Vector]) -> List[Tuple[Vector, bytes]]:
    """Return ``(vector, actual_digest)`` for every vector that does not match."""
    failures: List[Tuple[Vector, bytes]] = []
    for vector in vectors:
        actual = compute_vector(vector)
        if actual == vector.digest:
            logger.debug("%s: ok (%d bytes)", vector.name, vector.length)
        else:
            logger.warning(
                "%s: expected %s, got %s", vector.name, vector.digest.hex(), actual.hex()
            )
            failures.append((vector, actual))
    return failures
