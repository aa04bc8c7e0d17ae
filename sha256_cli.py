"""Command-line front end for the streaming SHA-256 implementation.

Usage:
    python sha256_cli.py "message"
    python sha256_cli.py -f path/to/file
    python sha256_cli.py -f -                 # read stdin
    python sha256_cli.py --double "message"
    python sha256_cli.py --vectors data/vectors.yaml

Without flags, the single argument is interpreted as a UTF-8 string and
hashed.  With `-f`, the named file is read in `--chunk-size` pieces and fed to
one context.  The resulting hex digest is printed to stdout.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import BinaryIO, List, Optional

from sha256 import double_hash, hash_buffer, hash_stream
from vectors import VectorFileError, check_vectors, load_vectors


logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sha256-stream",
        description="Compute SHA-256 digests of strings, files or stdin",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "message",
        nargs="?",
        help="UTF-8 string to hash",
    )
    source.add_argument(
        "-f",
        "--file",
        help="File to hash ('-' for stdin)",
    )
    source.add_argument(
        "--vectors",
        metavar="PATH",
        help="Check every known-answer vector in a YAML file and report mismatches",
    )
    parser.add_argument(
        "--double",
        action="store_true",
        help="Print SHA-256(SHA-256(input)) instead",
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=65536,
        help="Bytes per update when hashing a file (default: 65536)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    return parser


def _hash_file(fileobj: BinaryIO, chunk_size: int, double: bool) -> bytes:
    digest = hash_stream(fileobj, chunk_size=chunk_size)
    return hash_buffer(digest) if double else digest


def _run_vectors(path: str) -> int:
    try:
        vectors = load_vectors(path)
    except (OSError, VectorFileError) as e:
        sys.stderr.write(f"Error loading vectors from '{path}': {e}\n")
        return 1

    failures = check_vectors(vectors)
    for vector, actual in failures:
        print(f"FAIL {vector.name}: expected {vector.digest.hex()}, got {actual.hex()}")
    print(f"{len(vectors) - len(failures)}/{len(vectors)} vectors passed")
    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; returns the process exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.vectors is not None and args.double:
        parser.error(
            "--double cannot be combined with --vectors; "
            "mark entries with 'double: true' instead"
        )

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.chunk_size <= 0:
        sys.stderr.write(f"--chunk-size must be positive, got {args.chunk_size}\n")
        return 1

    if args.vectors is not None:
        return _run_vectors(args.vectors)

    if args.file is not None:
        if args.file == "-":
            digest = _hash_file(sys.stdin.buffer, args.chunk_size, args.double)
        else:
            try:
                with open(args.file, "rb") as f:
                    digest = _hash_file(f, args.chunk_size, args.double)
            except OSError as e:
                sys.stderr.write(f"Error reading file '{args.file}': {e}\n")
                return 1
        logger.debug("Hashed file %s", args.file)
    else:
        data = args.message.encode("utf-8")
        digest = double_hash(data) if args.double else hash_buffer(data)

    print(digest.hex())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
