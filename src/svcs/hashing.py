"""Hashing utilities for content addressing.

File content and commit identifiers share one digest format: the SHA-256
hash rendered as exactly 64 lowercase hex characters. The rendering goes
through the integer value of the hash so the zero padding is explicit rather
than an accident of the hex encoder.
"""

from pathlib import Path
from typing import Iterable
import hashlib

from .constants import DIGEST_HEX_LENGTH


def _render_hex(raw: bytes) -> str:
    """Render a raw hash as a zero-padded lowercase hex string."""
    return format(int.from_bytes(raw, "big"), f"0{DIGEST_HEX_LENGTH}x")


def digest(data: bytes) -> str:
    """Compute the content digest of raw bytes.

    Args:
        data: Bytes to hash

    Returns:
        64-character lowercase hex SHA-256 digest
    """
    return _render_hex(hashlib.sha256(data).digest())


def compute_file_digest(path: Path) -> str:
    """Compute the content digest of a file's raw bytes.

    Errors reading the file (missing, permission denied) propagate.

    Args:
        path: Path to file to hash

    Returns:
        64-character lowercase hex SHA-256 digest
    """
    sha256 = hashlib.sha256()
    with Path(path).open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            sha256.update(chunk)
    return _render_hex(sha256.digest())


def compute_commit_id(digests: Iterable[str]) -> str:
    """Derive a commit id from file digests in index order.

    The digests are concatenated without a separator. Order matters and
    duplicates count: the same files tracked in a different order give a
    different id.

    Example:
        >>> a = digest(b"hello")
        >>> compute_commit_id([a]) == digest(a.encode("utf-8"))
        True
    """
    return digest("".join(digests).encode("utf-8"))


__all__ = [
    "digest",
    "compute_file_digest",
    "compute_commit_id",
]
