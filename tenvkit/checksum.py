"""Verification of data against a SHA256SUMS file."""

from __future__ import annotations

import hashlib


class ChecksumError(ValueError):
    """The data does not match its recorded checksum."""

    def __init__(self, message: str = "invalid sha256 checksum") -> None:
        super().__init__(message)


class NoChecksumError(ValueError):
    """No checksum is recorded for the file."""

    def __init__(self, message: str = "file sha256 checksum not found for current platform") -> None:
        super().__init__(message)


def extract_sum(data_sums: bytes | str, file_name: str) -> bytes:
    """Return the digest recorded for file_name in a SHA256SUMS listing."""
    text = data_sums.decode() if isinstance(data_sums, bytes) else data_sums
    for line in text.split("\n"):
        if line.endswith(file_name):
            return bytes.fromhex(line.removesuffix(file_name).strip())
    raise NoChecksumError()


def check_sha256(data: bytes, data_sums: bytes | str, file_name: str) -> None:
    """Raise unless data's SHA-256 digest equals the one recorded for file_name."""
    expected = extract_sum(data_sums, file_name)
    if hashlib.sha256(data).digest() != expected:
        raise ChecksumError()