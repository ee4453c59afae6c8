"""
Hashing Utilities
Domain-separated SHA-256 hashing and field/leaf encoding for commitments.

This module provides:
- SHA-256 hashing for raw bytes
- Prefix (domain-separated) multi-input hashing
- Canonical hashing for objects (via dumps_canonical)
- Hex encoding/decoding with 0x prefix
- Integer <-> 32-byte leaf encoding

Security/Determinism Notes:
- Prefixes are padded to PREFIX_LENGTH bytes so distinct tags never overlap
- All operations are deterministic
"""
from __future__ import annotations

import hashlib
from typing import Any

from ticket_reduce.schemas.canonical import dumps_canonical
from ticket_reduce.schemas.state import FIELD_MODULUS


DIGEST_SIZE = 32
PREFIX_LENGTH = 32

# Leaf value of an untouched tree slot
ZERO_LEAF: bytes = bytes(DIGEST_SIZE)


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def encode_prefix(prefix: str) -> bytes:
    """
    Encode a domain tag as a fixed-width prefix.

    Raises:
        ValueError: If the tag is longer than PREFIX_LENGTH bytes.
    """
    raw = prefix.encode("ascii")
    if len(raw) > PREFIX_LENGTH:
        raise ValueError(
            f"Hash prefix must be at most {PREFIX_LENGTH} bytes, got {len(raw)}: {prefix!r}"
        )
    return raw.ljust(PREFIX_LENGTH, b"\x00")


def hash_with_prefix(prefix: str, *parts: bytes) -> bytes:
    """
    Hash a sequence of byte strings under a domain tag.

    Rule: digest = sha256(pad32(prefix) || part_0 || part_1 || ...)

    Two calls with different prefixes never share an input, so accumulators
    built on distinct tags cannot collide with one another.

    Args:
        prefix: ASCII domain tag (at most 32 bytes)
        parts: Byte strings to hash, in order

    Returns:
        32-byte digest
    """
    hasher = hashlib.sha256(encode_prefix(prefix))
    for part in parts:
        hasher.update(part)
    return hasher.digest()


def hash_canonical(obj: Any, prefix: str | None = None) -> bytes:
    """
    Hash an object using canonical JSON serialization.

    Rule: sha256(dumps_canonical(obj).encode("utf-8")), optionally under a
    domain prefix.

    Raises:
        CanonicalizationException: If object cannot be canonically serialized
    """
    payload = dumps_canonical(obj).encode("utf-8")
    if prefix is None:
        return sha256(payload)
    return hash_with_prefix(prefix, payload)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def int_to_leaf(value: int) -> bytes:
    """
    Encode a non-negative integer as a 32-byte big-endian leaf value.

    Raises:
        ValueError: If value is negative or does not fit in 32 bytes
    """
    if value < 0:
        raise ValueError(f"Leaf value must be non-negative, got {value}")
    if value >= FIELD_MODULUS:
        raise ValueError(f"Leaf value does not fit in {DIGEST_SIZE} bytes: {value}")
    return value.to_bytes(DIGEST_SIZE, "big")


def leaf_to_int(leaf: bytes) -> int:
    """Decode a 32-byte big-endian leaf value."""
    return int.from_bytes(leaf, "big")


__all__ = [
    "DIGEST_SIZE",
    "FIELD_MODULUS",
    "ZERO_LEAF",
    "sha256",
    "encode_prefix",
    "hash_with_prefix",
    "hash_canonical",
    "to_hex",
    "from_hex",
    "int_to_leaf",
    "leaf_to_int",
]
