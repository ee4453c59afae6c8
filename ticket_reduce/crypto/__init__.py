"""
Cryptographic primitives for ticket reduction commitments.
"""

from .hashing import (
    DIGEST_SIZE,
    FIELD_MODULUS,
    ZERO_LEAF,
    encode_prefix,
    from_hex,
    hash_canonical,
    hash_with_prefix,
    int_to_leaf,
    leaf_to_int,
    sha256,
    to_hex,
)

__all__ = [
    "DIGEST_SIZE",
    "FIELD_MODULUS",
    "ZERO_LEAF",
    "encode_prefix",
    "from_hex",
    "hash_canonical",
    "hash_with_prefix",
    "int_to_leaf",
    "leaf_to_int",
    "sha256",
    "to_hex",
]
