"""
Sparse Merkle Tree and Witnesses
Fixed-depth sparse commitment trees backing the ticket and bank ledgers.

Canonical Commitment Rules:
1. Leaves: raw 32-byte values
2. Parent hashing: hash_with_prefix(node_tag, left, right)
3. Empty slot: the map's default leaf (32 zero bytes unless overridden)

Usage:
    from ticket_reduce.merkle import SparseMerkleMap

    tree = SparseMerkleMap(depth=20)
    tree.set(7, leaf)
    root, key = tree.witness(7).compute_root_and_key(leaf)
    assert root == tree.root_hex and key == 7
"""
from .sparse_tree import (
    DEFAULT_NODE_TAG,
    SparseMerkleMap,
    SparseTreeWitness,
    compute_root_and_key,
    default_hashes,
    empty_root,
    tree_parent,
)


__all__ = [
    "DEFAULT_NODE_TAG",
    "SparseMerkleMap",
    "SparseTreeWitness",
    "compute_root_and_key",
    "default_hashes",
    "empty_root",
    "tree_parent",
]
