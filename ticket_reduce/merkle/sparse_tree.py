"""
Sparse Merkle Tree Implementation
Fixed-depth sparse commitment tree, path witnesses and root recomputation.

This module provides:
- SparseTreeWitness: path (direction bits + siblings) of one leaf slot
- compute_root_and_key: pure root recomputation under an assumed leaf value
- SparseMerkleMap: in-memory map producing roots and witnesses

Canonical Commitment Rules (Hard Contracts):
1. Leaves are stored raw as 32-byte values (no leaf hashing)
2. Parent hashing: parent = hash_with_prefix(node_tag, left, right)
3. Untouched slots hold the map's default leaf (32 zero bytes unless overridden)
4. Key bit i is 1 when the path node at height i is a right child

Determinism Notes:
- Only non-default nodes are stored; default subtrees use precomputed hashes
- A witness carries everything needed to recompute a root; no tree access
"""
from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ticket_reduce.config.runtime import HashTags
from ticket_reduce.crypto.hashing import (
    DIGEST_SIZE,
    ZERO_LEAF,
    from_hex,
    hash_with_prefix,
    to_hex,
)
from ticket_reduce.schemas.errors import InvalidWitnessError
from ticket_reduce.schemas.state import HEX_HASH_PATTERN

DEFAULT_NODE_TAG = HashTags().tree_node

LeafValue = Union[bytes, str]


def tree_parent(left: bytes, right: bytes, node_tag: str = DEFAULT_NODE_TAG) -> bytes:
    """Compute the parent hash of two child nodes."""
    return hash_with_prefix(node_tag, left, right)


def default_hashes(
    depth: int,
    default_leaf: bytes = ZERO_LEAF,
    node_tag: str = DEFAULT_NODE_TAG,
) -> list[bytes]:
    """
    Precompute the root of an all-default subtree at every height.

    Returns:
        List of length depth + 1; index 0 is the default leaf, index
        `depth` is the root of an empty tree.
    """
    hashes = [default_leaf]
    for _ in range(depth):
        hashes.append(tree_parent(hashes[-1], hashes[-1], node_tag))
    return hashes


def empty_root(
    depth: int,
    default_leaf: bytes = ZERO_LEAF,
    node_tag: str = DEFAULT_NODE_TAG,
) -> bytes:
    """Root of a tree whose every slot holds `default_leaf`."""
    return default_hashes(depth, default_leaf, node_tag)[depth]


def _as_leaf(value: LeafValue) -> bytes:
    leaf = from_hex(value) if isinstance(value, str) else value
    if len(leaf) != DIGEST_SIZE:
        raise InvalidWitnessError(
            f"Leaf value must be {DIGEST_SIZE} bytes, got {len(leaf)}",
            details={"length": len(leaf)},
        )
    return leaf


class SparseTreeWitness(BaseModel):
    """
    Path of one slot in a fixed-depth sparse tree.

    Attributes:
        is_left: Per height (bottom-up), True when the path node is a left child
        siblings: Per height (bottom-up), 0x-prefixed hex of the sibling node
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    is_left: tuple[bool, ...] = Field(..., min_length=1)
    siblings: tuple[str, ...] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_shape(self) -> "SparseTreeWitness":
        if len(self.is_left) != len(self.siblings):
            raise ValueError(
                f"Witness has {len(self.is_left)} direction bits but "
                f"{len(self.siblings)} siblings"
            )
        for height, sibling in enumerate(self.siblings):
            if not HEX_HASH_PATTERN.match(sibling):
                raise ValueError(f"Sibling at height {height} is not a 32-byte hex hash")
        return self

    @property
    def depth(self) -> int:
        return len(self.siblings)

    def key(self) -> int:
        """Slot index addressed by this witness."""
        return sum(1 << height for height, left in enumerate(self.is_left) if not left)

    def compute_root_and_key(
        self,
        leaf: LeafValue,
        node_tag: str = DEFAULT_NODE_TAG,
    ) -> tuple[str, int]:
        """
        Recompute the tree root assuming the slot holds `leaf`.

        Returns:
            (0x-prefixed root, slot key)
        """
        return compute_root_and_key(self, leaf, node_tag)


def compute_root_and_key(
    witness: SparseTreeWitness,
    leaf: LeafValue,
    node_tag: str = DEFAULT_NODE_TAG,
) -> tuple[str, int]:
    """
    Recompute a root from a witness and an assumed leaf value.

    Algorithm:
    1. Start with the leaf value
    2. For each height (bottom-up):
       - left child:  node = parent(node, sibling)
       - right child: node = parent(sibling, node); set key bit
    3. The final node is the root

    Raises:
        InvalidWitnessError: If the leaf value is not 32 bytes
    """
    node = _as_leaf(leaf)
    key = 0
    for height, (is_left, sibling_hex) in enumerate(zip(witness.is_left, witness.siblings)):
        sibling = from_hex(sibling_hex)
        if is_left:
            node = tree_parent(node, sibling, node_tag)
        else:
            node = tree_parent(sibling, node, node_tag)
            key |= 1 << height
    return to_hex(node), key


class SparseMerkleMap:
    """
    In-memory sparse tree keyed by slot index.

    Holds only the nodes that differ from the default subtree at their
    height, so a depth-20 tree with a handful of writes stays small.

    Example:
        >>> tree = SparseMerkleMap(depth=20)
        >>> tree.set(3, (5).to_bytes(32, "big"))
        >>> root, key = tree.witness(3).compute_root_and_key((5).to_bytes(32, "big"))
        >>> root == tree.root_hex and key == 3
        True
    """

    def __init__(
        self,
        depth: int = 20,
        default_leaf: bytes = ZERO_LEAF,
        node_tag: str = DEFAULT_NODE_TAG,
    ) -> None:
        if depth < 1:
            raise ValueError(f"Tree depth must be positive, got {depth}")
        self.depth = depth
        self.node_tag = node_tag
        self.default_leaf = _as_leaf(default_leaf)
        self._defaults = default_hashes(depth, self.default_leaf, node_tag)
        # (height, index) -> hash, height 0 is the leaf level
        self._nodes: dict[tuple[int, int], bytes] = {}

    @property
    def capacity(self) -> int:
        return 1 << self.depth

    def _check_key(self, key: int) -> None:
        if not 0 <= key < self.capacity:
            raise IndexError(f"Key {key} out of range [0, {self.capacity})")

    def _node(self, height: int, index: int) -> bytes:
        return self._nodes.get((height, index), self._defaults[height])

    @property
    def root(self) -> bytes:
        return self._node(self.depth, 0)

    @property
    def root_hex(self) -> str:
        return to_hex(self.root)

    def get(self, key: int) -> bytes:
        """Current leaf value at `key`."""
        self._check_key(key)
        return self._node(0, key)

    def set(self, key: int, value: LeafValue) -> None:
        """Write a leaf value and rehash its path to the root."""
        self._check_key(key)
        node = _as_leaf(value)
        index = key
        for height in range(self.depth + 1):
            if node == self._defaults[height]:
                self._nodes.pop((height, index), None)
            else:
                self._nodes[(height, index)] = node
            if height == self.depth:
                break
            if index % 2 == 0:
                node = tree_parent(node, self._node(height, index + 1), self.node_tag)
            else:
                node = tree_parent(self._node(height, index - 1), node, self.node_tag)
            index //= 2

    def witness(self, key: int) -> SparseTreeWitness:
        """Build the path witness for slot `key`."""
        self._check_key(key)
        is_left: list[bool] = []
        siblings: list[str] = []
        index = key
        for height in range(self.depth):
            is_left.append(index % 2 == 0)
            siblings.append(to_hex(self._node(height, index ^ 1)))
            index //= 2
        return SparseTreeWitness(is_left=tuple(is_left), siblings=tuple(siblings))

    def copy(self) -> "SparseMerkleMap":
        clone = SparseMerkleMap.__new__(SparseMerkleMap)
        clone.depth = self.depth
        clone.node_tag = self.node_tag
        clone.default_leaf = self.default_leaf
        clone._defaults = self._defaults
        clone._nodes = dict(self._nodes)
        return clone

    def __len__(self) -> int:
        """Number of non-default leaves."""
        return sum(1 for (height, _) in self._nodes if height == 0)


__all__ = [
    "DEFAULT_NODE_TAG",
    "SparseTreeWitness",
    "SparseMerkleMap",
    "compute_root_and_key",
    "default_hashes",
    "empty_root",
    "tree_parent",
]
