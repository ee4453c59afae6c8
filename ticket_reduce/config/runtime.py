"""
Runtime Configuration

Domain constants for the reduction engine: tree depth, ticket price and
hash domain tags. Instances are read-only and passed explicitly to the
program, the digest chains and the driver.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from ticket_reduce.crypto.hashing import encode_prefix

load_dotenv()


# Ten whole coins at nine decimals
DEFAULT_TICKET_PRICE = 10 * 10**9


@dataclass(frozen=True)
class HashTags:
    """Domain-separation prefixes for every hash family in the engine."""
    action_event: str = "TicketReduceEvent"
    action_sequence: str = "TicketReduceSeqEvents"
    actions_empty: str = "TicketReduceActionsEmpty"
    batch_sequence: str = "TicketReduceBatchSeq"
    batches_empty: str = "TicketReduceBatchesEmpty"
    tree_node: str = "TicketReduceTreeNode"
    ticket: str = "TicketReduceTicket"
    seal: str = "TicketReduceSeal"

    def __post_init__(self):
        tags = asdict(self)
        for name, tag in tags.items():
            try:
                encode_prefix(tag)
            except ValueError as e:
                raise ValueError(f"Hash tag {name} is not a valid prefix: {e}") from e
        values = list(tags.values())
        if len(set(values)) != len(values):
            raise ValueError(f"Hash tags must be pairwise distinct, got {values}")


@dataclass(frozen=True)
class ReducerConfig:
    """
    Complete configuration for the ticket reduction engine.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    tree_depth: int = 20
    ticket_price: int = DEFAULT_TICKET_PRICE
    tags: HashTags = field(default_factory=HashTags)

    def __post_init__(self):
        if self.tree_depth < 1:
            raise ValueError(f"tree_depth must be positive, got {self.tree_depth}")
        if self.ticket_price < 0:
            raise ValueError(f"ticket_price must be non-negative, got {self.ticket_price}")

    @property
    def capacity(self) -> int:
        """Number of leaf slots in each tree."""
        return 1 << self.tree_depth

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - TICKET_REDUCE_TREE_DEPTH: Depth of every commitment tree
        - TICKET_REDUCE_TICKET_PRICE: Price of one ticket entry
        """
        overrides: dict[str, Any] = {}

        if os.getenv("TICKET_REDUCE_TREE_DEPTH"):
            overrides["tree_depth"] = int(os.getenv("TICKET_REDUCE_TREE_DEPTH"))
        if os.getenv("TICKET_REDUCE_TICKET_PRICE"):
            overrides["ticket_price"] = int(os.getenv("TICKET_REDUCE_TICKET_PRICE"))

        return overrides

    @classmethod
    def from_env(cls) -> "ReducerConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ReducerConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReducerConfig":
        """Load configuration from a dictionary (supports partial data)."""
        tags_data = data.get("tags") or {}
        tags = HashTags(**tags_data) if tags_data else HashTags()

        kwargs = {
            key: int(data[key])
            for key in ("tree_depth", "ticket_price")
            if data.get(key) is not None
        }
        return cls(tags=tags, **kwargs)

    def with_env_overrides(self) -> "ReducerConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self
        return replace(self, **overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree_depth": self.tree_depth,
            "ticket_price": self.ticket_price,
            "tags": asdict(self.tags),
        }
