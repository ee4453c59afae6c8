"""
Digest Chains
Hash-linked accumulators summarizing ordered sequences into one digest.

This module provides:
- ActionDigestChain: folds the actions of one open batch
- BatchDigestChain: folds closed-batch digests into the long-run final state

Commitment Rules:
1. Action event:  e = H(action_event_tag, canonical_json(action))
2. Action append: d' = H(action_sequence_tag, d, e)
3. Batch append:  s' = H(batch_sequence_tag, s, batch_digest)
4. Empty values:  H(actions_empty_tag) and H(batches_empty_tag)

The two families use disjoint tags, so an action-chain digest can never be
mistaken for a batch-chain digest even over identical inputs.
"""
from __future__ import annotations

from typing import Iterable, Optional

from ticket_reduce.config.runtime import HashTags
from ticket_reduce.crypto.hashing import from_hex, hash_canonical, hash_with_prefix, to_hex
from ticket_reduce.schemas.lottery import LotteryAction, Ticket


def ticket_commitment(ticket: Ticket, tags: Optional[HashTags] = None) -> str:
    """Leaf value written into a round's ticket sub-tree for `ticket`."""
    tags = tags or HashTags()
    return to_hex(hash_canonical(ticket, prefix=tags.ticket))


class ActionDigestChain:
    """
    Forward hash chain over the actions of one open batch.

    Example:
        >>> chain = ActionDigestChain()
        >>> d1 = chain.append(chain.empty, action)
        >>> d1 == chain.from_actions([action])
        True
    """

    def __init__(self, tags: Optional[HashTags] = None) -> None:
        self.tags = tags or HashTags()
        self.empty: str = to_hex(hash_with_prefix(self.tags.actions_empty))

    def event_hash(self, action: LotteryAction) -> bytes:
        """Inner hash of one action's canonical encoding."""
        return hash_canonical(action, prefix=self.tags.action_event)

    def append(self, digest: str, action: LotteryAction) -> str:
        """Fold `action` into the running digest."""
        return to_hex(
            hash_with_prefix(
                self.tags.action_sequence,
                from_hex(digest),
                self.event_hash(action),
            )
        )

    def from_actions(self, actions: Iterable[LotteryAction]) -> str:
        """Digest of a whole batch, starting from the empty digest."""
        digest = self.empty
        for action in actions:
            digest = self.append(digest, action)
        return digest


class BatchDigestChain:
    """Hash chain over closed-batch digests; its value is the final state."""

    def __init__(self, tags: Optional[HashTags] = None) -> None:
        self.tags = tags or HashTags()
        self.empty: str = to_hex(hash_with_prefix(self.tags.batches_empty))

    def append(self, state: str, batch_digest: str) -> str:
        """Fold one closed batch digest into `state`."""
        return to_hex(
            hash_with_prefix(
                self.tags.batch_sequence,
                from_hex(state),
                from_hex(batch_digest),
            )
        )

    def from_batches(self, batch_digests: Iterable[str], start: Optional[str] = None) -> str:
        """Fold several batch digests, starting from `start` (or the empty value)."""
        state = self.empty if start is None else start
        for batch_digest in batch_digests:
            state = self.append(state, batch_digest)
        return state
