"""
Digest chains for open batches (actions) and closed batches (final state).
"""

from .digest_chain import ActionDigestChain, BatchDigestChain, ticket_commitment

__all__ = [
    "ActionDigestChain",
    "BatchDigestChain",
    "ticket_commitment",
]
