"""
Proof Backend Contract

The reduction program never proves anything itself: each transition computes
its public output, then hands (transition, input, output, predecessor proof)
to a backend that seals it. Verifying a certificate is a capability injected
into the program, not something the certificate can do on its own.

HmacSealBackend is the reference backend: a certificate is valid iff it was
sealed with the backend's secret key. Since the program only seals after
every assertion passed and after the predecessor verified, a valid seal
attests to the whole chain up to that point.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from typing import Optional

from ticket_reduce.config.runtime import HashTags
from ticket_reduce.crypto.hashing import hash_canonical
from ticket_reduce.reduction.models import Certificate, ReductionInput
from ticket_reduce.schemas.state import ReductionOutput
from ticket_reduce.schemas.versioning import SCHEMA_VERSION


def certificate_message(
    transition: str,
    public_input: ReductionInput,
    public_output: ReductionOutput,
    predecessor_proof: Optional[str],
    tags: Optional[HashTags] = None,
    schema_version: str = SCHEMA_VERSION,
) -> bytes:
    """Domain-separated digest of everything a seal commits to."""
    tags = tags or HashTags()
    return hash_canonical(
        {
            "schema_version": schema_version,
            "transition": transition,
            "public_input": public_input,
            "public_output": public_output,
            "predecessor_proof": predecessor_proof,
        },
        prefix=tags.seal,
    )


class ProofBackend:
    """Interface for sealing and verifying reduction certificates."""

    def seal(
        self,
        transition: str,
        public_input: ReductionInput,
        public_output: ReductionOutput,
        predecessor_proof: Optional[str],
    ) -> str:
        raise NotImplementedError

    def verify(self, certificate: Certificate) -> bool:
        raise NotImplementedError


class HmacSealBackend(ProofBackend):
    """
    Reference backend sealing certificates with HMAC-SHA256.

    Args:
        key: Secret sealing key; a fresh random key is drawn when omitted,
             which confines valid certificates to this backend instance.
        tags: Hash domain tags (the seal tag separates seal messages)
    """

    def __init__(self, key: Optional[bytes] = None, tags: Optional[HashTags] = None) -> None:
        if key is not None and len(key) < 16:
            raise ValueError(f"Seal key must be at least 16 bytes, got {len(key)}")
        self._key = key if key is not None else secrets.token_bytes(32)
        self.tags = tags or HashTags()

    def _mac(self, message: bytes) -> str:
        return "0x" + hmac.new(self._key, message, hashlib.sha256).hexdigest()

    def seal(
        self,
        transition: str,
        public_input: ReductionInput,
        public_output: ReductionOutput,
        predecessor_proof: Optional[str],
    ) -> str:
        return self._mac(
            certificate_message(
                transition, public_input, public_output, predecessor_proof, self.tags
            )
        )

    def verify(self, certificate: Certificate) -> bool:
        expected = self._mac(
            certificate_message(
                certificate.transition,
                certificate.public_input,
                certificate.public_output,
                certificate.predecessor_proof,
                self.tags,
                certificate.schema_version,
            )
        )
        return hmac.compare_digest(expected, certificate.proof)
