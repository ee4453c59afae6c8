"""
Schemas & Canonicalization
File: state.py

Purpose: Public output carried by every reduction certificate.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator


# Regex pattern for validating hex strings (0x followed by 64 hex chars = 32 bytes)
HEX_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")

# Every committed integer (round, ticket id, amount, pot) is a 32-byte leaf value
FIELD_MODULUS = 1 << 256


def validate_hex_hash(value: str, field_name: str) -> str:
    """Validate that a value is a valid 32-byte hex hash with 0x prefix."""
    if not HEX_HASH_PATTERN.match(value):
        raise ValueError(
            f"{field_name} must be a valid 32-byte hex string with 0x prefix "
            f"(64 hex chars), got: {value[:20]}..."
        )
    return value.lower()


class ReductionPhase(str, Enum):
    """Position of a certificate in the reduction state machine."""

    BASE = "base"
    ACCUMULATING = "accumulating"
    BETWEEN_BATCHES = "between_batches"


class ReductionOutput(BaseModel):
    """
    Public output of a reduction step.

    initial_* fields are anchors fixed by `init`; final_state commits to all
    closed batches; processed_action_digest commits to the open batch;
    new_ticket_root/new_bank_root are the current tree roots.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    initial_state: str
    final_state: str
    initial_ticket_root: str
    initial_bank_root: str
    new_ticket_root: str
    new_bank_root: str
    processed_action_digest: str
    last_processed_round: NonNegativeInt = Field(default=0, lt=FIELD_MODULUS)
    last_processed_ticket_id: NonNegativeInt = Field(default=0, lt=FIELD_MODULUS)

    @field_validator(
        "initial_state",
        "final_state",
        "initial_ticket_root",
        "initial_bank_root",
        "new_ticket_root",
        "new_bank_root",
        "processed_action_digest",
    )
    @classmethod
    def _check_hex(cls, value: str, info) -> str:
        return validate_hex_hash(value, info.field_name)

    def anchors(self) -> tuple[str, str, str]:
        """The (state, ticket root, bank root) triple fixed at chain start."""
        return (self.initial_state, self.initial_ticket_root, self.initial_bank_root)
