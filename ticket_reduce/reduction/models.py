"""
Reduction Certificate Models

Per-step input and the immutable certificate produced by each transition.
A certificate pairs a public output with the proof of its predecessor, so
a chain of certificates forms a linked list rooted at an `init` step.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator

from ticket_reduce.merkle.sparse_tree import SparseTreeWitness
from ticket_reduce.schemas.errors import SchemaValidationException
from ticket_reduce.schemas.lottery import LotteryAction
from ticket_reduce.schemas.state import FIELD_MODULUS, ReductionOutput, ReductionPhase
from ticket_reduce.schemas.versioning import SCHEMA_VERSION, assert_supported_schema_version


# Transition names of the reduction program
INIT = "init"
ADD_TICKET = "addTicket"
CUT_ACTIONS = "cutActions"

TRANSITION_PHASES: dict[str, ReductionPhase] = {
    INIT: ReductionPhase.BASE,
    ADD_TICKET: ReductionPhase.ACCUMULATING,
    CUT_ACTIONS: ReductionPhase.BETWEEN_BATCHES,
}


class ReductionInput(BaseModel):
    """
    Public input of one reduction step.

    `round_ticket_witness` proves a ticket slot inside a round's ticket
    sub-tree, `round_witness` proves that sub-tree's slot in the round tree,
    `bank_witness` proves the round's bank slot and `bank_value` is the
    round's pot before this action. Only `addTicket` reads these fields;
    `init` and `cutActions` accept an empty input.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    action: Optional[LotteryAction] = None
    round_witness: Optional[SparseTreeWitness] = None
    round_ticket_witness: Optional[SparseTreeWitness] = None
    bank_witness: Optional[SparseTreeWitness] = None
    bank_value: NonNegativeInt = Field(default=0, lt=FIELD_MODULUS)

    def require_complete(self) -> None:
        """
        Raises:
            SchemaValidationException: If any field addTicket needs is missing.
        """
        for name in ("action", "round_witness", "round_ticket_witness", "bank_witness"):
            if getattr(self, name) is None:
                raise SchemaValidationException(
                    f"addTicket input is missing {name}",
                    field_path=name,
                )


class Certificate(BaseModel):
    """
    Immutable output of one transition.

    Attributes:
        transition: Name of the transition that produced this certificate
        public_input: The step's public input
        public_output: Resulting reduction state
        predecessor_proof: Proof of the verified predecessor (None for init)
        proof: Backend seal over all of the above
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: str = Field(default=SCHEMA_VERSION)
    transition: str = Field(..., min_length=1)
    public_input: ReductionInput = Field(default_factory=ReductionInput)
    public_output: ReductionOutput
    predecessor_proof: Optional[str] = Field(default=None, min_length=1)
    proof: str = Field(..., min_length=1)

    @field_validator("schema_version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        assert_supported_schema_version(value)
        return value

    @property
    def phase(self) -> Optional[ReductionPhase]:
        """State-machine position, or None for an unregistered transition."""
        return TRANSITION_PHASES.get(self.transition)

    @property
    def is_base(self) -> bool:
        return self.predecessor_proof is None
