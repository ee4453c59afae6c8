"""
Ticket Reduction Program

The reduction protocol as a set of named transitions over certificates:

    init        -> base certificate carrying the anchors
    addTicket   -> folds one ticket purchase into the ticket and bank trees
    cutActions  -> closes the open batch into the long-run final state

Every transition except `init` first verifies its predecessor certificate and
every assertion raises before a seal is requested, so no certificate violating
a rule can be produced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ticket_reduce.chains.digest_chain import (
    ActionDigestChain,
    BatchDigestChain,
    ticket_commitment,
)
from ticket_reduce.config.runtime import ReducerConfig
from ticket_reduce.crypto.hashing import ZERO_LEAF, int_to_leaf
from ticket_reduce.merkle.sparse_tree import SparseTreeWitness
from ticket_reduce.reduction.backend import ProofBackend
from ticket_reduce.reduction.models import (
    ADD_TICKET,
    CUT_ACTIONS,
    INIT,
    Certificate,
    ReductionInput,
)
from ticket_reduce.schemas.errors import (
    InvalidWitnessError,
    PredecessorInvalidError,
    ReducerException,
    RoundMismatchError,
    SequencingError,
    StaleWitnessError,
    UnknownTransitionError,
    ValueOverflowError,
)
from ticket_reduce.schemas.state import FIELD_MODULUS, ReductionOutput, validate_hex_hash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transition:
    """A named step: the public input is always a ReductionInput."""
    name: str
    private_inputs: tuple[type, ...]
    method: Callable[..., ReductionOutput]


class ReductionProgram:
    """
    Registry and executor of the reduction transitions.

    Usage:
        program = ReductionProgram(HmacSealBackend(), ReducerConfig(ticket_price=1))
        base = program.init(ReductionInput(), state, ticket_root, bank_root)
        cert = program.add_ticket(step_input, base)
        closed = program.cut_actions(ReductionInput(), cert)
    """

    def __init__(self, backend: ProofBackend, config: Optional[ReducerConfig] = None) -> None:
        self.backend = backend
        self.config = config or ReducerConfig()
        self.actions = ActionDigestChain(self.config.tags)
        self.batches = BatchDigestChain(self.config.tags)
        self.transitions: dict[str, Transition] = {
            INIT: Transition(INIT, (str, str, str), self._init),
            ADD_TICKET: Transition(ADD_TICKET, (Certificate,), self._add_ticket),
            CUT_ACTIONS: Transition(CUT_ACTIONS, (Certificate,), self._cut_actions),
        }

    # =========================================================================
    # Backend boundary
    # =========================================================================

    def prove(self, name: str, public_input: ReductionInput, *private_inputs: Any) -> Certificate:
        """
        Run transition `name` and seal its output.

        Raises:
            UnknownTransitionError: If `name` is not registered
            TypeError: If the private inputs do not match the declared shape
            ReducerException: Any assertion failure of the transition
        """
        transition = self.transitions.get(name)
        if transition is None:
            raise UnknownTransitionError(name, list(self.transitions))

        if len(private_inputs) != len(transition.private_inputs):
            raise TypeError(
                f"{name} takes {len(transition.private_inputs)} private inputs, "
                f"got {len(private_inputs)}"
            )
        for position, (value, expected) in enumerate(zip(private_inputs, transition.private_inputs)):
            if not isinstance(value, expected):
                raise TypeError(
                    f"{name} private input {position} must be {expected.__name__}, "
                    f"got {type(value).__name__}"
                )

        try:
            public_output = transition.method(public_input, *private_inputs)
        except ReducerException as e:
            logger.warning(f"{name} rejected: {e.code} {e.message}")
            raise

        predecessor = next((p for p in private_inputs if isinstance(p, Certificate)), None)
        predecessor_proof = predecessor.proof if predecessor is not None else None
        proof = self.backend.seal(name, public_input, public_output, predecessor_proof)

        logger.info(
            f"{name} sealed: round={public_output.last_processed_round} "
            f"ticket_id={public_output.last_processed_ticket_id} "
            f"digest={public_output.processed_action_digest[:18]}"
        )
        return Certificate(
            transition=name,
            public_input=public_input,
            public_output=public_output,
            predecessor_proof=predecessor_proof,
            proof=proof,
        )

    def verify(self, certificate: Certificate) -> bool:
        """Check a certificate's seal and that its shape fits its transition."""
        if certificate.transition not in self.transitions:
            return False
        if (certificate.transition == INIT) != certificate.is_base:
            return False
        return self.backend.verify(certificate)

    def init(
        self,
        public_input: ReductionInput,
        initial_state: str,
        initial_ticket_root: str,
        initial_bank_root: str,
    ) -> Certificate:
        return self.prove(INIT, public_input, initial_state, initial_ticket_root, initial_bank_root)

    def add_ticket(self, public_input: ReductionInput, predecessor: Certificate) -> Certificate:
        return self.prove(ADD_TICKET, public_input, predecessor)

    def cut_actions(self, public_input: ReductionInput, predecessor: Certificate) -> Certificate:
        return self.prove(CUT_ACTIONS, public_input, predecessor)

    # =========================================================================
    # Transitions
    # =========================================================================

    def _verify_predecessor(self, predecessor: Certificate) -> ReductionOutput:
        if not self.verify(predecessor):
            raise PredecessorInvalidError(
                "Predecessor certificate failed verification",
                details={"transition": predecessor.transition},
            )
        return predecessor.public_output

    def _check_depth(self, witness: SparseTreeWitness, name: str) -> None:
        if witness.depth != self.config.tree_depth:
            raise InvalidWitnessError(
                f"{name} has depth {witness.depth}, expected {self.config.tree_depth}",
                details={"witness": name, "depth": witness.depth},
            )

    def _init(
        self,
        public_input: ReductionInput,
        initial_state: str,
        initial_ticket_root: str,
        initial_bank_root: str,
    ) -> ReductionOutput:
        initial_state = validate_hex_hash(initial_state, "initial_state")
        initial_ticket_root = validate_hex_hash(initial_ticket_root, "initial_ticket_root")
        initial_bank_root = validate_hex_hash(initial_bank_root, "initial_bank_root")
        return ReductionOutput(
            initial_state=initial_state,
            final_state=initial_state,
            initial_ticket_root=initial_ticket_root,
            initial_bank_root=initial_bank_root,
            new_ticket_root=initial_ticket_root,
            new_bank_root=initial_bank_root,
            processed_action_digest=self.actions.empty,
            last_processed_round=0,
            last_processed_ticket_id=0,
        )

    def _add_ticket(self, public_input: ReductionInput, predecessor: Certificate) -> ReductionOutput:
        prev = self._verify_predecessor(predecessor)
        public_input.require_complete()

        action = public_input.action
        node_tag = self.config.tags.tree_node
        for name in ("round_witness", "round_ticket_witness", "bank_witness"):
            self._check_depth(getattr(public_input, name), name)

        # Slot must still be empty in the round's ticket sub-tree
        prev_round_root, ticket_id = public_input.round_ticket_witness.compute_root_and_key(
            ZERO_LEAF, node_tag
        )
        prev_ticket_root, round_ = public_input.round_witness.compute_root_and_key(
            prev_round_root, node_tag
        )
        logger.debug(f"addTicket witnessed round={round_} ticket_id={ticket_id}")

        if round_ < prev.last_processed_round:
            raise SequencingError(
                "Round went backwards",
                expected=f">={prev.last_processed_round}",
                actual=round_,
            )
        if round_ > prev.last_processed_round:
            expected_ticket_id = 1
        else:
            expected_ticket_id = prev.last_processed_ticket_id + 1

        if ticket_id != expected_ticket_id:
            raise SequencingError("Wrong id for ticket", expected=expected_ticket_id, actual=ticket_id)
        if prev_ticket_root != prev.new_ticket_root:
            raise StaleWitnessError(
                "Wrong ticket root", expected=prev.new_ticket_root, actual=prev_ticket_root
            )
        if round_ != action.round:
            raise RoundMismatchError("Wrong round in witness", expected=action.round, actual=round_)

        commitment = ticket_commitment(action.ticket, self.config.tags)
        new_round_root, _ = public_input.round_ticket_witness.compute_root_and_key(
            commitment, node_tag
        )
        new_ticket_root, _ = public_input.round_witness.compute_root_and_key(
            new_round_root, node_tag
        )

        prev_bank_root, bank_key = public_input.bank_witness.compute_root_and_key(
            int_to_leaf(public_input.bank_value), node_tag
        )
        if bank_key != round_:
            raise RoundMismatchError("Wrong bank key", expected=round_, actual=bank_key)
        if prev_bank_root != prev.new_bank_root:
            raise StaleWitnessError(
                "Wrong bank root", expected=prev.new_bank_root, actual=prev_bank_root
            )

        new_bank_value = public_input.bank_value + self.config.ticket_price * action.ticket.amount
        if new_bank_value >= FIELD_MODULUS:
            raise ValueOverflowError(
                "Bank value overflow",
                expected=f"<{FIELD_MODULUS}",
                actual=new_bank_value,
                details={"round": round_},
            )
        new_bank_root, _ = public_input.bank_witness.compute_root_and_key(
            int_to_leaf(new_bank_value), node_tag
        )

        return ReductionOutput(
            initial_state=prev.initial_state,
            final_state=prev.final_state,
            initial_ticket_root=prev.initial_ticket_root,
            initial_bank_root=prev.initial_bank_root,
            new_ticket_root=new_ticket_root,
            new_bank_root=new_bank_root,
            processed_action_digest=self.actions.append(prev.processed_action_digest, action),
            last_processed_round=round_,
            last_processed_ticket_id=expected_ticket_id,
        )

    def _cut_actions(self, public_input: ReductionInput, predecessor: Certificate) -> ReductionOutput:
        prev = self._verify_predecessor(predecessor)
        return prev.model_copy(
            update={
                "final_state": self.batches.append(prev.final_state, prev.processed_action_digest),
                "processed_action_digest": self.actions.empty,
            }
        )
