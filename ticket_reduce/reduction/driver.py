"""
Off-chain Reduction Driver

Keeps the current ticket and bank trees, builds witnesses for the next action
and feeds them to the reduction program. Tree writes are applied only after
the program has produced a certificate, so a rejected step leaves the driver
exactly as it was.

Tree layout:
- round tree: slot `round` holds the root of that round's ticket sub-tree
  (untouched rounds hold the empty sub-tree root)
- ticket sub-tree: slot `ticket_id` holds the ticket commitment
- bank tree: slot `round` holds the round's pot as a 32-byte integer
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ticket_reduce.chains.digest_chain import ticket_commitment
from ticket_reduce.crypto.hashing import ZERO_LEAF, int_to_leaf, leaf_to_int
from ticket_reduce.merkle.sparse_tree import SparseMerkleMap, empty_root
from ticket_reduce.reduction.models import Certificate, ReductionInput
from ticket_reduce.reduction.program import ReductionProgram
from ticket_reduce.schemas.errors import InvalidWitnessError
from ticket_reduce.schemas.lottery import LotteryAction
from ticket_reduce.schemas.state import ReductionOutput

logger = logging.getLogger(__name__)


class ReductionDriver:
    """
    Sequential producer of one certificate chain.

    Usage:
        driver = ReductionDriver(program)
        driver.start()
        driver.reduce(actions)          # addTicket per action, then cutActions
        latest = driver.head
    """

    def __init__(self, program: ReductionProgram) -> None:
        self.program = program
        config = program.config
        node_tag = config.tags.tree_node
        self._depth = config.tree_depth
        self._node_tag = node_tag
        self.empty_ticket_root = empty_root(self._depth, ZERO_LEAF, node_tag)
        self.round_tree = SparseMerkleMap(self._depth, self.empty_ticket_root, node_tag)
        self.bank_tree = SparseMerkleMap(self._depth, ZERO_LEAF, node_tag)
        self.ticket_trees: dict[int, SparseMerkleMap] = {}
        self.certificates: list[Certificate] = []

    @property
    def head(self) -> Certificate:
        if not self.certificates:
            raise RuntimeError("Driver has not been started")
        return self.certificates[-1]

    @property
    def state(self) -> ReductionOutput:
        return self.head.public_output

    def bank_value(self, round_: int) -> int:
        return leaf_to_int(self.bank_tree.get(round_))

    def ticket_tree(self, round_: int) -> SparseMerkleMap:
        """Ticket sub-tree of `round_` (a fresh empty tree if untouched)."""
        tree = self.ticket_trees.get(round_)
        if tree is None:
            tree = SparseMerkleMap(self._depth, ZERO_LEAF, self._node_tag)
        return tree

    def next_ticket_id(self, round_: int) -> int:
        state = self.state
        if round_ > state.last_processed_round:
            return 1
        return state.last_processed_ticket_id + 1

    def start(self, initial_state: Optional[str] = None) -> Certificate:
        """
        Issue the base certificate over the current tree roots.

        Args:
            initial_state: Final-state anchor; the empty batch chain by default.
        """
        if self.certificates:
            raise RuntimeError("Driver already started")
        if initial_state is None:
            initial_state = self.program.batches.empty
        certificate = self.program.init(
            ReductionInput(),
            initial_state,
            self.round_tree.root_hex,
            self.bank_tree.root_hex,
        )
        self.certificates.append(certificate)
        return certificate

    def _check_slot(self, key: int, name: str) -> None:
        capacity = self.program.config.capacity
        if key >= capacity:
            raise InvalidWitnessError(
                f"{name} {key} has no slot in a depth-{self._depth} tree",
                details={name: key, "capacity": capacity},
            )

    def build_input(self, action: LotteryAction) -> ReductionInput:
        """
        Witnesses for `action` against the current trees.

        Raises:
            InvalidWitnessError: If the round or the next ticket id exceeds
                the tree capacity
        """
        round_ = action.round
        ticket_id = self.next_ticket_id(round_)
        self._check_slot(round_, "round")
        self._check_slot(ticket_id, "ticket_id")
        return ReductionInput(
            action=action,
            round_witness=self.round_tree.witness(round_),
            round_ticket_witness=self.ticket_tree(round_).witness(ticket_id),
            bank_witness=self.bank_tree.witness(round_),
            bank_value=self.bank_value(round_),
        )

    def add_ticket(self, action: LotteryAction) -> Certificate:
        step_input = self.build_input(action)
        certificate = self.program.add_ticket(step_input, self.head)
        output = certificate.public_output

        config = self.program.config
        round_ = action.round
        tree = self.ticket_tree(round_).copy()
        tree.set(output.last_processed_ticket_id, ticket_commitment(action.ticket, config.tags))
        round_tree = self.round_tree.copy()
        round_tree.set(round_, tree.root)
        bank_tree = self.bank_tree.copy()
        bank_tree.set(
            round_,
            int_to_leaf(step_input.bank_value + config.ticket_price * action.ticket.amount),
        )

        if round_tree.root_hex != output.new_ticket_root or bank_tree.root_hex != output.new_bank_root:
            raise RuntimeError("Local trees diverged from the certified roots")

        self.ticket_trees[round_] = tree
        self.round_tree = round_tree
        self.bank_tree = bank_tree
        self.certificates.append(certificate)
        return certificate

    def cut_actions(self) -> Certificate:
        certificate = self.program.cut_actions(ReductionInput(), self.head)
        self.certificates.append(certificate)
        return certificate

    def reduce(self, actions: Iterable[LotteryAction], cut: bool = True) -> Certificate:
        """Fold a batch of actions, closing it with cutActions when `cut` is set."""
        count = 0
        for action in actions:
            self.add_ticket(action)
            count += 1
        if cut:
            self.cut_actions()
        logger.info(f"Reduced {count} actions (cut={cut}), chain length {len(self.certificates)}")
        return self.head
