"""
Common test fixtures shared by all modules.

Provides factory functions for core reduction data structures:
- Ticket / LotteryAction
- ReducerConfig with a unit ticket price
- ReductionProgram / ReductionDriver

These are the foundational building blocks used by higher-level fixtures.
"""

from typing import Optional, Sequence

from ticket_reduce.config.runtime import ReducerConfig
from ticket_reduce.reduction.backend import HmacSealBackend
from ticket_reduce.reduction.driver import ReductionDriver
from ticket_reduce.reduction.program import ReductionProgram
from ticket_reduce.schemas.lottery import LotteryAction, Ticket


# Fixed seal key so failures are reproducible across runs
TEST_SEAL_KEY = b"ticket-reduce-test-seal-key-0001"

DEFAULT_OWNER = "B62qowner0000000000000000000000000000000000000000000000"


# =============================================================================
# Ticket / Action Factories
# =============================================================================

def make_ticket(
    amount: int = 1,
    owner: str = DEFAULT_OWNER,
    numbers: Sequence[int] = (1, 2, 3, 4, 5, 6),
) -> Ticket:
    """Create a Ticket for testing."""
    return Ticket(numbers=tuple(numbers), owner=owner, amount=amount)


def make_action(
    round_: int = 1,
    amount: int = 1,
    owner: Optional[str] = None,
    numbers: Sequence[int] = (1, 2, 3, 4, 5, 6),
) -> LotteryAction:
    """Create a LotteryAction for testing."""
    ticket = make_ticket(amount=amount, owner=owner or DEFAULT_OWNER, numbers=numbers)
    return LotteryAction(ticket=ticket, round=round_)


# =============================================================================
# Program / Driver Factories
# =============================================================================

def make_config(ticket_price: int = 1, tree_depth: int = 20) -> ReducerConfig:
    """Create a ReducerConfig; unit price keeps bank arithmetic readable."""
    return ReducerConfig(tree_depth=tree_depth, ticket_price=ticket_price)


def make_program(
    config: Optional[ReducerConfig] = None,
    key: bytes = TEST_SEAL_KEY,
) -> ReductionProgram:
    """Create a ReductionProgram backed by a deterministic HMAC seal."""
    config = config or make_config()
    return ReductionProgram(HmacSealBackend(key=key, tags=config.tags), config)


def make_driver(
    program: Optional[ReductionProgram] = None,
    start: bool = True,
) -> ReductionDriver:
    """Create a ReductionDriver, started by default."""
    driver = ReductionDriver(program or make_program())
    if start:
        driver.start()
    return driver
