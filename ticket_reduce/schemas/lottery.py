"""
Schemas & Canonicalization
File: lottery.py

Purpose: Upstream action types folded by the reduction engine.
Tickets arrive already validated; only their shape is checked here.
"""

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt

from .state import FIELD_MODULUS


class Ticket(BaseModel):
    """A purchased lottery entry."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    numbers: tuple[NonNegativeInt, ...] = Field(
        ...,
        description="Chosen numbers, in the order they were picked",
        min_length=1,
    )
    owner: str = Field(
        ...,
        description="Public identifier of the ticket buyer",
        min_length=1,
    )
    amount: PositiveInt = Field(
        ...,
        description="Number of identical entries bought with this ticket",
        lt=FIELD_MODULUS,
    )


class LotteryAction(BaseModel):
    """One submitted purchase tagged with its target round."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    ticket: Ticket
    round: NonNegativeInt = Field(
        ...,
        description="Round the ticket is bought for",
        lt=FIELD_MODULUS,
    )
