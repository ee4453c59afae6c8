"""
Runtime Configuration Module

Provides configuration loading for the ticket reduction engine.
"""

from .runtime import DEFAULT_TICKET_PRICE, HashTags, ReducerConfig

__all__ = [
    "DEFAULT_TICKET_PRICE",
    "HashTags",
    "ReducerConfig",
]
