"""
Schemas & Canonicalization
File: canonical.py

Purpose: Deterministic serialization utilities for hashing actions, tickets
and certificate commitments.

CRITICAL: All outputs from this module MUST be deterministic across runs.
"""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException

# Canonical JSON separators - no whitespace
CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Recursively canonicalize a value for deterministic JSON serialization.

    Floats are rejected outright: every committed quantity in a reduction
    (rounds, ids, amounts, pot totals) is an integer.

    Args:
        value: Any Python value to canonicalize.
        path: Current path for error reporting.

    Returns:
        A JSON-serializable canonical representation.

    Raises:
        CanonicalizationException: If the value cannot be canonicalized.
    """
    if value is None:
        return None

    if isinstance(value, bool):
        # Must check bool before int since bool is subclass of int
        return value

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        raise CanonicalizationException(
            message=f"Float values are not allowed in commitments: {value}",
            details={"path": path, "value": str(value)},
        )

    if isinstance(value, str):
        return value

    if isinstance(value, Enum):
        return value.value

    if isinstance(value, BaseModel):
        dumped = value.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
        )
        return canonicalize_value(dumped, path)

    if isinstance(value, dict):
        # Keys will be sorted during JSON serialization
        return {
            k: canonicalize_value(v, f"{path}.{k}" if path else k)
            for k, v in value.items()
            if v is not None
        }

    if isinstance(value, (list, tuple)):
        return [
            canonicalize_value(item, f"{path}[{i}]")
            for i, item in enumerate(value)
        ]

    if isinstance(value, bytes):
        return "0x" + value.hex()

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to canonical JSON string.

    Returns:
        A canonical JSON string with:
            - Sorted keys
            - No extra whitespace
            - None fields excluded
            - Enums as string values
            - Bytes as 0x-prefixed hex

    Raises:
        CanonicalizationException: If serialization fails.

    Example:
        >>> dumps_canonical({"round": 2, "amount": 1})
        '{"amount":1,"round":2}'
    """
    try:
        canonicalized = canonicalize_value(obj)
        return json.dumps(
            canonicalized,
            sort_keys=True,
            separators=CANONICAL_JSON_SEPARATORS,
            ensure_ascii=False,
        )
    except CanonicalizationException:
        raise
    except (TypeError, ValueError) as e:
        raise CanonicalizationException(
            message=f"Failed to serialize to canonical JSON: {e}",
            details={"type": type(obj).__name__, "error": str(e)},
        ) from e


def canonical_equals(obj1: Any, obj2: Any) -> bool:
    """Check if two objects have identical canonical JSON representations."""
    try:
        return dumps_canonical(obj1) == dumps_canonical(obj2)
    except CanonicalizationException:
        return False
