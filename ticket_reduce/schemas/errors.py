"""
Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for the ticket reduction engine.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Every exception raised by a transition is terminal for that transition:
no certificate is produced and nothing is retried inside the engine.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the engine."""

    # Schema & Validation Errors
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    INVALID_WITNESS = "INVALID_WITNESS"

    # Transition Errors
    SEQUENCING_ERROR = "SEQUENCING_ERROR"
    STALE_WITNESS = "STALE_WITNESS"
    ROUND_MISMATCH = "ROUND_MISMATCH"
    PREDECESSOR_INVALID = "PREDECESSOR_INVALID"
    UNKNOWN_TRANSITION = "UNKNOWN_TRANSITION"
    VALUE_OVERFLOW = "VALUE_OVERFLOW"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class ReducerError(BaseModel):
    """
    Base error model for structured error communication.

    Used when a rejected transition has to be reported to a caller
    (e.g. a driver that re-derives witnesses) without raising.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.SEQUENCING_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class ReducerException(Exception):
    """
    Base exception for all ticket reduction errors.

    This exception carries structured error information and can be
    converted to ReducerError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "REDUCER_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> ReducerError:
        """Convert this exception to a ReducerError model."""
        return ReducerError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


def _mismatch_details(
    expected: Any,
    actual: Any,
    details: dict[str, Any] | None,
) -> dict[str, Any]:
    full_details = dict(details or {})
    full_details["expected"] = expected
    full_details["actual"] = actual
    return full_details


class CanonicalizationException(ReducerException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class SchemaValidationException(ReducerException):
    """Exception raised when a transition input is missing required fields."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.SCHEMA_VALIDATION_ERROR,
            details=full_details,
            retryable=False,
        )


class InvalidWitnessError(ReducerException):
    """Exception raised when a tree witness is malformed (wrong depth, bad hex)."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_WITNESS,
            details=details,
            retryable=False,
        )


class SequencingError(ReducerException):
    """Exception raised when a witnessed ticket id is not the expected next id."""

    def __init__(
        self,
        message: str,
        expected: Any = None,
        actual: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.SEQUENCING_ERROR,
            details=_mismatch_details(expected, actual, details),
            retryable=False,
        )


class StaleWitnessError(ReducerException):
    """Exception raised when a witness's recomputed root differs from the recorded root."""

    def __init__(
        self,
        message: str,
        expected: Any = None,
        actual: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.STALE_WITNESS,
            details=_mismatch_details(expected, actual, details),
            retryable=False,
        )


class RoundMismatchError(ReducerException):
    """Exception raised when a witness key disagrees with the action's round."""

    def __init__(
        self,
        message: str,
        expected: Any = None,
        actual: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.ROUND_MISMATCH,
            details=_mismatch_details(expected, actual, details),
            retryable=False,
        )


class ValueOverflowError(ReducerException):
    """Exception raised when a committed integer would not fit in a 32-byte leaf."""

    def __init__(
        self,
        message: str,
        expected: Any = None,
        actual: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.VALUE_OVERFLOW,
            details=_mismatch_details(expected, actual, details),
            retryable=False,
        )


class PredecessorInvalidError(ReducerException):
    """Exception raised when the embedded predecessor certificate fails verification."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PREDECESSOR_INVALID,
            details=details,
            retryable=False,
        )


class UnknownTransitionError(ReducerException):
    """Exception raised when a transition name is not registered with the program."""

    def __init__(
        self,
        name: str,
        known: list[str] | None = None,
    ) -> None:
        super().__init__(
            message=f"Unknown transition: {name!r}",
            code=ErrorCodes.UNKNOWN_TRANSITION,
            details={"transition": name, "known": sorted(known or [])},
            retryable=False,
        )
