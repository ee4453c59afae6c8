"""
Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import schema definitions.
"""

# Version constants
from .versioning import (
    SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    UnsupportedSchemaVersionError,
    assert_supported_schema_version,
    is_compatible_schema_version,
)

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
)

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    ErrorCodes,
    InvalidWitnessError,
    PredecessorInvalidError,
    ReducerError,
    ReducerException,
    RoundMismatchError,
    SchemaValidationException,
    SequencingError,
    StaleWitnessError,
    UnknownTransitionError,
    ValueOverflowError,
)

# Domain models
from .lottery import LotteryAction, Ticket
from .state import HEX_HASH_PATTERN, ReductionOutput, ReductionPhase, validate_hex_hash

# Verification results
from .verification import (
    ChallengeKind,
    ChallengeRef,
    CheckResult,
    CheckSeverity,
    VerificationResult,
)

__all__ = [
    # Versioning
    "SCHEMA_VERSION",
    "SUPPORTED_SCHEMA_VERSIONS",
    "UnsupportedSchemaVersionError",
    "assert_supported_schema_version",
    "is_compatible_schema_version",
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonical_equals",
    "canonicalize_value",
    "dumps_canonical",
    # Errors
    "CanonicalizationException",
    "ErrorCodes",
    "InvalidWitnessError",
    "PredecessorInvalidError",
    "ReducerError",
    "ReducerException",
    "RoundMismatchError",
    "SchemaValidationException",
    "SequencingError",
    "StaleWitnessError",
    "UnknownTransitionError",
    "ValueOverflowError",
    # Domain
    "LotteryAction",
    "Ticket",
    "HEX_HASH_PATTERN",
    "ReductionOutput",
    "ReductionPhase",
    "validate_hex_hash",
    # Verification
    "ChallengeKind",
    "ChallengeRef",
    "CheckResult",
    "CheckSeverity",
    "VerificationResult",
]
