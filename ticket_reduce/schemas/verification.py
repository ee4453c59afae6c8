"""
Schemas & Canonicalization
File: verification.py

Purpose: Standard result format for certificate-chain verification.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# Severity levels for checks
CheckSeverity = Literal["info", "warn", "error"]

# Kinds of chain defects a verifier can point at
ChallengeKind = Literal["chain_origin", "certificate_seal", "predecessor_link", "anchor"]


class CheckResult(BaseModel):
    """
    Result of a single verification check.

    Checks are atomic verification steps that can pass or fail.
    """

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(
        ...,
        description="Unique identifier for this check",
        min_length=1,
    )
    ok: bool = Field(
        ...,
        description="Whether the check passed",
    )
    severity: CheckSeverity = Field(
        ...,
        description="Severity level of this check",
    )
    message: str = Field(
        ...,
        description="Human-readable message describing the result",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional details about the check",
    )

    @property
    def is_error(self) -> bool:
        """Check if this is an error-level failure."""
        return not self.ok and self.severity == "error"

    @classmethod
    def passed(
        cls,
        check_id: str,
        message: str = "Check passed",
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """Create a passed check result."""
        return cls(
            check_id=check_id,
            ok=True,
            severity="info",
            message=message,
            details=details or {},
        )

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """Create a failed check result."""
        return cls(
            check_id=check_id,
            ok=False,
            severity="error",
            message=message,
            details=details or {},
        )


class ChallengeRef(BaseModel):
    """
    Reference to the first defective position in a certificate chain.
    """

    model_config = ConfigDict(extra="forbid")

    kind: ChallengeKind = Field(
        ...,
        description="Type of defect being challenged",
    )
    certificate_index: int | None = Field(
        default=None,
        description="0-based position of the offending certificate in the chain",
        ge=0,
    )
    reason: str | None = Field(
        default=None,
        description="Reason for the challenge",
    )


class VerificationResult(BaseModel):
    """
    Complete result of a verification process.

    This is the standard format for communicating verification outcomes
    without using exceptions.
    """

    model_config = ConfigDict(extra="forbid")

    ok: bool = Field(
        ...,
        description="Overall verification success",
    )
    checks: list[CheckResult] = Field(
        default_factory=list,
        description="Individual check results",
    )
    challenge: ChallengeRef | None = Field(
        default=None,
        description="Reference to the first defect if verification failed",
    )

    @property
    def error_count(self) -> int:
        """Count of error-level failures."""
        return sum(1 for check in self.checks if check.is_error)

    @property
    def passed_count(self) -> int:
        """Count of passed checks."""
        return sum(1 for check in self.checks if check.ok)

    def get_failed_checks(self) -> list[CheckResult]:
        """Get all failed checks."""
        return [check for check in self.checks if not check.ok]

    def get_error_messages(self) -> list[str]:
        """Get all error messages."""
        return [check.message for check in self.checks if check.is_error]
