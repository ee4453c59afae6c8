"""
Certificate Chain Verification

Checks a published sequence of certificates end to end and reports every
rule as a CheckResult, pointing a ChallengeRef at the first defect.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from ticket_reduce.reduction.models import INIT, Certificate
from ticket_reduce.reduction.program import ReductionProgram
from ticket_reduce.schemas.verification import ChallengeRef, CheckResult, VerificationResult


def _make_check(check_id: str, ok: bool, message: str, details: dict[str, Any]) -> CheckResult:
    """Create a CheckResult with appropriate severity."""
    if ok:
        return CheckResult.passed(check_id, message, details)
    return CheckResult.failed(check_id, message, details)


def verify_chain(
    certificates: Sequence[Certificate],
    program: ReductionProgram,
) -> VerificationResult:
    """
    Verify a certificate chain.

    Rules:
    1. The chain starts with an `init` certificate
    2. Every certificate's seal verifies
    3. Every certificate embeds the proof of the one before it
    4. Anchors never change

    Args:
        certificates: Chain in production order, `init` first.
        program: Program whose backend sealed the chain.

    Returns:
        VerificationResult with a challenge at the first failing position.
    """
    checks: list[CheckResult] = []
    challenge: Optional[ChallengeRef] = None

    def flag(kind: str, index: int, reason: str) -> None:
        nonlocal challenge
        if challenge is None:
            challenge = ChallengeRef(kind=kind, certificate_index=index, reason=reason)

    if not certificates:
        checks.append(_make_check("chain_origin", False, "Chain is empty", {}))
        return VerificationResult(
            ok=False,
            checks=checks,
            challenge=ChallengeRef(kind="chain_origin", reason="Chain is empty"),
        )

    first = certificates[0]
    origin_ok = first.transition == INIT and first.is_base
    checks.append(_make_check(
        "chain_origin", origin_ok,
        "Chain starts at init" if origin_ok else
        f"Chain starts at {first.transition!r} instead of init",
        {"transition": first.transition},
    ))
    if not origin_ok:
        flag("chain_origin", 0, "First certificate is not a base init certificate")

    anchors = first.public_output.anchors()
    for index, certificate in enumerate(certificates):
        sealed = program.verify(certificate)
        checks.append(_make_check(
            f"certificate_seal_{index}", sealed,
            f"Certificate {index} verifies" if sealed else f"Certificate {index} failed verification",
            {"transition": certificate.transition},
        ))
        if not sealed:
            flag("certificate_seal", index, "Seal does not verify")

        if index == 0:
            continue

        previous = certificates[index - 1]
        linked = certificate.predecessor_proof == previous.proof
        checks.append(_make_check(
            f"predecessor_link_{index}", linked,
            f"Certificate {index} embeds its predecessor" if linked else
            f"Certificate {index} does not embed certificate {index - 1}",
            {"expected": previous.proof, "actual": certificate.predecessor_proof},
        ))
        if not linked:
            flag("predecessor_link", index, "Predecessor proof mismatch")

        same_anchors = certificate.public_output.anchors() == anchors
        checks.append(_make_check(
            f"anchor_{index}", same_anchors,
            f"Certificate {index} keeps the chain anchors" if same_anchors else
            f"Certificate {index} changed the chain anchors",
            {"expected": list(anchors), "actual": list(certificate.public_output.anchors())},
        ))
        if not same_anchors:
            flag("anchor", index, "Anchor mismatch")

    ok = all(check.ok for check in checks)
    return VerificationResult(ok=ok, checks=checks, challenge=None if ok else challenge)
