"""
Ticket Reduction Program & Certificates

This module provides:
- Models: ReductionInput, Certificate
- Backend contract: ProofBackend, HmacSealBackend
- Program: ReductionProgram with transitions init / addTicket / cutActions
- Chain verification: verify_chain
- Off-chain driver: ReductionDriver
"""

from ticket_reduce.reduction.models import (
    ADD_TICKET,
    CUT_ACTIONS,
    INIT,
    Certificate,
    ReductionInput,
)
from ticket_reduce.reduction.backend import HmacSealBackend, ProofBackend, certificate_message
from ticket_reduce.reduction.program import ReductionProgram, Transition
from ticket_reduce.reduction.chain_verification import verify_chain
from ticket_reduce.reduction.driver import ReductionDriver

__all__ = [
    # Transition names
    "INIT",
    "ADD_TICKET",
    "CUT_ACTIONS",
    # Models
    "Certificate",
    "ReductionInput",
    # Backend
    "ProofBackend",
    "HmacSealBackend",
    "certificate_message",
    # Program
    "ReductionProgram",
    "Transition",
    "verify_chain",
    "ReductionDriver",
]
