"""
Reduction chain fixtures.

Provides factory functions for:
- The B/C/D scenario chain (three tickets over rounds 1 and 2)
- Forged certificates for rejection testing
"""

from typing import Optional

from ticket_reduce.reduction.driver import ReductionDriver
from ticket_reduce.reduction.models import Certificate

from .common import make_action, make_driver


def make_scenario_driver(driver: Optional[ReductionDriver] = None) -> ReductionDriver:
    """
    Run the standard three-ticket sequence without closing the batch.

    1. round 1, amount 3  -> ticket id 1, pot 3
    2. round 1, amount 2  -> ticket id 2, pot 5
    3. round 2, amount 1  -> ticket id 1, pot 1
    """
    driver = driver or make_driver()
    driver.add_ticket(make_action(round_=1, amount=3))
    driver.add_ticket(make_action(round_=1, amount=2, numbers=(6, 5, 4, 3, 2, 1)))
    driver.add_ticket(make_action(round_=2, amount=1))
    return driver


def make_forged_certificate(certificate: Certificate, **output_updates) -> Certificate:
    """
    Copy `certificate` with a modified public output but the original proof.

    The result carries a seal that no longer matches its content.
    """
    forged_output = certificate.public_output.model_copy(update=output_updates)
    return certificate.model_copy(update={"public_output": forged_output})
