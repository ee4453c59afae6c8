"""
Test fixtures package for ticket reduction tests.

This package provides factory functions for creating test objects.
Organized into layers:
- common.py: Base factories shared by all modules
- reduction_fixtures.py: Certificate chain helpers

Usage:
    from fixtures import make_action, make_scenario_driver

    def test_something():
        driver = make_scenario_driver()
        assert driver.state.last_processed_round == 2
"""

from .common import (
    TEST_SEAL_KEY,
    make_action,
    make_config,
    make_driver,
    make_program,
    make_ticket,
)

from .reduction_fixtures import (
    make_forged_certificate,
    make_scenario_driver,
)

__all__ = [
    # Common
    "TEST_SEAL_KEY",
    "make_action",
    "make_config",
    "make_driver",
    "make_program",
    "make_ticket",
    # Reduction
    "make_forged_certificate",
    "make_scenario_driver",
]
