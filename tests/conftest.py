"""
Pytest configuration and shared fixtures for ticket reduction tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")
_reduction = importlib.import_module("fixtures.reduction_fixtures")

make_action = _common.make_action
make_config = _common.make_config
make_driver = _common.make_driver
make_program = _common.make_program

make_scenario_driver = _reduction.make_scenario_driver


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def config():
    """Provide a ReducerConfig with unit ticket price."""
    return make_config()


@pytest.fixture
def program(config):
    """Provide a ReductionProgram with a deterministic seal key."""
    return make_program(config)


@pytest.fixture
def driver(program):
    """Provide a started ReductionDriver."""
    return make_driver(program)


@pytest.fixture
def scenario_driver(driver):
    """Provide a driver that has processed the three-ticket scenario."""
    return make_scenario_driver(driver)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


# =============================================================================
# Test Helpers (available to all tests via fixtures)
# =============================================================================

@pytest.fixture
def assert_check_passed():
    """Helper to assert a specific check passed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert checks[0].ok, f"Check '{check_id}' failed: {checks[0].message}"
    return _assert


@pytest.fixture
def assert_check_failed():
    """Helper to assert a specific check failed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert not checks[0].ok, f"Check '{check_id}' unexpectedly passed"
    return _assert
