"""
Pytest configuration and shared fixtures.

- rates: the default rate structure (100 $/hr, +20%, +27.5%)
- shift_log: an empty shift log with a deterministic id clock
"""

import itertools
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from payroll_calc import RateConfiguration, ShiftLog


@pytest.fixture
def rates():
    return RateConfiguration()


@pytest.fixture
def shift_log():
    counter = itertools.count(1000)
    return ShiftLog(clock=lambda: next(counter))
