"""
Pytest configuration and fixtures for blackjack tests.
"""

import pytest

from cardtable.blackjack.observer import RecordingGameObserver
from cardtable.blackjack.payout import StandardPayoutCalculator


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "scenario: end-to-end round scenarios with a stacked deck"
    )
    config.addinivalue_line("markers", "split: mark test as testing split scenarios")


@pytest.fixture
def recorder():
    return RecordingGameObserver()


@pytest.fixture
def payout_calculator():
    return StandardPayoutCalculator()
