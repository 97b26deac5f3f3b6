"""
Pytest configuration for tests at the root level.
"""

import pytest

from cardtable.blackjack.decision_logger import decision_logger


# Start every test with empty decision counts and the logger's own level
@pytest.fixture(scope="function", autouse=True)
def reset_decision_history():
    level = decision_logger.logger.level
    decision_logger.clear_history()
    yield
    decision_logger.clear_history()
    decision_logger.logger.setLevel(level)
