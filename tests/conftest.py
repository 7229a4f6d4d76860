"""
Pytest configuration for the test suite.

This file is automatically loaded by pytest and applies configuration
to all tests in the tests/ directory.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from anndrive.utils.logger import setup_logging

# Log to nowhere but pytest's capture; no log files from test runs
setup_logging(console_output=False, file_output=False)


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def scenario_samples():
    """The two-sample set used by the reference training scenario."""
    from anndrive.ai.trainer import TrainingSample
    return [
        TrainingSample.of([0, 0, 0, 0, 0], [0.3, 0.7]),
        TrainingSample.of([1, 1, 1, 1, 1], [0.5, 0.5]),
    ]
