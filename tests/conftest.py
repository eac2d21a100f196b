"""Pytest configuration and shared fixtures for pushpipe tests.

This module provides:
- Basic pytest configuration
- Common fixtures (streams, recorders)
- Setup/teardown for test isolation (environment, config, extensions)
"""

import os
import sys
from pathlib import Path

import pytest

# Add project root to Python path to allow imports from pushpipe and tests.fixtures
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pushpipe import config as pushpipe_config, registry  # noqa: E402
from pushpipe.stream import Stream  # noqa: E402
from tests.fixtures.test_helpers import Recorder  # noqa: E402


# ==================== Pytest Configuration ====================

def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers",
        "unit: mark test as a unit test (fast, isolated)"
    )
    config.addinivalue_line(
        "markers",
        "integration: mark test as an integration test (several components)"
    )
    config.addinivalue_line(
        "markers",
        "slow: mark test as slow (real sleeps of a few hundred ms)"
    )


# ==================== Isolation Fixtures ====================

@pytest.fixture(scope="function", autouse=True)
def isolate_environment():
    """Isolate each test by preventing environment variable pollution.

    Also drops the cached StreamConfig so every test reads the environment
    it sets up.
    """
    original_env = os.environ.copy()
    pushpipe_config.reset_config()

    yield

    os.environ.clear()
    os.environ.update(original_env)
    pushpipe_config.reset_config()


@pytest.fixture(scope="function", autouse=True)
def isolate_extensions():
    """Give each test a registry holding only the builtin extensions."""
    registry.reset_registry()
    yield
    registry.reset_registry()


# ==================== Stream Fixtures ====================

@pytest.fixture
def stream() -> Stream:
    """Provide an empty active stream."""
    return Stream()


@pytest.fixture
def values() -> Recorder:
    """Recorder for value listeners."""
    return Recorder()


@pytest.fixture
def errors() -> Recorder:
    """Recorder for error listeners."""
    return Recorder()


@pytest.fixture
def ends() -> Recorder:
    """Recorder for end listeners."""
    return Recorder()
