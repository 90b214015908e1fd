"""
Configuration file for pytest.

Provides shared fixtures for tests.
"""

from typing import Optional

import pytest

import history_core.config.config_manager as config_module
from history_core.config.config_manager import ConfigManager
from history_core.model.version import Version


def create_test_version(i: int, parent: Optional[int] = None) -> Version:
    """Version ``v<i>`` dated ``i`` with an empty patch."""
    return Version(
        id=f"v{i}",
        date=i,
        patch=[],
        parent=f"v{parent}" if parent else None,
    )


@pytest.fixture(autouse=True)
def reset_config():
    """Give every test a fresh configuration singleton."""
    ConfigManager._instance = None
    config_module._config_manager = None
    yield
    ConfigManager._instance = None
    config_module._config_manager = None


@pytest.fixture
def make_version():
    """Factory for versions with predictable IDs and dates."""
    return create_test_version
