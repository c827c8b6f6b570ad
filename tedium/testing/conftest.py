"""
Pytest plugin for tedium testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["tedium.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from tedium.testing.fixtures import (
    credentials,
    mock_analyzer,
    mock_hosting,
    mock_source_control,
    settings,
)

__all__ = [
    "credentials",
    "mock_analyzer",
    "mock_hosting",
    "mock_source_control",
    "settings",
]
