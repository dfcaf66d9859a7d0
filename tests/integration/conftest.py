"""Pytest configuration for integration tests.

All tests in this directory are automatically marked as integration
tests and get a click test runner.
"""

import pytest
from click.testing import CliRunner


def pytest_collection_modifyitems(items):
    """Mark all tests in the integration directory as integration tests."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()
