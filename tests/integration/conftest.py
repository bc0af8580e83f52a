import pytest


def pytest_collection_modifyitems(items):
    """Apply integration marker to reader and CLI tests in this directory."""
    for item in items:
        if "integration" in item.path.parts:
            item.add_marker(pytest.mark.integration)
