import pytest

PARSER_MODULES = {"test_header.py", "test_records.py"}


def pytest_collection_modifyitems(items):
    """Mark unit tests, and the decoding tests among them as parser tests."""
    for item in items:
        if "unit" not in item.path.parts:
            continue
        item.add_marker(pytest.mark.unit)
        if item.path.name in PARSER_MODULES:
            item.add_marker(pytest.mark.parser)
