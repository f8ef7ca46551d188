"""Conftest for unit tests - mark every test collected here as a unit test."""

from pathlib import Path

import pytest


UNIT_ROOT = Path(__file__).resolve().parent


def pytest_collection_modifyitems(config, items):
    """Add the unit marker to tests under this directory that do not carry it yet."""
    for item in items:
        if UNIT_ROOT in Path(str(item.fspath)).resolve().parents and item.get_closest_marker("unit") is None:
            item.add_marker(pytest.mark.unit)
