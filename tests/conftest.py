"""Pytest configuration for i3start tests."""

import pytest


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep the developer's editor and config directory out of the tests."""
    for variable in ("I3START_CONFIG_DIR", "VISUAL", "EDITOR"):
        monkeypatch.delenv(variable, raising=False)
