"""Pytest configuration and shared fixtures for fran_scrapers tests."""

import os

import pytest

from fran_scrapers.config import get_settings
from fran_scrapers.tests.unit.fixtures import (  # noqa: F401
    sample_security,
    test_settings,
)


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch):
    """Clear FRAN_* variables and the cached settings before each test."""
    for var in list(os.environ):
        if var.startswith("FRAN_"):
            monkeypatch.delenv(var, raising=False)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
