"""Shared fixtures for cronmatch tests."""

import os

import pytest

from cronmatch.config import reset_settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run every test with default settings and no CRONMATCH_* variables."""
    for key in list(os.environ):
        if key.startswith("CRONMATCH_"):
            monkeypatch.delenv(key)
    reset_settings()
    yield
    reset_settings()
