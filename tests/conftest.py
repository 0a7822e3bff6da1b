"""Shared fixtures for the trading-journal test suite."""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep JOURNAL_* variables from the developer's shell out of the tests."""
    import os

    for key in list(os.environ):
        if key.startswith("JOURNAL_"):
            monkeypatch.delenv(key, raising=False)
