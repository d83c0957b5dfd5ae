"""
tests/conftest.py — Shared fixtures and path setup for all tests.

Adds the project root to sys.path so unit tests can import:
    from config.settings import Settings
    from scripts.checks import CheckResult, Verdict
    from scripts.checks import cluster, host, livestatus
"""
import pathlib
import sys

import pytest

# Make project root importable without installing as a package
PROJECT_ROOT = pathlib.Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import Settings  # noqa: E402


@pytest.fixture
def clean_env(monkeypatch):
    """Drop any LIVESTATUS_* variables the developer's shell may export."""
    for name in Settings.model_fields:
        monkeypatch.delenv(name, raising=False)
