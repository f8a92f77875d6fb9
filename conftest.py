"""Pytest configuration — project root importable, environment isolated."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep a developer's DOCVAL_* settings from leaking into tests."""
    for name in (
        "DOCVAL_REGISTRY",
        "DOCVAL_TYPES_MANIFEST",
        "DOCVAL_KNOWN_TYPES",
        "DOCVAL_STRICT_VERSIONS",
        "DOCVAL_HTTP_TIMEOUT",
        "DOCVAL_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
