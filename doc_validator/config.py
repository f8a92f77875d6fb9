"""
Runtime settings, read from the environment.

Entry points (``main.py``, ``api.py``) load a ``.env`` file first, so any of
these may also be set there:

    DOCVAL_REGISTRY          documents.json path or http(s) URL
    DOCVAL_TYPES_MANIFEST    validation-types.json path or http(s) URL
    DOCVAL_KNOWN_TYPES       comma-separated categories to discover
    DOCVAL_STRICT_VERSIONS   reject malformed versions at load time
    DOCVAL_HTTP_TIMEOUT      seconds, for remote sources
    DOCVAL_LOG_LEVEL         logging level name
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .exceptions import ConfigurationError

PROJECT_ROOT = Path(__file__).parent.parent

DEFAULT_REGISTRY = str(PROJECT_ROOT / "documents.json")
DEFAULT_TYPES_MANIFEST = str(PROJECT_ROOT / "validation-types.json")
DEFAULT_KNOWN_TYPES: tuple[str, ...] = ("document",)

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class Settings:
    registry_source: str = DEFAULT_REGISTRY
    types_manifest: str = DEFAULT_TYPES_MANIFEST
    known_types: tuple[str, ...] = DEFAULT_KNOWN_TYPES
    strict_versions: bool = False
    http_timeout: float = 10.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            registry_source=os.environ.get("DOCVAL_REGISTRY", DEFAULT_REGISTRY),
            types_manifest=os.environ.get("DOCVAL_TYPES_MANIFEST", DEFAULT_TYPES_MANIFEST),
            known_types=_parse_known_types(os.environ.get("DOCVAL_KNOWN_TYPES")),
            strict_versions=(
                os.environ.get("DOCVAL_STRICT_VERSIONS", "").strip().lower() in _TRUTHY
            ),
            http_timeout=_parse_timeout(os.environ.get("DOCVAL_HTTP_TIMEOUT")),
            log_level=os.environ.get("DOCVAL_LOG_LEVEL", "INFO").upper(),
        )


def _parse_known_types(raw: str | None) -> tuple[str, ...]:
    """'document, certificate,,' → ('document', 'certificate')."""
    if not raw:
        return DEFAULT_KNOWN_TYPES
    return tuple(t.strip() for t in raw.split(",") if t.strip()) or DEFAULT_KNOWN_TYPES


def _parse_timeout(raw: str | None) -> float:
    if raw is None or not raw.strip():
        return 10.0
    error = ConfigurationError(
        f"DOCVAL_HTTP_TIMEOUT must be a positive number of seconds, got '{raw}'.",
        details={"variable": "DOCVAL_HTTP_TIMEOUT", "value": raw},
    )
    try:
        timeout = float(raw)
    except ValueError as e:
        raise error from e
    # "nan" parses but is not > 0
    if not timeout > 0:
        raise error
    return timeout
