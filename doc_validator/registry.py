"""
Registry loading — local JSON file or remote JSON over HTTP.

The registry is a top-level JSON array of document records. It is read
fresh for every query; nothing is cached between calls.

Failure mapping:
  - Missing file / HTTP 404          → SourceNotFoundError
  - Network failure                  → SourceUnreachableError
  - Other HTTP status / read error   → RegistryLoadError
  - Bad JSON / not an array / bad record → RegistryFormatError
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from .exceptions import (
    RegistryFormatError,
    RegistryLoadError,
    SourceNotFoundError,
    SourceUnreachableError,
)
from .models import DocumentRecord
from .versioning import is_well_formed

logger = logging.getLogger(__name__)

_RECORDS = TypeAdapter(list[DocumentRecord])


# ─── Source Helpers ──────────────────────────────────────────────────


def is_remote(source: str | Path) -> bool:
    """True for http:// and https:// sources."""
    return str(source).lower().startswith(("http://", "https://"))


def fetch_json(
    source: str | Path,
    *,
    timeout: float = 10.0,
    client: httpx.Client | None = None,
) -> Any:
    """Read and decode a JSON document from a path or URL."""
    text = _fetch_remote(str(source), timeout, client) if is_remote(source) else _read_local(Path(source))
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise RegistryFormatError(
            f"Invalid JSON in {source}: {e.msg} (line {e.lineno})",
            details={"source": str(source), "line": e.lineno, "column": e.colno},
        ) from e


def _read_local(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise SourceNotFoundError(
            f"File not found: {path}", details={"source": str(path)}
        ) from e
    except OSError as e:
        raise RegistryLoadError(
            f"Could not read {path}: {e}", details={"source": str(path)}
        ) from e


def _fetch_remote(url: str, timeout: float, client: httpx.Client | None) -> str:
    owns_client = client is None
    http = client or httpx.Client(timeout=timeout, follow_redirects=True)
    try:
        response = http.get(url)
    except httpx.TransportError as e:
        raise SourceUnreachableError(
            f"Failed to fetch {url}: {e}", details={"source": url}
        ) from e
    finally:
        if owns_client:
            http.close()

    if response.status_code == 404:
        raise SourceNotFoundError(
            f"HTTP error! status: 404 ({url})",
            details={"source": url, "status": 404},
        )
    if response.is_error:
        raise RegistryLoadError(
            f"HTTP error! status: {response.status_code} ({url})",
            details={"source": url, "status": response.status_code},
        )
    return response.text


# ─── Public API ──────────────────────────────────────────────────────


def parse_records(data: Any, source: str = "<memory>") -> list[DocumentRecord]:
    """Validate decoded JSON as a list of document records."""
    if not isinstance(data, list):
        raise RegistryFormatError(
            "Invalid JSON format: the document registry must be an array",
            details={"source": source, "type": type(data).__name__},
        )
    try:
        return _RECORDS.validate_python(data)
    except ValidationError as e:
        raise RegistryFormatError(
            f"Invalid document record in {source}: {e.error_count()} error(s)",
            details={"source": source, "errors": e.errors(include_url=False)},
        ) from e


def load_registry(
    source: str | Path,
    *,
    strict_versions: bool = False,
    timeout: float = 10.0,
    client: httpx.Client | None = None,
) -> list[DocumentRecord]:
    """Load the document registry from ``source``.

    Args:
        source: Path to documents.json, or an http(s) URL.
        strict_versions: Reject records whose version has a non-numeric segment.
        timeout: Seconds to wait for a remote source.
        client: Optional httpx client (tests inject a mock transport here).
    """
    logger.info("Loading document registry from %s", source)
    records = parse_records(
        fetch_json(source, timeout=timeout, client=client), str(source)
    )

    if strict_versions:
        for record in records:
            if not is_well_formed(record.version):
                raise RegistryFormatError(
                    f"Record '{record.validation_id}' has a malformed version "
                    f"'{record.version}'.",
                    details={
                        "source": str(source),
                        "validation_id": record.validation_id,
                        "version": record.version,
                    },
                )

    logger.info("Loaded %d document record(s)", len(records))
    return records
