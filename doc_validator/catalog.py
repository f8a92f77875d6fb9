"""
Validation type catalog — what can be validated here?

Strategy:
  1. Read the manifest (validation-types.json), a JSON array of types.
  2. If the manifest is missing or unreachable, discover types instead:
     check each configured known category with an injected ``exists``
     capability and describe the ones that are present.

Discovery never probes anything beyond the configured list.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

import httpx
from pydantic import TypeAdapter, ValidationError

from .config import DEFAULT_KNOWN_TYPES, DEFAULT_TYPES_MANIFEST
from .exceptions import (
    NoValidationTypesError,
    RegistryFormatError,
    SourceNotFoundError,
    SourceUnreachableError,
)
from .models import ValidationType
from .registry import fetch_json, is_remote

logger = logging.getLogger(__name__)

_TYPES = TypeAdapter(list[ValidationType])

_ICONS: dict[str, str] = {
    "document": "📄",
    "certificate": "📜",
    "contract": "📋",
    "license": "🔐",
}
_DEFAULT_ICON = "✓"

ExistsCheck = Callable[[str], bool]


# ─── Naming ──────────────────────────────────────────────────────────


def format_type_name(type_id: str) -> str:
    """'user-guide' → 'User Guide Validation'."""
    words = [word[:1].upper() + word[1:] for word in type_id.split("-")]
    return " ".join(words) + " Validation"


def icon_for_type(type_id: str) -> str:
    return _ICONS.get(type_id, _DEFAULT_ICON)


# ─── Existence Checks ────────────────────────────────────────────────


def local_exists(base_dir: Path) -> ExistsCheck:
    """A type exists when ``<base_dir>/<type>/index.html`` is a file."""

    def check(type_id: str) -> bool:
        return (base_dir / type_id / "index.html").is_file()

    return check


def http_exists(base_url: str, client: httpx.Client) -> ExistsCheck:
    """A type exists when ``HEAD <base_url>/<type>/index.html`` succeeds."""
    base = base_url if base_url.endswith("/") else base_url + "/"

    def check(type_id: str) -> bool:
        return client.head(f"{base}{type_id}/index.html").is_success

    return check


def _manifest_base(manifest_source: str) -> str:
    """Directory part of the manifest location (keeps the trailing slash)."""
    return manifest_source[: manifest_source.rfind("/") + 1]


# ─── Catalog ─────────────────────────────────────────────────────────


class ValidationCatalog:
    """Lists validation types from a manifest, or by discovery."""

    def __init__(
        self,
        manifest_source: str | Path | None = None,
        known_types: Iterable[str] = DEFAULT_KNOWN_TYPES,
        exists: ExistsCheck | None = None,
        *,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ):
        self.manifest_source = str(manifest_source or DEFAULT_TYPES_MANIFEST)
        self.known_types = tuple(known_types)
        self.timeout = timeout
        self._client = client
        self._exists = exists

    def load(self) -> list[ValidationType]:
        """Return validation types, falling back to discovery.

        Raises:
            RegistryFormatError: the manifest exists but is malformed.
            RegistryLoadError: the manifest exists but cannot be read, or
                the server answered with an error status other than 404.
            NoValidationTypesError: fallback discovery found nothing.
        """
        try:
            data = fetch_json(
                self.manifest_source, timeout=self.timeout, client=self._client
            )
        except SourceNotFoundError:
            logger.info(
                "%s not found, attempting to discover validation types...",
                self.manifest_source,
            )
            return self.discover()
        except SourceUnreachableError as e:
            logger.warning("Manifest unreachable (%s), discovering instead", e)
            return self.discover()

        if not isinstance(data, list):
            raise RegistryFormatError(
                "Invalid JSON format: validation-types.json must be an array",
                details={"source": self.manifest_source},
            )
        try:
            return _TYPES.validate_python(data)
        except ValidationError as e:
            raise RegistryFormatError(
                f"Invalid validation type in {self.manifest_source}: "
                f"{e.error_count()} error(s)",
                details={"source": self.manifest_source},
            ) from e

    def discover(self) -> list[ValidationType]:
        """Describe every configured known type that ``exists`` confirms."""
        if self._exists is not None:
            return self._discover_with(self._exists)

        if is_remote(self.manifest_source):
            base = _manifest_base(self.manifest_source)
            if self._client is not None:
                return self._discover_with(http_exists(base, self._client))
            with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                return self._discover_with(http_exists(base, client))
        return self._discover_with(local_exists(Path(self.manifest_source).parent))

    def _discover_with(self, exists: ExistsCheck) -> list[ValidationType]:
        discovered: list[ValidationType] = []
        for type_id in self.known_types:
            try:
                present = exists(type_id)
            except (OSError, httpx.HTTPError) as e:
                logger.info("Validation type '%s' not accessible: %s", type_id, e)
                continue
            if not present:
                logger.info("Validation type '%s' not found", type_id)
                continue
            discovered.append(
                ValidationType(
                    id=type_id,
                    name=format_type_name(type_id),
                    description=f"Validate {type_id}s by their validation ID.",
                    path=type_id,
                    icon=icon_for_type(type_id),
                    example_id=None,
                )
            )

        if not discovered:
            raise NoValidationTypesError(
                "No validation types found",
                details={"known_types": list(self.known_types)},
            )
        return discovered
