"""
Main validation pipeline — orchestrates one lookup.

Flow:
  ┌──────────────┐
  │  Query id    │
  └──────┬───────┘
         │
  ┌──────▼───────┐
  │   Registry   │   ← documents.json (file or URL), loaded fresh
  └──────┬───────┘
         │
  ┌──────▼───────┐
  │   Resolver   │   ← lookup → lineage → latest?
  └──────┬───────┘
         │
  ┌──────▼───────┐
  │    Report    │   ← resolution + status view
  └──────────────┘

Design principles:
  - The resolver is pure; all I/O happens in the registry step.
  - A partially loaded registry is never resolved against: load errors
    propagate before resolution starts.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

import httpx

from .config import DEFAULT_REGISTRY
from .models import DocumentRecord, ValidationReport
from .presentation import describe
from .registry import load_registry
from .resolver import resolve

logger = logging.getLogger(__name__)


class DocumentValidationPipeline:
    """Orchestrates the document validation workflow.

    Usage:
        pipeline = DocumentValidationPipeline("documents.json")
        report = pipeline.run("CNLA78")
        if report.resolution.state == "outdated":
            print(report.resolution.latest.validation_id)
    """

    def __init__(
        self,
        registry_source: str | Path | None = None,
        *,
        records: Sequence[DocumentRecord] | None = None,
        strict_versions: bool = False,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ):
        self.registry_source = str(registry_source or DEFAULT_REGISTRY)
        self.strict_versions = strict_versions
        self.timeout = timeout
        self._client = client
        self._records = tuple(records) if records is not None else None

    def load(self) -> list[DocumentRecord]:
        """Return the record set for one query."""
        if self._records is not None:
            return list(self._records)
        return load_registry(
            self.registry_source,
            strict_versions=self.strict_versions,
            timeout=self.timeout,
            client=self._client,
        )

    def run(self, validation_id: str | None) -> ValidationReport:
        """Resolve ``validation_id`` against a freshly loaded registry.

        Raises:
            RegistryLoadError: the registry could not be fetched.
            RegistryFormatError: the registry content is malformed.
        """
        records = self.load()
        resolution = resolve(records, validation_id)
        logger.info("Resolved %r → %s", validation_id, resolution.state)

        return ValidationReport(
            validation_id=(validation_id or "").strip() or None,
            resolution=resolution,
            status=describe(resolution),
            registry_size=len(records),
        )
