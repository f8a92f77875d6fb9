#!/usr/bin/env python3
"""
Document Validator — Entry Point
================================

Resolves a validation ID against the document registry and prints the result.

Usage:
    python main.py CNLA78                           # Uses DOCVAL_REGISTRY or ./documents.json
    python main.py CNLA78 --registry https://host/document/documents.json
    python main.py --types                          # List validation types

Exit codes: 0 latest, 1 outdated / not found / no id, 2 load error.
"""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

from doc_validator.catalog import ValidationCatalog
from doc_validator.config import Settings
from doc_validator.exceptions import ConfigurationError, DocumentValidationError
from doc_validator.models import (
    DocumentRecord,
    Latest,
    Outdated,
    StatusView,
    Tone,
    ValidationReport,
)
from doc_validator.pipeline import DocumentValidationPipeline
from doc_validator.presentation import describe_load_error, format_date, record_links

load_dotenv()


# ─── ANSI Color Constants ───────────────────────────────────────────

_RED = "\033[91m"
_YELLOW = "\033[93m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 72

_TONE_COLORS = {Tone.VALID: _GREEN, Tone.INVALID: _YELLOW, Tone.GRAY: _DIM}


# ─── Pretty Printer Helpers ─────────────────────────────────────────


def _print_status(status: StatusView) -> None:
    color = _TONE_COLORS[status.tone]
    print(f"  {color}{_BOLD}{status.title}{_RESET}")
    print(f"  {status.message}")


def _print_record(record: DocumentRecord, show_links: bool = True) -> None:
    """Print the document detail block."""
    print(f"  Name:        {record.document_name or ''}")
    print(f"  Document:    {record.document_id}")
    print(f"  Validation:  {_BOLD}{record.validation_id}{_RESET}")
    print(f"  Version:     {record.version}")
    print(f"  Date:        {format_date(record.date)}")
    if show_links:
        for link in record_links(record):
            print(f"  Link:        {_CYAN}{link}{_RESET}")


def _print_error(error: DocumentValidationError) -> None:
    status = describe_load_error(error)
    print(f"\n  {_RED}{_BOLD}{status.title}{_RESET} [{error.code}]")
    print(f"  {status.message}\n")


def _print_latest(latest: DocumentRecord) -> None:
    print(f"\n  {_YELLOW}{_BOLD}LATEST VERSION{_RESET}")
    print(f"    Validation ID: {_BOLD}{latest.validation_id}{_RESET}")
    print(f"    Version:       {latest.version}")
    print(f"    Date:          {format_date(latest.date)}")


# ─── Pretty Printer ─────────────────────────────────────────────────


def print_report(report: ValidationReport) -> int:
    """Pretty-print a validation report.

    Returns:
        0 if the document is the latest version, 1 otherwise.
    """
    resolution = report.resolution

    print(f"\n{'=' * _WIDTH}")
    print(f"{_BOLD}{_CYAN}  DOCUMENT VALIDATION{_RESET}")
    print(f"{'=' * _WIDTH}")
    _print_status(report.status)

    if isinstance(resolution, Outdated):
        _print_latest(resolution.latest)

    if isinstance(resolution, (Latest, Outdated)):
        print(f"{'─' * _WIDTH}")
        _print_record(resolution.record, show_links=isinstance(resolution, Latest))

    print(f"{'=' * _WIDTH}\n")
    return 0 if isinstance(resolution, Latest) else 1


def print_types(catalog: ValidationCatalog) -> int:
    """List validation types, one per line."""
    for vtype in catalog.load():
        example = f"  {_DIM}e.g. {vtype.example_id}{_RESET}" if vtype.example_id else ""
        print(f"  {vtype.icon}  {_BOLD}{vtype.name}{_RESET}  {_DIM}{vtype.path}/{_RESET}{example}")
        if vtype.description:
            print(f"      {vtype.description}")
    return 0


# ─── Main ────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the lookup and print the result."""
    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        _print_error(e)
        return 2
    logging.basicConfig(level=settings.log_level)

    parser = argparse.ArgumentParser(description="Check whether a document is the latest version.")
    parser.add_argument("id", nargs="?", help="validation ID to look up")
    parser.add_argument("--registry", default=settings.registry_source, help="documents.json path or URL")
    parser.add_argument("--types", action="store_true", help="list validation types and exit")
    args = parser.parse_args(argv)

    try:
        if args.types:
            catalog = ValidationCatalog(
                settings.types_manifest,
                settings.known_types,
                timeout=settings.http_timeout,
            )
            return print_types(catalog)

        pipeline = DocumentValidationPipeline(
            args.registry,
            strict_versions=settings.strict_versions,
            timeout=settings.http_timeout,
        )
        return print_report(pipeline.run(args.id))
    except DocumentValidationError as e:
        _print_error(e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
