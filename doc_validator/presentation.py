"""
Presentation helpers: status titles/messages, date display, contact links.

Rendering itself (HTML, terminal colors) lives in the entry points; this
module only decides WHAT to show.
"""

from __future__ import annotations

import re

from .exceptions import (
    ConfigurationError,
    DocumentValidationError,
    RegistryFormatError,
    SourceNotFoundError,
    SourceUnreachableError,
)
from .models import (
    DocumentRecord,
    Latest,
    NoId,
    NotFound,
    Outdated,
    Resolution,
    StatusView,
    Tone,
    parse_timestamp,
)

EXAMPLE_ID = "CNLA78"

_URL_PATTERN = re.compile(r"(https?://\S+|www\.\S+)", re.IGNORECASE)


# ─── Status ──────────────────────────────────────────────────────────


def describe(resolution: Resolution) -> StatusView:
    """Map a resolution state to its tone, title and message."""
    if isinstance(resolution, NoId):
        return StatusView(
            tone=Tone.GRAY,
            title="No validation ID provided",
            message=(
                "Please provide a validation ID in the URL query parameter "
                f"(e.g., ?id={EXAMPLE_ID})"
            ),
        )
    if isinstance(resolution, NotFound):
        return StatusView(
            tone=Tone.GRAY,
            title="Document not found",
            message=(
                f'The validation ID "{resolution.validation_id}" could not be '
                "found in our records."
            ),
        )
    if isinstance(resolution, Latest):
        return StatusView(
            tone=Tone.VALID,
            title="Document Valid",
            message="This document is valid and is the latest version.",
        )
    if isinstance(resolution, Outdated):
        return StatusView(
            tone=Tone.INVALID,
            title="Document Not Latest",
            message=(
                "This document is valid but not the latest version. "
                "Please use the latest version for reference."
            ),
        )
    raise TypeError(f"Unknown resolution: {resolution!r}")


def describe_load_error(error: DocumentValidationError) -> StatusView:
    """Status shown when the registry itself could not be loaded."""
    if "status" in error.details:
        message = f"Failed to load documents database. HTTP Status: {error}"
    elif isinstance(error, SourceNotFoundError):
        message = f"Failed to load documents database. {error}"
    elif isinstance(error, SourceUnreachableError):
        message = f"Unable to load documents database. {error}"
    elif isinstance(error, RegistryFormatError):
        message = f"Invalid documents database format. {error}"
    elif isinstance(error, ConfigurationError):
        message = f"Invalid configuration. {error}"
    else:
        message = f"Error: {error}"
    return StatusView(tone=Tone.GRAY, title="Error", message=message)


# ─── Formatting ──────────────────────────────────────────────────────


def format_date(value: str) -> str:
    """'2024-01-01T09:30:00Z' → 'January 1, 2024, 09:30 AM'.

    Unparseable values are shown as-is.
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        return value
    return f"{parsed:%B} {parsed.day}, {parsed:%Y, %I:%M %p}"


def contact_links(text: str | None) -> list[str]:
    """Pull URLs out of free-form contact text; ``www.`` gets ``https://``."""
    if not text:
        return []
    links = []
    for match in _URL_PATTERN.findall(text):
        links.append(f"https://{match}" if match.lower().startswith("www.") else match)
    return links


def record_links(record: DocumentRecord) -> list[str]:
    """Links offered for a record: contact URLs first, else the document url."""
    if record.contact:
        return contact_links(record.contact)
    if record.url:
        return [record.url]
    return []
