"""
Pydantic models for registry data and resolution results.

Registry records arrive as camelCase JSON (``documentId``, ``validationId``);
the models expose snake_case attributes and accept either spelling. Records
are frozen: nothing downstream may mutate the set it was handed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


_CAMEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
    extra="ignore",
)


# ─── Tone ───────────────────────────────────────────────────────────


class Tone(str, Enum):
    """Visual state of a validation result."""

    VALID = "VALID"  # Latest version
    INVALID = "INVALID"  # Valid but superseded
    GRAY = "GRAY"  # No id, not found, or load error


# ─── Registry Record ────────────────────────────────────────────────


class DocumentRecord(BaseModel):
    """One version of a document, as listed in the registry."""

    model_config = _CAMEL_CONFIG

    document_id: str  # Lineage key, shared by every version
    validation_id: str  # Unique per record; the public lookup key
    version: str  # Dotted numeric, e.g. "1.0.0"
    date: str  # ISO-8601 timestamp
    document_name: Optional[str] = None
    url: Optional[str] = None
    contact: Optional[str] = None

    @property
    def timestamp(self) -> datetime | None:
        """``date`` as an aware datetime, or None when it cannot be parsed."""
        return parse_timestamp(self.date)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 string. Naive values are taken as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ─── Catalog Entry ──────────────────────────────────────────────────


class ValidationType(BaseModel):
    """A validation category listed on the index."""

    model_config = _CAMEL_CONFIG

    id: str
    name: str
    description: str = ""
    path: str
    icon: str = "✓"
    example_id: Optional[str] = None


# ─── Resolution States ──────────────────────────────────────────────


class NoId(BaseModel):
    """No validation id was supplied."""

    model_config = ConfigDict(frozen=True)

    state: Literal["no_id"] = "no_id"


class NotFound(BaseModel):
    """The id matched no record."""

    model_config = ConfigDict(frozen=True)

    state: Literal["not_found"] = "not_found"
    validation_id: str


class Latest(BaseModel):
    """The record is the newest version of its lineage."""

    model_config = ConfigDict(frozen=True)

    state: Literal["latest"] = "latest"
    record: DocumentRecord


class Outdated(BaseModel):
    """The record exists but a newer version supersedes it."""

    model_config = ConfigDict(frozen=True)

    state: Literal["outdated"] = "outdated"
    record: DocumentRecord
    latest: DocumentRecord


Resolution = Annotated[
    Union[NoId, NotFound, Latest, Outdated],
    Field(discriminator="state"),
]


# ─── Status View / Report ───────────────────────────────────────────


class StatusView(BaseModel):
    """What the presentation layer shows for a resolution."""

    tone: Tone
    title: str
    message: str


class ValidationReport(BaseModel):
    """The final output of the validation pipeline."""

    validation_id: Optional[str] = None
    resolution: Resolution
    status: StatusView
    registry_size: int = 0
