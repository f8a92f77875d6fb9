"""
Lineage resolution — which version of a document is current?

Every function here is pure over the record sequence it is given:
  - No network, no file access, no caching.
  - No mutation of the records.
  - Negative outcomes are return values (None, False, a resolution state),
    never exceptions.

Ordering rule for a lineage (all records sharing a document_id):
  1. Higher version wins (numeric, segment by segment).
  2. Same version → later date wins.
  3. Same version and date → the record listed first wins.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from functools import cmp_to_key

from .models import DocumentRecord, Latest, NoId, NotFound, Outdated, Resolution
from .versioning import compare_versions

logger = logging.getLogger(__name__)

# Records with an unparseable date sort before every real one.
_EPOCH_FLOOR = datetime.min.replace(tzinfo=timezone.utc)


# ─── Lookup ──────────────────────────────────────────────────────────


def find_by_validation_id(
    records: Sequence[DocumentRecord], validation_id: str | None
) -> DocumentRecord | None:
    """Return the first record whose validation_id matches exactly."""
    if not validation_id:
        return None
    for record in records:
        if record.validation_id == validation_id:
            return record
    return None


# ─── Lineage ─────────────────────────────────────────────────────────


def _timestamp_or_floor(record: DocumentRecord) -> datetime:
    return record.timestamp or _EPOCH_FLOOR


def _compare_records(a: DocumentRecord, b: DocumentRecord) -> int:
    """Order two lineage members: version first, then date."""
    by_version = compare_versions(a.version, b.version)
    if by_version != 0:
        return by_version

    a_time, b_time = _timestamp_or_floor(a), _timestamp_or_floor(b)
    if a_time < b_time:
        return -1
    if a_time > b_time:
        return 1
    return 0


def lineage(
    records: Sequence[DocumentRecord], document_id: str
) -> list[DocumentRecord]:
    """All versions of ``document_id``, in registry order."""
    return [record for record in records if record.document_id == document_id]


def latest_in_lineage(
    records: Sequence[DocumentRecord], document_id: str
) -> DocumentRecord | None:
    """Return the newest version of ``document_id``, or None if it has none."""
    members = lineage(records, document_id)
    if not members:
        return None
    # max() keeps the first of several equal maxima.
    return max(members, key=cmp_to_key(_compare_records))


def is_latest(records: Sequence[DocumentRecord], record: DocumentRecord) -> bool:
    """True when ``record`` is at least as new as its lineage's latest member.

    A record equal in version to the latest counts as latest when its date is
    the same or later, so the latest record is always its own latest.
    """
    latest = latest_in_lineage(records, record.document_id)
    if latest is None:
        logger.warning(
            "Record %s is not a member of its own lineage %s",
            record.validation_id,
            record.document_id,
        )
        return False

    by_version = compare_versions(record.version, latest.version)
    if by_version != 0:
        return by_version > 0
    return _timestamp_or_floor(record) >= _timestamp_or_floor(latest)


# ─── Orchestrator ────────────────────────────────────────────────────


def resolve(
    records: Sequence[DocumentRecord], validation_id: str | None
) -> Resolution:
    """Map a raw query id to exactly one resolution state."""
    validation_id = (validation_id or "").strip()
    if not validation_id:
        return NoId()

    record = find_by_validation_id(records, validation_id)
    if record is None:
        return NotFound(validation_id=validation_id)

    if is_latest(records, record):
        return Latest(record=record)

    latest = latest_in_lineage(records, record.document_id)
    assert latest is not None  # record itself is a lineage member
    return Outdated(record=record, latest=latest)
