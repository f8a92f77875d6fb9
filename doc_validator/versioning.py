"""
Dotted version comparison.

Versions are compared segment by segment as integers, never as strings:
"1.10.0" is newer than "1.2.0". The shorter version is padded with zeros,
so "1.0" and "1.0.0" are the same version.

A segment is a non-negative integer, optionally written with a leading "+"
("+2" is 2). Lenient mode (the default) turns any other segment, including
a negative one such as "-1", into 0. Strict mode rejects it with
MalformedVersionError.
"""

from __future__ import annotations

import re
from itertools import zip_longest

from .exceptions import MalformedVersionError

_SEGMENT = re.compile(r"\s*\+?(\d+)\s*")


def parse_version(version: str, strict: bool = False) -> tuple[int, ...]:
    """Split a dotted version into integer segments.

    Examples:
        "1.2.3"  → (1, 2, 3)
        "2"      → (2,)
        "1.x.3"  → (1, 0, 3)       (lenient)
        "1.x.3"  → MalformedVersionError  (strict)
    """
    segments: list[int] = []
    for position, raw in enumerate(version.split(".")):
        match = _SEGMENT.fullmatch(raw)
        if match:
            segments.append(int(match.group(1)))
        elif strict:
            raise MalformedVersionError(
                f"Version '{version}' has a non-numeric segment '{raw}'.",
                details={"version": version, "segment": raw, "position": position},
            )
        else:
            segments.append(0)
    return tuple(segments)


def compare_versions(a: str, b: str, strict: bool = False) -> int:
    """Return -1, 0 or 1 as version ``a`` is older, equal to, or newer than ``b``."""
    for left, right in zip_longest(
        parse_version(a, strict), parse_version(b, strict), fillvalue=0
    ):
        if left < right:
            return -1
        if left > right:
            return 1
    return 0


def is_well_formed(version: str) -> bool:
    """True when every segment of ``version`` is a non-negative integer."""
    try:
        parse_version(version, strict=True)
    except MalformedVersionError:
        return False
    return True
