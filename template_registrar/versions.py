"""Parse and order ``v<digits>`` template version labels."""

from __future__ import annotations

import re
from typing import Union

from .errors import ParseError
from .models.templates import Version

_VERSION_PATTERN = re.compile(r"v([0-9]+)")

VersionLike = Union[Version, str]


def parse_version(label: str) -> Version:
    """Convert a ``v<digits>`` label into a :class:`Version`.

    Signs, whitespace and non-ASCII digits are rejected so that only labels
    produced by the template path grammar are accepted.
    """
    match = _VERSION_PATTERN.fullmatch(label)
    if match is None:
        raise ParseError(
            f"Version label '{label}' is not 'v' followed by digits"
        )
    return Version(number=int(match.group(1), 10), label=label)


def compare_versions(left: VersionLike, right: VersionLike) -> int:
    """Return -1, 0 or 1 comparing ``left`` against ``right``."""
    left_version = _coerce(left)
    right_version = _coerce(right)
    if left_version.number < right_version.number:
        return -1
    if left_version.number > right_version.number:
        return 1
    return 0


def _coerce(value: VersionLike) -> Version:
    if isinstance(value, Version):
        return value
    return parse_version(value)
