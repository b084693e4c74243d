"""Semantic version parsing and ordering for tag names.

Tags such as ``v1.2.3``, ``1.2.3-beta.1`` or ``V10.20.30+build.5`` are
recognised; anything else (``latest``, ``3.23-bae0df8a-ls3``, ``1.2``) is
not a semantic version.

Ordering deliberately departs from SemVer 2.0 in two places, and callers
may rely on both:

* build metadata is parsed but never affects ordering;
* two prerelease strings are compared as plain strings
  (``"alpha.10" < "alpha.9"``), not segment by segment.

Typical usage::

    >>> sort_tags_by_semver(["1.0.0", "v2.0.0", "1.5.0"])
    ['v2.0.0', '1.5.0', '1.0.0']
"""

from __future__ import annotations

import re
from functools import cmp_to_key
from dataclasses import dataclass
from typing import Iterable, List, Optional

__all__ = [
    "SemverParts",
    "parse_semver",
    "is_semver",
    "compare_semver",
    "sort_tags_by_semver",
]

_SEMVER_RE = re.compile(
    r"^(\d+)\.(\d+)\.(\d+)(?:-([0-9A-Za-z.-]+))?(?:\+([0-9A-Za-z.-]+))?$",
    re.ASCII,
)
_V_PREFIX_RE = re.compile(r"^v", re.IGNORECASE)


@dataclass(frozen=True)
class SemverParts:
    """Components of a parsed semantic version."""

    major: int
    minor: int
    patch: int
    prerelease: Optional[str] = None
    build: Optional[str] = None


def parse_semver(tag_name: str) -> Optional[SemverParts]:
    """Parse ``tag_name`` into :class:`SemverParts`.

    One leading ``v`` or ``V`` is stripped before matching.

    Returns:
        The parsed parts, or ``None`` when the name is not a semantic
        version.
    """
    cleaned = _V_PREFIX_RE.sub("", tag_name, count=1)
    match = _SEMVER_RE.match(cleaned)
    if match is None or match.end() != len(cleaned):
        return None

    major, minor, patch, prerelease, build = match.groups()
    return SemverParts(
        major=int(major),
        minor=int(minor),
        patch=int(patch),
        prerelease=prerelease,
        build=build,
    )


def is_semver(tag_name: str) -> bool:
    """Return True if ``tag_name`` is a semantic version."""
    return parse_semver(tag_name) is not None


def compare_semver(tag1: str, tag2: str) -> int:
    """Compare two tags by semantic version.

    Returns ``-1``, ``0`` or ``1``. When either tag is not a semantic
    version the pair compares equal, so a stable sort keeps such tags in
    their original relative order.
    """
    a = parse_semver(tag1)
    b = parse_semver(tag2)

    if a is None or b is None:
        return 0

    for left, right in (
        (a.major, b.major),
        (a.minor, b.minor),
        (a.patch, b.patch),
    ):
        if left != right:
            return 1 if left > right else -1

    if a.prerelease and b.prerelease:
        if a.prerelease < b.prerelease:
            return -1
        if a.prerelease > b.prerelease:
            return 1
        return 0

    # A release outranks any prerelease of the same version
    if a.prerelease and not b.prerelease:
        return -1
    if b.prerelease and not a.prerelease:
        return 1

    return 0


def sort_tags_by_semver(tags: Iterable[str]) -> List[str]:
    """Return ``tags`` sorted highest version first.

    The sort is stable: tags that compare equal, including all
    non-semver tags, keep their input order.
    """
    return sorted(tags, key=cmp_to_key(lambda a, b: compare_semver(b, a)))
