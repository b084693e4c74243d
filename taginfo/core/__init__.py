"""
Core functionality exports for taginfo.

Importing from here keeps user-facing imports short:

    from taginfo.core import LatestResolver, parse_tag_format
"""

from __future__ import annotations

from taginfo.core.semver import (
    SemverParts,
    compare_semver,
    is_semver,
    parse_semver,
    sort_tags_by_semver,
)
from taginfo.core.format_matcher import (
    FormatPattern,
    PatternKind,
    classify_pattern,
    filter_tags_by_format,
    match_tag_format,
)
from taginfo.core.format_parser import normalize_tag_format, parse_tag_format
from taginfo.core.resolver import (
    LatestResolver,
    Resolution,
    ResolutionEvent,
    ResolutionStrategy,
    resolve_latest,
)
from taginfo.core.repo_detector import detect_repository
from taginfo.core.lookup import LookupResult, TagLookup

__all__ = [
    "SemverParts",
    "parse_semver",
    "is_semver",
    "compare_semver",
    "sort_tags_by_semver",
    "FormatPattern",
    "PatternKind",
    "classify_pattern",
    "match_tag_format",
    "filter_tags_by_format",
    "parse_tag_format",
    "normalize_tag_format",
    "LatestResolver",
    "Resolution",
    "ResolutionEvent",
    "ResolutionStrategy",
    "resolve_latest",
    "detect_repository",
    "TagLookup",
    "LookupResult",
]
