"""Tag format patterns: classification and matching.

A format pattern restricts which tag names take part in "latest"
resolution. Four kinds exist, checked in this order:

1. **simple**: ``X.X``, ``vX.X.X``: each ``X`` is a run of digits.
2. **wildcard**: ``*``, ``*.*``, ``v*.*.*``: each ``*`` is one dot-free
   segment.
3. **regex**: starts with ``^`` or ``/`` or contains one of
   ``()[]{}+?|\\``. Optional ``/.../`` delimiters are removed and the
   expression is anchored at both ends.
4. **literal**: anything else, matched by exact equality.

Besides a full match, tags may match through a *prefix*: ``3.23-bae0df8a``
matches ``X.X`` because its leading numeric run ``3.23`` does. Wildcard
patterns try the prefix first, the other kinds try the full name first.

A pattern is classified once into an immutable :class:`FormatPattern`;
the module-level helpers are thin wrappers around it.

Example::

    >>> filter_tags_by_format(["edge-x", "3.1", "3.2"], "X.X")
    ['3.1', '3.2']
"""

from __future__ import annotations

import re
from enum import Enum
from functools import lru_cache
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple

from taginfo.utils.logger import get_logger

logger = get_logger("format_matcher")

__all__ = [
    "PatternKind",
    "FormatPattern",
    "classify_pattern",
    "is_simple_pattern",
    "is_wildcard_pattern",
    "is_regex_pattern",
    "convert_simple_pattern_to_regex",
    "convert_wildcard_pattern_to_regex",
    "extract_numeric_prefix",
    "extract_wildcard_prefix",
    "match_tag_format",
    "filter_tags_by_format",
    "filter_with_fallback",
]

_SIMPLE_RE = re.compile(r"^v?X(\.X)+$", re.IGNORECASE)
_WILDCARD_RE = re.compile(r"^v?\*(\.\*)*$", re.IGNORECASE)
_REGEX_CHARS_RE = re.compile(r"[()\[\]{}+?|\\]")

_NUMERIC_PREFIX_RE = re.compile(r"^(v?\d+(?:\.\d+)*)", re.ASCII)
_WILDCARD_PREFIX_RE = re.compile(r"^(v?[a-zA-Z0-9]+(?:\.[a-zA-Z0-9]+)+)")


class PatternKind(str, Enum):
    SIMPLE = "simple"
    WILDCARD = "wildcard"
    REGEX = "regex"
    LITERAL = "literal"


@dataclass(frozen=True)
class FormatPattern:
    """A classified format pattern.

    Attributes:
        raw: The pattern as the user wrote it.
        kind: Classification of ``raw``.
        regex: Compiled expression for simple, wildcard and regex patterns.
            ``None`` for literals and for regexes that failed to compile;
            the latter match nothing.
    """

    raw: str
    kind: PatternKind
    regex: Optional[Pattern[str]] = None

    def matches(self, tag_name: str) -> bool:
        """Return True if ``tag_name`` satisfies this pattern."""
        if not self.raw or not tag_name:
            return False

        if self.kind is PatternKind.LITERAL:
            return tag_name == self.raw

        if self.regex is None:
            return False

        if self.kind is PatternKind.WILDCARD:
            prefix = extract_wildcard_prefix(tag_name)
            if prefix and self.regex.search(prefix):
                return True
            return self.regex.search(tag_name) is not None

        if self.regex.search(tag_name):
            return True
        prefix = extract_numeric_prefix(tag_name)
        return bool(prefix) and self.regex.search(prefix) is not None

    def filter(self, tag_names: Iterable[str]) -> List[str]:
        """Return the tags matching this pattern, in input order."""
        return [name for name in tag_names if self.matches(name)]


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def is_simple_pattern(fmt: str) -> bool:
    """Return True for ``X``-placeholder patterns such as ``vX.X.X``."""
    return _SIMPLE_RE.fullmatch(fmt) is not None


def is_wildcard_pattern(fmt: str) -> bool:
    """Return True for ``*``-placeholder patterns such as ``*.*``."""
    return _WILDCARD_RE.fullmatch(fmt) is not None


def is_regex_pattern(fmt: str) -> bool:
    """Return True if ``fmt`` should be treated as a regular expression.

    ``*`` and ``.`` alone do not make a regex; they belong to the wildcard
    and simple syntaxes. Write ``^.*$`` or ``/.*/`` to get regex matching.
    """
    if fmt.startswith("^") or fmt.startswith("/"):
        return True
    return _REGEX_CHARS_RE.search(fmt) is not None


@lru_cache(maxsize=256)
def classify_pattern(fmt: str) -> FormatPattern:
    """Classify ``fmt`` and compile its expression once."""
    if is_simple_pattern(fmt):
        return FormatPattern(fmt, PatternKind.SIMPLE, convert_simple_pattern_to_regex(fmt))

    if is_wildcard_pattern(fmt):
        return FormatPattern(
            fmt, PatternKind.WILDCARD, convert_wildcard_pattern_to_regex(fmt)
        )

    if is_regex_pattern(fmt):
        return FormatPattern(fmt, PatternKind.REGEX, _compile_user_regex(fmt))

    return FormatPattern(fmt, PatternKind.LITERAL)


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def convert_simple_pattern_to_regex(fmt: str) -> Pattern[str]:
    """Convert a simple pattern to an anchored regex.

    ``"X.X"`` becomes ``^\\d+\\.\\d+\\Z``; the ``v`` prefix stays literal and
    case-sensitive.
    """
    parts = []
    for char in fmt:
        if char in "Xx":
            parts.append(r"\d+")
        elif char == ".":
            parts.append(r"\.")
        else:
            parts.append(re.escape(char))
    return re.compile("^" + "".join(parts) + r"\Z", re.ASCII)


def convert_wildcard_pattern_to_regex(fmt: str) -> Pattern[str]:
    """Convert a wildcard pattern to an anchored regex.

    ``"*.*"`` becomes ``^[^.]*\\.[^.]*\\Z``; each ``*`` spans one segment.
    """
    parts = []
    for char in fmt:
        if char == "*":
            parts.append(r"[^.]*")
        else:
            parts.append(re.escape(char))
    return re.compile("^" + "".join(parts) + r"\Z")


def _compile_user_regex(fmt: str) -> Optional[Pattern[str]]:
    """Compile a regex pattern, returning ``None`` if it is invalid."""
    expression = fmt
    if len(expression) >= 2 and expression.startswith("/") and expression.endswith("/"):
        expression = expression[1:-1]

    if not expression.startswith("^"):
        expression = "^" + expression
    expression = _anchor_end(expression)

    try:
        return re.compile(expression)
    except re.error as exc:
        logger.debug("Invalid tag format regex %r: %s", fmt, exc)
        return None


def _anchor_end(expression: str) -> str:
    """End ``expression`` with ``\\Z`` so a trailing newline is not skipped.

    A final unescaped ``$`` is replaced. A final ``\\$`` is a literal dollar
    sign; the expression is then left unanchored at the end.
    """
    if not expression.endswith("$"):
        return expression + r"\Z"
    backslashes = len(expression[:-1]) - len(expression[:-1].rstrip("\\"))
    if backslashes % 2:
        return expression
    return expression[:-1] + r"\Z"


# ---------------------------------------------------------------------------
# Prefix extraction
# ---------------------------------------------------------------------------


def extract_numeric_prefix(tag_name: str) -> str:
    """Return the leading ``v?N(.N)*`` run of ``tag_name``.

    The run is greedy over every numeric segment: ``"10.5.0-rc"`` yields
    ``"10.5.0"``, never ``"10.5"``.
    """
    match = _NUMERIC_PREFIX_RE.match(tag_name)
    return match.group(1) if match else ""


def extract_wildcard_prefix(tag_name: str) -> str:
    """Return the leading dotted alphanumeric run of ``tag_name``.

    At least two segments are required, so ``"edge-e9613ab3"`` has no
    prefix while ``"abc.def-123"`` yields ``"abc.def"``.
    """
    match = _WILDCARD_PREFIX_RE.match(tag_name)
    return match.group(1) if match else ""


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def match_tag_format(tag_name: str, fmt: str) -> bool:
    """Return True if ``tag_name`` matches the format pattern ``fmt``."""
    if not fmt or not tag_name:
        return False
    return classify_pattern(fmt).matches(tag_name)


def filter_tags_by_format(tag_names: Sequence[str], fmt: Optional[str]) -> List[str]:
    """Keep the tags matching ``fmt``; an empty format keeps everything."""
    if not fmt:
        return list(tag_names)
    return classify_pattern(fmt).filter(tag_names)


def filter_with_fallback(
    tag_names: Sequence[str],
    patterns: Sequence[str],
) -> Tuple[Optional[str], List[str]]:
    """Apply ``patterns`` in order until one selects at least one tag.

    Returns:
        ``(pattern, matches)`` for the first pattern with a non-empty
        result, or ``(None, [])`` when every pattern selected nothing.
    """
    for fmt in patterns:
        matches = filter_tags_by_format(tag_names, fmt)
        if matches:
            return fmt, matches
    return None, []
