"""Normalization of raw tag format input.

The ``--tag-format`` option (and the ``tag_format`` config key) accept:

- a single pattern: ``"X.X"`` → ``["X.X"]``
- a JSON array: ``'["*.*.*", "*.*"]'`` → ``["*.*.*", "*.*"]``
- a comma-separated list: ``"*.*.*,*.*"`` → ``["*.*.*", "*.*"]``

Blank input means "no filtering" and yields ``None``; an empty list is
never returned. JSON detection wins over comma splitting, so commas inside
JSON strings are preserved.
"""

from __future__ import annotations

import json
from typing import Any, List, Optional, Sequence, Union

from taginfo.exceptions import FormatParseError

__all__ = ["parse_tag_format", "normalize_tag_format"]


def parse_tag_format(raw: Optional[str]) -> Optional[List[str]]:
    """Parse a raw tag format string into an ordered pattern list.

    Args:
        raw: User input, possibly ``None``.

    Returns:
        The patterns in the order they should be tried, or ``None`` when
        ``raw`` is empty or whitespace.

    Raises:
        FormatParseError: Malformed JSON, a JSON value that is not an
            array, or input that contains no non-empty pattern.
    """
    if raw is None or not raw.strip():
        return None

    trimmed = raw.strip()

    if trimmed.startswith("[") and trimmed.endswith("]"):
        return _parse_json_array(trimmed)

    if "," in trimmed:
        patterns = [part.strip() for part in trimmed.split(",")]
        patterns = [part for part in patterns if part]
        if not patterns:
            raise FormatParseError(
                "Comma-separated tag_format must contain at least one non-empty pattern",
                raw_input=raw,
            )
        return patterns

    return [trimmed]


def normalize_tag_format(value: Union[None, str, Sequence[Any]]) -> Optional[List[str]]:
    """Normalize a config value that may already be a list.

    TOML configuration can hold ``tag_format`` either as a string (parsed
    with :func:`parse_tag_format`) or as an array of strings.
    """
    if value is None or isinstance(value, str):
        return parse_tag_format(value)
    return _clean_elements(list(value), raw=repr(value))


def _parse_json_array(text: str) -> List[str]:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FormatParseError(
            f"Invalid JSON array format for tag_format: {exc.msg}. "
            "Expected format: '[\"pattern1\", \"pattern2\"]'",
            raw_input=text,
        ) from exc

    if not isinstance(parsed, list):
        raise FormatParseError("JSON input must be an array", raw_input=text)

    return _clean_elements(parsed, raw=text)


def _clean_elements(items: List[Any], *, raw: str) -> List[str]:
    patterns = [_stringify(item).strip() for item in items]
    patterns = [pattern for pattern in patterns if pattern]
    if not patterns:
        raise FormatParseError(
            "JSON array must contain at least one non-empty pattern",
            raw_input=raw,
        )
    return patterns


def _stringify(item: Any) -> str:
    """Spell a decoded JSON value the way JavaScript's ``String()`` does.

    ``1.0`` -> ``"1"``, ``true`` -> ``"true"``, ``[1, [2, 3]]`` -> ``"1,2,3"``.
    """
    if isinstance(item, str):
        return item
    if isinstance(item, bool):
        return "true" if item else "false"
    if item is None:
        return "null"
    if isinstance(item, float) and item.is_integer() and abs(item) < 1e21:
        return str(int(item))
    if isinstance(item, list):
        # null elements of a nested array render as empty strings
        return ",".join("" if element is None else _stringify(element) for element in item)
    if isinstance(item, dict):
        return "[object Object]"
    return str(item)
