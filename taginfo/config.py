"""Settings file support.

Settings live in the ``[taginfo]`` table of ``taginfo.toml`` or in the
``[tool.taginfo]`` table of ``pyproject.toml``. ``--config`` (or
``TAGINFO_CONFIG``) names a file explicitly; otherwise the working
directory is searched, ``taginfo.toml`` first. Command line options
override whatever the file sets.

Example (``taginfo.toml``)::

    [taginfo]
    tag_format = ["vX.X.X", "X.X.X"]
    kind = "tag"
    timeout = 15
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from taginfo.models.item import ItemKind
from taginfo.exceptions import ConfigError, FormatParseError
from taginfo.core.format_parser import normalize_tag_format
from taginfo.utils.logger import get_logger
from taginfo.constants import DEFAULT_MAX_RETRIES, DEFAULT_MAX_TAGS, DEFAULT_TIMEOUT

logger = get_logger("config")

_SECTION = "taginfo"


@dataclass
class TagInfoConfig:
    """Settings shared by all commands; every field has a default.

    Attributes:
        tag_format: Format patterns tried in order, or ``None`` for all tags.
        kind: Whether commands work on tags or releases.
        ignore_cert_errors: Skip TLS verification for remote platforms.
        timeout: HTTP timeout in seconds.
        max_retries: Extra attempts for failed HTTP requests.
        max_tags: Upper bound for GitHub tag listings.
        source_path: File the settings came from.
    """

    tag_format: Optional[List[str]] = None
    kind: ItemKind = ItemKind.TAG
    ignore_cert_errors: bool = False
    timeout: int = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    max_tags: int = DEFAULT_MAX_TAGS

    source_path: Optional[Path] = field(default=None, repr=False)

    def http_options(self) -> Dict[str, Any]:
        """Keyword arguments for :func:`taginfo.sources.create_client`."""
        return {
            "timeout": self.timeout,
            "max_retries": self.max_retries,
            "max_tags": self.max_tags,
        }

    def to_log_dict(self) -> Dict[str, Any]:
        values = {name: getattr(self, name) for name in _OPTION_PARSERS}
        values["kind"] = self.kind.value
        return values


# ---------------------------------------------------------------------------
# Discovery and loading
# ---------------------------------------------------------------------------


def _section_of(raw: Mapping[str, Any], path: Path) -> Mapping[str, Any]:
    """Return the taginfo table of a parsed file, ``{}`` when absent."""
    if path.name == "pyproject.toml":
        raw = raw.get("tool", {})
    return raw.get(_SECTION, {})


def _pyproject_has_section(path: Path) -> bool:
    # a broken pyproject.toml belongs to someone else
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return _SECTION in raw.get("tool", {})


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Pick the settings file for this run.

    An explicit path must exist. Otherwise ``taginfo.toml`` in the working
    directory is used, then a ``pyproject.toml`` that has a
    ``[tool.taginfo]`` table.

    Raises:
        ConfigError: ``explicit_path`` is not a file.
    """
    if explicit_path is not None:
        if not explicit_path.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        return explicit_path.resolve()

    cwd = Path.cwd()
    candidates = (
        (cwd / "taginfo.toml", Path.is_file),
        (cwd / "pyproject.toml", lambda p: p.is_file() and _pyproject_has_section(p)),
    )
    for candidate, usable in candidates:
        if usable(candidate):
            logger.debug("Discovered settings file %s", candidate)
            return candidate
    return None


def load_config(config_path: Optional[Path] = None) -> TagInfoConfig:
    """Read and validate the settings for this run.

    Args:
        config_path: File to read; discovered when ``None``.

    Returns:
        Settings with defaults for everything the file does not set.

    Raises:
        ConfigError: Unreadable file, invalid TOML or an invalid value.
    """
    path = discover_config_file(config_path)
    if path is None:
        logger.debug("No settings file, using defaults")
        return TagInfoConfig()

    section = _section_of(_read_toml(path), path)
    config = _parse_section(section, config_path=str(path)) if section else TagInfoConfig()
    config.source_path = path
    logger.info("Settings loaded from %s", path)
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path.name}: {exc}", config_path=str(path)) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}", config_path=str(path)
        ) from exc


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _parse_section(section: Mapping[str, Any], *, config_path: str) -> TagInfoConfig:
    """Build settings from a taginfo table; unknown keys and bad values raise."""
    unknown = sorted(set(section) - set(_OPTION_PARSERS))
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(unknown)}",
            config_path=config_path,
        )

    config = TagInfoConfig()
    for name, value in section.items():
        try:
            setattr(config, name, _OPTION_PARSERS[name](name, value))
        except ValueError as exc:
            raise ConfigError(str(exc), config_path=config_path, option=name) from None
    return config


def _parse_tag_format(name: str, value: Any) -> List[str]:
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        pass
    elif not isinstance(value, str):
        raise ValueError(f"{name} must be a string or a list of strings")
    try:
        return normalize_tag_format(value)
    except FormatParseError as exc:
        raise ValueError(f"Invalid {name}: {exc.message}") from None


def _parse_kind(name: str, value: Any) -> ItemKind:
    try:
        return ItemKind(value)
    except ValueError:
        raise ValueError(f"{name} must be 'tag' or 'release', got {value!r}") from None


def _parse_flag(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be a boolean, got {type(value).__name__}")
    return value


def _int_parser(minimum: int) -> Callable[[str, Any], int]:
    def parse(name: str, value: Any) -> int:
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
        if value < minimum:
            raise ValueError(f"{name} must be at least {minimum}, got {value}")
        return value

    return parse


_OPTION_PARSERS: Dict[str, Callable[[str, Any], Any]] = {
    "tag_format": _parse_tag_format,
    "kind": _parse_kind,
    "ignore_cert_errors": _parse_flag,
    "timeout": _int_parser(1),
    "max_retries": _int_parser(0),
    "max_tags": _int_parser(1),
}
