"""
Logging for taginfo.

Every module logs through ``get_logger("resolver")`` and friends into
the ``taginfo`` hierarchy. Nothing is printed until :func:`setup_logging`
installs the one stderr handler (the CLI does this from ``-v``); before
that a ``NullHandler`` keeps the package quiet when used as a library.

API tokens reach the process through options and environment variables
and could leak through request URLs or exception text. Register them with
:func:`mask_secret`; the installed handler replaces them with ``***`` in
every formatted line, tracebacks included.
"""

from __future__ import annotations

import os
import sys
import logging
import threading
from typing import IO, Any, Optional, Set

from taginfo.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

ROOT_LOGGER_NAME = "taginfo"
SECRET_PLACEHOLDER = "***"

_LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}
_RESET = "\033[0m"

_lock = threading.Lock()
_secrets: Set[str] = set()


# ---------------------------------------------------------------------------
# Secrets
# ---------------------------------------------------------------------------


def mask_secret(value: Optional[str]) -> None:
    """Register a value that must never appear in log output.

    Args:
        value: Secret to mask. Empty values are ignored.
    """
    if value:
        with _lock:
            _secrets.add(value)


def mask_text(text: str) -> str:
    """Return ``text`` with every registered secret replaced."""
    # longest first; one secret may contain another
    for secret in sorted(_secrets, key=len, reverse=True):
        text = text.replace(secret, SECRET_PLACEHOLDER)
    return text


def clear_secrets() -> None:
    with _lock:
        _secrets.clear()


class SecretMaskingFilter(logging.Filter):
    """Rewrite a record's message with registered secrets masked.

    Formatting the arguments into ``msg`` means handlers further down see
    the masked text too.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if _secrets:
            message = record.getMessage()
            masked = mask_text(message)
            if masked != message:
                record.msg = masked
                record.args = None
        return True


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def stream_wants_color(stream: Any) -> bool:
    """Return True if ANSI colors should be written to ``stream``.

    ``NO_COLOR`` and ``CI`` always win; otherwise only terminals get color.
    """
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return bool(stream.isatty())
    except (AttributeError, OSError, ValueError):
        return False


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name and masks secrets.

    Args:
        fmt: ``%``-style format string.
        datefmt: Format for ``%(asctime)s``.
        use_color: Wrap the level name in ANSI color codes.
    """

    def __init__(
        self,
        fmt: str,
        *,
        datefmt: Optional[str] = None,
        use_color: bool = False,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelno) if self.use_color else None
        if color:
            # other handlers must still see the plain level name
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{_RESET}"
        return mask_text(super().format(record))


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def setup_logging(
    *,
    level: int = logging.INFO,
    verbose: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """Send taginfo log records to ``stream`` (stderr by default).

    Calling it again replaces the previous handler, so the CLI can apply
    ``-v`` after import-time defaults.

    Args:
        level: Minimum level, e.g. ``logging.INFO``.
        verbose: Use the format with timestamps and logger names.
        stream: Destination; defaults to ``sys.stderr``.
    """
    target = stream or sys.stderr
    handler = logging.StreamHandler(target)
    handler.setLevel(level)
    handler.addFilter(SecretMaskingFilter())
    handler.setFormatter(
        ColoredFormatter(
            LOG_VERBOSE_FORMAT if verbose else LOG_DEFAULT_FORMAT,
            datefmt=LOG_DATE_FORMAT,
            use_color=stream_wants_color(target),
        )
    )

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    with _lock:
        root_logger.handlers.clear()
        root_logger.addHandler(handler)
        root_logger.setLevel(level)
        # records stop at the taginfo handler
        root_logger.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger in the ``taginfo`` hierarchy.

    Args:
        name: Relative (``"sources.github"``) or absolute
            (``"taginfo.sources.github"``) name; ``None`` for the root.
    """
    if not name or name == ROOT_LOGGER_NAME:
        full_name = ROOT_LOGGER_NAME
    elif name.startswith(ROOT_LOGGER_NAME + "."):
        full_name = name
    else:
        full_name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(full_name)
    parent = logger.parent
    if not logger.handlers and not (parent and parent.handlers):
        logger.addHandler(logging.NullHandler())
    return logger
