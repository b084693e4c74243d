"""
Terminal output for taginfo commands.

Two rich consoles are kept: results (tables, ``key=value`` lines) go to
stdout, status lines go to stderr. ``taginfo latest | xargs git checkout``
therefore only ever sees the tag name.

Status helpers treat their message as plain text, because error messages
routinely contain user input such as ``[0-9]+`` patterns. Only
:func:`print_info` accepts rich markup.
"""

from __future__ import annotations

import sys
import threading
from typing import Any, Dict, Mapping, Optional

from rich.text import Text
from rich.table import Table
from rich.markup import escape
from rich.theme import Theme
from rich.console import Console

from taginfo.utils.logger import stream_wants_color

TAGINFO_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "field": "bold cyan",
    }
)

_STRATEGY_COLORS = {
    "semver": "green",
    "date": "yellow",
    "alphabetical": "red",
}

_consoles: Dict[str, Console] = {}
_console_lock = threading.Lock()


def _console_for(name: str) -> Console:
    console = _consoles.get(name)
    if console is None:
        with _console_lock:
            console = _consoles.get(name)
            if console is None:
                stderr = name == "stderr"
                use_color = stream_wants_color(sys.stderr if stderr else sys.stdout)
                console = Console(
                    theme=TAGINFO_THEME,
                    stderr=stderr,
                    no_color=not use_color,
                    highlight=False,
                )
                _consoles[name] = console
    return console


def _get_console() -> Console:
    """Console for command results (stdout)."""
    return _console_for("stdout")


def _get_status_console() -> Console:
    """Console for status lines (stderr)."""
    return _console_for("stderr")


def reconfigure_console() -> None:
    """Forget both consoles so the next call re-reads ``NO_COLOR`` and the streams."""
    with _console_lock:
        _consoles.clear()


# ---------------------------------------------------------------------------
# Status lines (stderr)
# ---------------------------------------------------------------------------


def _status(prefix: str, text: str, style: str) -> None:
    _get_status_console().print(f"{escape(prefix)} {text}", style=style)


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    _status(prefix, escape(message), "success")


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _status(prefix, escape(message), "error")


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _status(prefix, escape(message), "warning")


def print_info(message: str, *, prefix: str = "[INFO]") -> None:
    """Print a note; ``message`` may contain rich markup."""
    _status(prefix, message, "info")


def colorize_strategy(strategy: str) -> str:
    """Wrap a resolution strategy name in its markup color."""
    color = _STRATEGY_COLORS.get(strategy.lower())
    return f"[{color}]{strategy}[/{color}]" if color else strategy


# ---------------------------------------------------------------------------
# Results (stdout)
# ---------------------------------------------------------------------------


def print_fields(fields: Mapping[str, Any], *, title: Optional[str] = None) -> None:
    """Print one record as a Field/Value table, e.g. the outputs of a tag.

    Keys and values are shown as plain text; nothing is printed for an
    empty mapping.
    """
    if not fields:
        return

    table = Table(title=escape(title) if title else None, header_style="bold")
    table.add_column("Field", style="field", overflow="fold")
    table.add_column("Value", overflow="fold")
    for key, value in fields.items():
        table.add_row(Text(str(key)), Text(str(value)))

    _get_console().print(table)
