"""
Plumbing shared by the taginfo commands and backends.

``logger`` and ``console`` split output between log records and user
facing lines, ``http`` is the transport of the platform backends and
``actions`` writes step outputs when running inside GitHub Actions.
"""

from __future__ import annotations

from taginfo.utils.logger import (
    get_logger,
    mask_secret,
    setup_logging,
)
from taginfo.utils.console import (
    colorize_strategy,
    print_error,
    print_fields,
    print_info,
    print_success,
    print_warning,
    reconfigure_console,
)
from taginfo.utils.http import HTTPClient
from taginfo.utils.actions import write_outputs

__all__ = [
    "HTTPClient",
    "colorize_strategy",
    "get_logger",
    "mask_secret",
    "print_error",
    "print_fields",
    "print_info",
    "print_success",
    "print_warning",
    "reconfigure_console",
    "setup_logging",
    "write_outputs",
]
