"""
GitHub Actions integration helpers.

Writes step outputs to the file named by ``$GITHUB_OUTPUT`` using the
``name=value`` form for single-line values and the heredoc delimiter form
for multi-line values (tag messages, release notes).
"""

from __future__ import annotations

import os
import uuid
from pathlib import Path
from typing import Mapping, Optional

from taginfo.constants import ENV_GITHUB_OUTPUT
from taginfo.exceptions import ConfigError
from taginfo.utils.logger import get_logger

logger = get_logger("actions")


def format_output(name: str, value: str) -> str:
    """Render one output entry in GitHub's file command syntax."""
    if "\n" not in value and "\r" not in value:
        return f"{name}={value}\n"

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    while delimiter in value:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def write_outputs(
    outputs: Mapping[str, str],
    *,
    path: Optional[Path] = None,
) -> Path:
    """Append ``outputs`` to the GitHub Actions output file.

    Args:
        outputs: Output names mapped to string values.
        path: Explicit output file. Defaults to ``$GITHUB_OUTPUT``.

    Returns:
        The file that was written.

    Raises:
        ConfigError: No output file is configured.
    """
    if path is None:
        env_path = os.environ.get(ENV_GITHUB_OUTPUT)
        if not env_path:
            raise ConfigError(
                f"{ENV_GITHUB_OUTPUT} is not set; not running inside GitHub Actions?",
                option="github_output",
            )
        path = Path(env_path)

    with open(path, "a", encoding="utf-8") as fh:
        for name, value in outputs.items():
            fh.write(format_output(name, value))

    logger.debug("Wrote %d output(s) to %s", len(outputs), path)
    return path
