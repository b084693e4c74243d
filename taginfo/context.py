"""
Per-invocation state handed from the ``taginfo`` group to its commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from taginfo.config import TagInfoConfig


class TagInfoContext:
    """What the group callback learned before a command runs.

    Attributes:
        config_path: Settings file in use (``--config`` or discovered).
        config: Parsed settings; ``None`` when a command runs standalone.
        verbose: Number of ``-v`` flags.
        color: False after ``--no-color``.
    """

    __slots__ = ("config_path", "config", "verbose", "color")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.config: Optional[TagInfoConfig] = None
        self.verbose = 0
        self.color = True

    def get_config(self) -> TagInfoConfig:
        """Loaded settings, falling back to defaults."""
        if self.config is None:
            self.config = TagInfoConfig()
        return self.config


pass_context = click.make_pass_decorator(TagInfoContext, ensure=True)
