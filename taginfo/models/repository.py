"""
Repository configuration model for taginfo.

A :class:`RepoConfig` describes *where* tags live: a local working copy or
a repository on one of the supported hosting platforms.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional


class Platform(str, Enum):
    """Supported git hosting platforms."""

    GITHUB = "github"
    GITEA = "gitea"
    BITBUCKET = "bitbucket"

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]


@dataclass
class RepoConfig:
    """Where to read tags and releases from.

    Attributes:
        type: ``"local"`` for a working copy, ``"remote"`` for a hosted repo.
        platform: Hosting platform (remote only).
        owner: Repository owner or workspace (remote only).
        repo: Repository name (remote only).
        base_url: Instance URL for Gitea or GitHub Enterprise.
        path: Absolute path of the working copy (local only).
        token: API token. Never included in ``repr`` or log output.
        ignore_cert_errors: Skip TLS certificate verification.
    """

    type: str
    platform: Optional[Platform] = None
    owner: Optional[str] = None
    repo: Optional[str] = None
    base_url: Optional[str] = None
    path: Optional[str] = None
    token: Optional[str] = field(default=None, repr=False)
    ignore_cert_errors: bool = False

    @property
    def is_local(self) -> bool:
        return self.type == "local"

    @property
    def is_remote(self) -> bool:
        return self.type == "remote"

    def describe(self) -> str:
        """Short human-readable location, safe for logs."""
        if self.is_local:
            return f"local:{self.path}"
        platform = self.platform.value if self.platform else "unknown"
        location = f"{self.owner}/{self.repo}"
        if self.base_url:
            return f"{platform}:{self.base_url}/{location}"
        return f"{platform}:{location}"
