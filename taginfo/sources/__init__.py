"""Repository backends for taginfo.

Use :func:`create_client` to obtain the backend for a
:class:`~taginfo.models.repository.RepoConfig`::

    async with create_client(config, timeout=10) as client:
        tags = await client.list_tags()
"""

from __future__ import annotations

from typing import Any

from taginfo.models.repository import Platform, RepoConfig
from taginfo.exceptions import RepositoryConfigError
from taginfo.sources.base import HTTPRepositoryClient, RepositoryClient
from taginfo.sources.local import LocalGitClient
from taginfo.sources.github import GitHubClient
from taginfo.sources.gitea import GiteaClient
from taginfo.sources.bitbucket import BitbucketClient

__all__ = [
    "RepositoryClient",
    "HTTPRepositoryClient",
    "LocalGitClient",
    "GitHubClient",
    "GiteaClient",
    "BitbucketClient",
    "create_client",
]

_REMOTE_CLIENTS = {
    Platform.GITHUB: GitHubClient,
    Platform.GITEA: GiteaClient,
    Platform.BITBUCKET: BitbucketClient,
}


def create_client(config: RepoConfig, **http_options: Any) -> RepositoryClient:
    """Build the backend described by ``config``.

    Args:
        config: Where the repository lives.
        **http_options: Passed to remote backends (``timeout``,
            ``max_retries``, ``max_tags``...). Ignored for local
            repositories.

    Raises:
        RepositoryConfigError: ``config`` lacks what its backend needs.
    """
    if config.is_local:
        if not config.path:
            raise RepositoryConfigError("Local repository configuration has no path")
        return LocalGitClient(config.path)

    if config.platform is None or not config.owner or not config.repo:
        raise RepositoryConfigError(
            "Remote repository configuration needs platform, owner and repo",
            {"repository": config.describe()},
        )

    client_cls = _REMOTE_CLIENTS[Platform(config.platform)]
    return client_cls(config, **http_options)
