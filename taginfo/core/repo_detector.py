"""Work out which repository to inspect from user input and environment.

Accepted forms, in order of precedence:

1. explicit ``platform`` + ``owner`` + ``repo``;
2. a repository URL (``https://``, ``http://`` or ``git@`` SSH form);
   github.com and bitbucket.org are recognised by host, any other host is
   taken to be a Gitea instance;
3. a local path;
4. ``GITHUB_REPOSITORY`` (``owner/repo``) as set by GitHub Actions.
"""

from __future__ import annotations

import os
import re
from typing import Mapping, Optional, Pattern, Tuple

from taginfo.models.repository import Platform, RepoConfig
from taginfo.exceptions import RepositoryConfigError
from taginfo.utils.logger import get_logger
from taginfo.constants import ENV_GITHUB_REPOSITORY, ENV_GITHUB_TOKEN

logger = get_logger("repo_detector")

__all__ = ["detect_repository", "is_url"]

_GITHUB_URL_PATTERNS = (
    re.compile(r"^https?://github\.com/([^/]+)/([^/]+?)(?:\.git)?(?:/.*)?$"),
    re.compile(r"^git@github\.com:([^/]+)/([^/]+?)(?:\.git)?$"),
)
_BITBUCKET_URL_PATTERNS = (
    re.compile(r"^https?://bitbucket\.org/([^/]+)/([^/]+?)(?:\.git)?(?:/.*)?$"),
    re.compile(r"^git@bitbucket\.org:([^/]+)/([^/]+?)(?:\.git)?$"),
)
_HTTP_HOST_RE = re.compile(r"^(https?://[^/]+)")
_SSH_HOST_RE = re.compile(r"^git@([^:]+)")
_OWNER_REPO_RE = re.compile(r"^([^/]+)/([^/]+?)(?:\.git)?(?:/.*)?$")

_URL_PREFIXES = ("http://", "https://", "git@")


def is_url(repository: str) -> bool:
    """Return True for remote URLs, False for local paths."""
    return repository.startswith(_URL_PREFIXES)


def detect_repository(
    repository: Optional[str] = None,
    platform: Optional[str] = None,
    owner: Optional[str] = None,
    repo: Optional[str] = None,
    base_url: Optional[str] = None,
    token: Optional[str] = None,
    ignore_cert_errors: bool = False,
    env: Optional[Mapping[str, str]] = None,
) -> RepoConfig:
    """Build a :class:`RepoConfig` from the given inputs.

    Args:
        repository: URL or local path.
        platform: Platform name, used with ``owner`` and ``repo``.
        owner: Repository owner or workspace.
        repo: Repository name.
        base_url: Instance URL for Gitea or GitHub Enterprise.
        token: API token; defaults to ``GITHUB_TOKEN``.
        ignore_cert_errors: Skip TLS verification for remote requests.
        env: Environment to read fallbacks from; defaults to ``os.environ``.

    Raises:
        RepositoryConfigError: Unsupported platform, unparseable URL, or
            nothing to go on.
    """
    environ = os.environ if env is None else env
    token = token or environ.get(ENV_GITHUB_TOKEN) or None

    if platform and owner and repo:
        return RepoConfig(
            type="remote",
            platform=_platform(platform),
            owner=owner,
            repo=repo,
            base_url=base_url or None,
            token=token,
            ignore_cert_errors=ignore_cert_errors,
        )

    if repository:
        if is_url(repository):
            return _from_url(repository, base_url, token, ignore_cert_errors)

        path = os.path.abspath(os.path.expanduser(repository))
        logger.debug("Using local repository at %s", path)
        return RepoConfig(type="local", path=path)

    github_repository = environ.get(ENV_GITHUB_REPOSITORY)
    if github_repository:
        owner, _, repo = github_repository.partition("/")
        if owner and repo:
            logger.debug("Using %s from %s", github_repository, ENV_GITHUB_REPOSITORY)
            return RepoConfig(
                type="remote",
                platform=Platform.GITHUB,
                owner=owner,
                repo=repo,
                base_url=base_url or None,
                token=token,
                ignore_cert_errors=ignore_cert_errors,
            )

    raise RepositoryConfigError(
        "Repository not specified. Provide either repository (URL or path), "
        "or platform/owner/repo inputs, or run in GitHub Actions context."
    )


def _platform(name: str) -> Platform:
    try:
        return Platform(name.lower())
    except ValueError:
        raise RepositoryConfigError(
            f"Unsupported platform: {name}. Supported: {', '.join(Platform.values())}"
        ) from None


def _from_url(
    url: str,
    base_url: Optional[str],
    token: Optional[str],
    ignore_cert_errors: bool,
) -> RepoConfig:
    if "github.com" in url:
        platform = Platform.GITHUB
        owner, repo = _match_owner_repo(url, _GITHUB_URL_PATTERNS, "GitHub")
        resolved_base = None
    elif "bitbucket.org" in url:
        platform = Platform.BITBUCKET
        owner, repo = _match_owner_repo(url, _BITBUCKET_URL_PATTERNS, "Bitbucket")
        resolved_base = None
    else:
        platform = Platform.GITEA
        owner, repo, resolved_base = _parse_gitea_url(url, base_url)

    logger.debug("Detected %s repository %s/%s", platform.value, owner, repo)
    return RepoConfig(
        type="remote",
        platform=platform,
        owner=owner,
        repo=repo,
        base_url=resolved_base,
        token=token,
        ignore_cert_errors=ignore_cert_errors,
    )


def _match_owner_repo(url: str, patterns: Tuple[Pattern[str], ...], label: str) -> Tuple[str, str]:
    for pattern in patterns:
        match = pattern.match(url)
        if match:
            return match.group(1), _strip_git_suffix(match.group(2))
    raise RepositoryConfigError(f"Failed to parse {label} URL: {url}")


def _parse_gitea_url(url: str, base_url: Optional[str]) -> Tuple[str, str, str]:
    if not base_url:
        http_match = _HTTP_HOST_RE.match(url)
        ssh_match = _SSH_HOST_RE.match(url)
        if http_match:
            base_url = http_match.group(1)
        elif ssh_match:
            base_url = f"https://{ssh_match.group(1)}"

    if not base_url:
        raise RepositoryConfigError(f"Failed to parse Gitea URL: {url}")

    remainder = re.sub(r"^https?://", "", url)
    remainder = re.sub(r"^git@", "", remainder)
    host = re.sub(r"^https?://", "", base_url).rstrip("/")
    if remainder.startswith(host):
        remainder = remainder[len(host):]
    remainder = remainder.lstrip(":/")

    match = _OWNER_REPO_RE.match(remainder)
    if match is None:
        raise RepositoryConfigError(f"Failed to parse Gitea URL: {url}")

    return match.group(1), _strip_git_suffix(match.group(2)), base_url.rstrip("/")


def _strip_git_suffix(name: str) -> str:
    return name[:-4] if name.endswith(".git") else name
