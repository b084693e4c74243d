"""Options and setup shared by the ``info`` and ``latest`` commands."""

from __future__ import annotations

from typing import Any, Callable, List, Optional

import click

from taginfo.config import TagInfoConfig
from taginfo.models import ItemKind, Platform, RepoConfig
from taginfo.core import detect_repository, parse_tag_format
from taginfo.constants import ENV_GITHUB_TOKEN, ENV_TOKEN
from taginfo.utils import mask_secret, print_warning

F = Callable[..., Any]

_REPOSITORY_OPTIONS: List[Callable[[F], F]] = [
    click.option(
        "--repository",
        "-r",
        help="Repository URL (https:// or git@) or local path.",
    ),
    click.option(
        "--platform",
        type=click.Choice(Platform.values(), case_sensitive=False),
        help="Hosting platform, used with --owner and --repo.",
    ),
    click.option("--owner", help="Repository owner or workspace."),
    click.option("--repo", help="Repository name."),
    click.option(
        "--base-url",
        help="Instance URL for Gitea or GitHub Enterprise.",
    ),
    click.option(
        "--token",
        envvar=[ENV_TOKEN, ENV_GITHUB_TOKEN],
        show_envvar=True,
        help="API token for the hosting platform.",
    ),
    click.option(
        "--ignore-cert-errors",
        is_flag=True,
        help="Skip TLS certificate verification (self-hosted instances).",
    ),
    click.option(
        "--tag-format",
        help=(
            "Pattern(s) restricting which tags count for 'latest': "
            "'X.X.X', '*.*', a regex, a comma-separated list or a JSON array."
        ),
    ),
    click.option(
        "--kind",
        type=click.Choice([kind.value for kind in ItemKind], case_sensitive=False),
        help="Resolve against tags or releases.",
    ),
]


def repository_options(func: F) -> F:
    """Attach the repository selection and tag format options."""
    for option in reversed(_REPOSITORY_OPTIONS):
        func = option(func)
    return func


def build_repo_config(
    config: TagInfoConfig,
    *,
    repository: Optional[str],
    platform: Optional[str],
    owner: Optional[str],
    repo: Optional[str],
    base_url: Optional[str],
    token: Optional[str],
    ignore_cert_errors: bool,
) -> RepoConfig:
    """Combine CLI options with the loaded configuration."""
    mask_secret(token)
    repo_config = detect_repository(
        repository=repository,
        platform=platform,
        owner=owner,
        repo=repo,
        base_url=base_url,
        token=token,
        ignore_cert_errors=ignore_cert_errors or config.ignore_cert_errors,
    )
    # the token may have come from the environment inside detect_repository
    mask_secret(repo_config.token)

    if repo_config.is_remote and repo_config.ignore_cert_errors:
        print_warning("TLS certificate verification is disabled")
    return repo_config


def resolve_patterns(config: TagInfoConfig, tag_format: Optional[str]) -> Optional[List[str]]:
    """``--tag-format`` when given, otherwise the configured patterns."""
    if tag_format is not None and tag_format.strip():
        return parse_tag_format(tag_format)
    return config.tag_format


def resolve_kind(config: TagInfoConfig, kind: Optional[str]) -> ItemKind:
    return ItemKind(kind.lower()) if kind else config.kind
