"""Latest command implementation for taginfo.

Prints only the name ``latest`` resolves to, which makes it convenient in
shell pipelines::

    $ git checkout "$(taginfo latest -r . --tag-format 'vX.X.X')"
"""

from __future__ import annotations

import sys
import click
import asyncio
from typing import Optional

from taginfo.exceptions import TagInfoError
from taginfo.context import pass_context, TagInfoContext
from taginfo.core import LatestResolver, Resolution
from taginfo.sources import create_client
from taginfo.commands.options import (
    build_repo_config,
    repository_options,
    resolve_kind,
    resolve_patterns,
)
from taginfo.utils import colorize_strategy, get_logger, print_error, print_info

logger = get_logger("commands.latest")


@click.command()
@repository_options
@pass_context
def latest(
    ctx: TagInfoContext,
    repository: Optional[str],
    platform: Optional[str],
    owner: Optional[str],
    repo: Optional[str],
    base_url: Optional[str],
    token: Optional[str],
    ignore_cert_errors: bool,
    tag_format: Optional[str],
    kind: Optional[str],
) -> None:
    """Print the name of the latest tag or release."""
    try:
        resolution = asyncio.run(
            _latest_async(
                ctx,
                repository=repository,
                platform=platform,
                owner=owner,
                repo=repo,
                base_url=base_url,
                token=token,
                ignore_cert_errors=ignore_cert_errors,
                tag_format=tag_format,
                kind=kind,
            )
        )
    except TagInfoError as e:
        print_error(f"{e}")
        sys.exit(1)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        logger.exception("Error in latest command")
        sys.exit(1)

    click.echo(resolution.name)
    if ctx.verbose > 0:
        print_info(
            f"strategy: {colorize_strategy(resolution.strategy.value)}, "
            f"candidates: {resolution.candidates}"
        )


async def _latest_async(
    ctx: TagInfoContext,
    *,
    repository: Optional[str],
    platform: Optional[str],
    owner: Optional[str],
    repo: Optional[str],
    base_url: Optional[str],
    token: Optional[str],
    ignore_cert_errors: bool,
    tag_format: Optional[str],
    kind: Optional[str],
) -> Resolution:
    config = ctx.get_config()
    repo_config = build_repo_config(
        config,
        repository=repository,
        platform=platform,
        owner=owner,
        repo=repo,
        base_url=base_url,
        token=token,
        ignore_cert_errors=ignore_cert_errors,
    )

    async with create_client(repo_config, **config.http_options()) as client:
        resolver = LatestResolver(
            client,
            patterns=resolve_patterns(config, tag_format),
            kind=resolve_kind(config, kind),
        )
        return await resolver.resolve()
