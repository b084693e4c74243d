"""Info command implementation for taginfo.

Looks up one tag (or release) and prints its metadata. The special name
``latest`` is resolved first: format patterns narrow the candidates, then
the highest semantic version, the most recent date, or, as a last resort,
the alphabetically greatest name wins.

Typical usage::

    # Latest tag of the repository in the current GitHub Actions run
    $ taginfo info

    # A named tag of a Gitea repository, as JSON
    $ taginfo info v1.4.0 -r https://gitea.example.com/org/app --format json

    # Latest 'X.X' tag of a local checkout, exported as step outputs
    $ taginfo info latest -r . --tag-format X.X --github-output
"""

from __future__ import annotations

import sys
import json
import click
import asyncio
from typing import Optional

from rich.markup import escape

from taginfo.exceptions import TagInfoError
from taginfo.context import pass_context, TagInfoContext
from taginfo.core import TagLookup
from taginfo.core.lookup import LookupResult
from taginfo.sources import create_client
from taginfo.commands.options import (
    build_repo_config,
    repository_options,
    resolve_kind,
    resolve_patterns,
)
from taginfo.utils import (
    colorize_strategy,
    get_logger,
    print_error,
    print_fields,
    print_info,
    print_success,
    write_outputs,
)

logger = get_logger("commands.info")


@click.command()
@click.argument("tag_name", default="latest")
@repository_options
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "simple", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.option(
    "--github-output",
    is_flag=True,
    help="Also append the results to the $GITHUB_OUTPUT file.",
)
@pass_context
def info(
    ctx: TagInfoContext,
    tag_name: str,
    repository: Optional[str],
    platform: Optional[str],
    owner: Optional[str],
    repo: Optional[str],
    base_url: Optional[str],
    token: Optional[str],
    ignore_cert_errors: bool,
    tag_format: Optional[str],
    kind: Optional[str],
    format: str,
    github_output: bool,
) -> None:
    """Show information about TAG_NAME (default: latest).

    A tag that does not exist is reported with ``exists=false``; it is
    not an error.
    """
    try:
        result = asyncio.run(
            _info_async(
                ctx,
                tag_name,
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

        _display(result, format.lower())

        if github_output:
            path = write_outputs(result.to_outputs())
            if format.lower() == "table":
                print_success(f"Outputs written to {path}")

    except TagInfoError as e:
        print_error(f"{e}")
        sys.exit(1)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        logger.exception("Error in info command")
        sys.exit(1)


async def _info_async(
    ctx: TagInfoContext,
    tag_name: str,
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
) -> LookupResult:
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
    patterns = resolve_patterns(config, tag_format)
    item_kind = resolve_kind(config, kind)

    logger.info("Looking up %s %r in %s", item_kind.value, tag_name, repo_config.describe())

    async with create_client(repo_config, **config.http_options()) as client:
        lookup = TagLookup(client, patterns=patterns, kind=item_kind)
        return await lookup.fetch(tag_name)


# ---------------------------------------------------------------------------
# Display renderers
# ---------------------------------------------------------------------------


def _display(result: LookupResult, format: str) -> None:
    if format == "json":
        click.echo(json.dumps(result.to_json(), indent=2))
    elif format == "simple":
        for key, value in result.to_outputs().items():
            click.echo(f"{key}={value}")
    else:
        _display_table(result)


def _display_table(result: LookupResult) -> None:
    if result.resolution is not None:
        resolution = result.resolution
        note = (
            f"Resolved latest {result.kind.value} to [bold]{escape(resolution.name)}[/bold] "
            f"by {colorize_strategy(resolution.strategy.value)}"
        )
        if resolution.pattern:
            note += f' using format "{escape(resolution.pattern)}"'
        print_info(note)

    title = f"{result.kind.value.capitalize()} {result.resolved}"
    if not result.exists:
        title += " (not found)"
    print_fields(result.to_outputs(), title=title)
