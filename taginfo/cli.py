"""
Entry point of the ``taginfo`` command.

The ``cli`` group owns everything shared by the subcommands: color
handling, log verbosity and the configuration file. ``info`` and ``latest``
are registered at the bottom of the module; ``main`` turns whatever escapes
them into a process exit code.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from taginfo.config import TagInfoConfig, load_config
from taginfo.__version__ import __version__
from taginfo.context import TagInfoContext
from taginfo.exceptions import ConfigError, TagInfoError
from taginfo.utils.logger import get_logger, setup_logging
from taginfo.utils.console import print_error, print_warning, reconfigure_console
from taginfo.constants import ENV_COLOR, ENV_CONFIG

logger = get_logger("cli")

# -v count -> level; anything past the end stays at DEBUG
_VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar=ENV_CONFIG,
    help="Read settings from this TOML file instead of taginfo.toml / pyproject.toml.",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Show resolver progress (-v) or HTTP and git details (-vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    envvar=ENV_COLOR,
    help="Colorize tables and log lines.",
)
@click.version_option(
    version=__version__,
    prog_name="taginfo",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    click_ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """taginfo: resolve and inspect git tags across hosting platforms.

    \b
    Commands:
      taginfo info [TAG]    Metadata for a tag or release (default: latest)
      taginfo latest        Name of the latest tag or release

    \b
    Examples:
      taginfo info -r https://github.com/owner/repo
      taginfo latest -r . --tag-format 'X.X.X'
      taginfo -v info v1.2.0 --platform gitea --owner o --repo r --base-url https://git.example.com

    Run ``taginfo COMMAND --help`` for the options of each command.
    """
    _apply_color(color)
    _configure_logging(verbose)

    try:
        settings = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(EXIT_ERROR) from exc

    click_ctx.obj = _build_context(settings, config, verbose, color)

    logger.debug("taginfo %s, verbosity %d, color %s", __version__, verbose, color)
    if settings.source_path:
        logger.debug("Settings from %s: %s", settings.source_path, settings.to_log_dict())
    else:
        logger.debug("No configuration file found, using defaults")


def _apply_color(color: bool) -> None:
    # NO_COLOR is what both the rich consoles and the log formatter check
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()


def _configure_logging(verbose: int) -> None:
    """Map the ``-v`` count to a log level and install the handler."""
    level = _VERBOSITY_LEVELS[min(max(verbose, 0), len(_VERBOSITY_LEVELS) - 1)]
    setup_logging(level=level, verbose=verbose > 1)
    logger.debug("Log level set to %s", logging.getLevelName(level))


def _build_context(
    settings: TagInfoConfig,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> TagInfoContext:
    ctx = TagInfoContext()
    ctx.config_path = config or settings.source_path
    ctx.config = settings
    ctx.verbose = verbose
    ctx.color = color
    return ctx


from taginfo.commands.info import info  # noqa: E402
from taginfo.commands.latest import latest  # noqa: E402

cli.add_command(info)
cli.add_command(latest)


def main() -> int:
    """Run the CLI and return a process exit code.

    Returns:
        0 on success, 1 when a lookup or configuration fails, 2 for usage
        errors reported by click, 130 when interrupted.
    """
    try:
        cli(standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except (click.exceptions.Abort, KeyboardInterrupt):
        print_warning("Interrupted")
        return EXIT_INTERRUPTED
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_ERROR
    except TagInfoError as exc:
        print_error(str(exc))
        logger.debug("%s: %r", type(exc).__name__, exc.details, exc_info=True)
        return EXIT_ERROR
    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in taginfo")
        return EXIT_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
