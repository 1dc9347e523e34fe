"""
Command-line interface for forgekit.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from forgekit.config import load_config
from forgekit.__version__ import __version__
from forgekit.context import ForgeKitContext
from forgekit.exceptions import ConfigError, ForgeKitError
from forgekit.utils.logger import get_logger, setup_logging
from forgekit.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="FORGEKIT_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="FORGEKIT_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="forgekit",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """forgekit: version engine and spam checks for a mod forge.

    \b
    Available commands:
      forgekit parse        Validate strict semantic versions
      forgekit normalize    Convert legacy version labels
      forgekit guess        Guess constraints from legacy labels
      forgekit resolve      Filter versions by a constraint
      forgekit verify-key   Check the configured Akismet key

    \b
    Examples:
      forgekit parse 1.2.3
      forgekit normalize "1.5.0 (SPT 3.11)"
      forgekit resolve "~3.11.0" 3.10.0 3.11.2

    Use ``forgekit COMMAND --help`` for command-specific options.
    """
    # Respect NO_COLOR for the console and downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    _configure_logging(verbose)

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    forgekit_ctx = ForgeKitContext()
    forgekit_ctx.config_path = config or loaded_config.source_path
    forgekit_ctx.color = color
    forgekit_ctx.verbose = verbose
    forgekit_ctx.config = loaded_config
    ctx.obj = forgekit_ctx

    logger.debug("forgekit v%s", __version__)
    logger.debug("Config path: %s", forgekit_ctx.config_path)
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    if verbose <= 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    setup_logging(level=level)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


# Register CLI subcommands
from forgekit.commands.guess import guess  # noqa: E402
from forgekit.commands.parse import parse  # noqa: E402
from forgekit.commands.resolve import resolve  # noqa: E402
from forgekit.commands.normalize import normalize  # noqa: E402
from forgekit.commands.verify_key import verify_key  # noqa: E402

cli.add_command(parse)
cli.add_command(normalize)
cli.add_command(guess)
cli.add_command(resolve)
cli.add_command(verify_key)


def main() -> int:
    """Main entry point for the forgekit CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except click.exceptions.Exit as exc:
        return exc.exit_code

    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    except ForgeKitError as exc:
        print_error(str(exc))
        logger.debug(
            "ForgeKitError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except (KeyboardInterrupt, click.exceptions.Abort):
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
