"""Verify-key command implementation for forgekit.

Checks that the configured Akismet API key is accepted, optionally showing
the account's usage statistics.

Typical usage::

    $ FORGEKIT_AKISMET_API_KEY=... forgekit verify-key
    $ forgekit -c forgekit.toml verify-key --usage
"""

from __future__ import annotations

import sys
import asyncio

import click

from forgekit.config import ForgeKitConfig
from forgekit.core import AkismetClient
from forgekit.exceptions import ForgeKitError
from forgekit.context import pass_context, ForgeKitContext
from forgekit.utils import (
    HTTPClient,
    get_logger,
    print_error,
    print_json,
    print_success,
    print_warning,
)

logger = get_logger("commands.verify_key")


@click.command("verify-key")
@click.option(
    "--usage",
    is_flag=True,
    help="Also show the account's API usage statistics.",
)
@pass_context
def verify_key(ctx: ForgeKitContext, usage: bool) -> None:
    """Verify the configured Akismet API key.

    Exits:
        0 if the key is valid, 1 if it is rejected, missing, or spam
        checking is disabled.
    """
    config = ctx.effective_config()

    if not config.spam_check_enabled:
        print_warning("Spam checking is disabled (spam_check_enabled = false)")
        sys.exit(1)

    if not config.akismet_api_key:
        print_error(
            "No Akismet API key configured "
            "(set akismet_api_key or FORGEKIT_AKISMET_API_KEY)"
        )
        sys.exit(1)

    try:
        is_valid = asyncio.run(_verify_async(config, usage))
    except ForgeKitError as e:
        print_error(f"{e}")
        sys.exit(1)

    sys.exit(0 if is_valid else 1)


async def _verify_async(config: ForgeKitConfig, usage: bool) -> bool:
    async with HTTPClient() as http:
        client = AkismetClient(config, http)

        if not await client.verify_key():
            print_error("Akismet rejected the API key")
            return False

        print_success("Akismet API key is valid")

        if usage:
            stats = await client.usage_limit()
            if stats is None:
                print_warning("Usage statistics are unavailable")
            else:
                print_json(stats)

        return True
