"""Parse command implementation for forgekit.

Validates administrator-entered version strings against the strict
semantic-version grammar and shows the normalized fields that would be
stored for each one.

Typical usage::

    $ forgekit parse 1.2.3 v2.0.0-beta.1+build.5
    $ forgekit parse --format json 1.2 not-a-version
"""

from __future__ import annotations

import sys
from typing import Any, Dict, List, Optional, Tuple

import click
from rich.markup import escape

from forgekit.core import VersionParser
from forgekit.models import VersionValue
from forgekit.exceptions import ForgeKitError
from forgekit.utils import (
    colorize_status,
    get_logger,
    print_error,
    print_json,
    print_table,
)

logger = get_logger("commands.parse")

ParseRow = Tuple[str, Optional[VersionValue], Optional[str]]


@click.command()
@click.argument("versions", nargs=-1, required=True)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
def parse(versions: Tuple[str, ...], format: str) -> None:
    """Validate VERSIONS with the strict semantic-version grammar.

    A leading ``v`` is accepted and missing minor or patch numbers default
    to zero. Anything else that does not match is rejected.

    Exits:
        0 if every version is valid, 1 otherwise.
    """
    parser = VersionParser()
    rows: List[ParseRow] = []

    for raw in versions:
        try:
            rows.append((raw, parser.parse(raw), None))
        except ForgeKitError as exc:
            logger.debug("Rejected %r: %s", raw, exc)
            rows.append((raw, None, exc.message))

    if format.lower() == "json":
        _display_json(rows)
    else:
        _display_table(rows)

    invalid = [raw for raw, value, _ in rows if value is None]
    if invalid:
        if format.lower() != "json":
            print_error(f"{len(invalid)} of {len(rows)} version(s) are invalid")
        sys.exit(1)


def _display_table(rows: List[ParseRow]) -> None:
    data: List[Dict[str, Any]] = []
    for raw, value, error in rows:
        if value is None:
            data.append(
                {
                    "Status": colorize_status("invalid"),
                    "Input": escape(raw),
                    "Version": escape(error or ""),
                }
            )
            continue
        data.append(
            {
                "Status": colorize_status("valid"),
                "Input": escape(raw),
                "Version": escape(value.canonical),
                "Major": value.major,
                "Minor": value.minor,
                "Patch": value.patch,
                "Labels": escape(value.labels),
            }
        )

    print_table(
        data,
        headers=["Status", "Input", "Version", "Major", "Minor", "Patch", "Labels"],
        title="Version Parsing",
        column_styles={
            "Status": {"justify": "center", "no_wrap": True},
            "Version": {"style": "bold cyan"},
            "Major": {"justify": "right"},
            "Minor": {"justify": "right"},
            "Patch": {"justify": "right"},
        },
    )


def _display_json(rows: List[ParseRow]) -> None:
    data: List[Dict[str, Any]] = []
    for raw, value, error in rows:
        if value is None:
            data.append({"input": raw, "valid": False, "error": error})
        else:
            data.append({"input": raw, "valid": True, **value.to_json()})
    print_json(data)
