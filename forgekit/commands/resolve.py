"""Resolve command implementation for forgekit.

Filters candidate versions by an npm-style constraint, the same check used
to preview which SPT versions a mod declares itself compatible with.

Typical usage::

    $ forgekit resolve "~3.11.0" 3.10.5 3.11.0 3.11.2 4.0.0
    $ forgekit resolve "^1.2.0" --file versions.txt --format json
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click
from rich.markup import escape

from forgekit.core import ConstraintResolver
from forgekit.exceptions import ForgeKitError
from forgekit.utils import (
    colorize_status,
    get_logger,
    print_error,
    print_json,
    print_table,
    print_warning,
    read_value_list,
)

logger = get_logger("commands.resolve")


@click.command()
@click.argument("constraint")
@click.argument("versions", nargs=-1)
@click.option(
    "--file",
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read candidate versions from a file, one per line.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
def resolve(
    constraint: str,
    versions: Tuple[str, ...],
    file: Optional[Path],
    format: str,
) -> None:
    """Show which VERSIONS satisfy CONSTRAINT.

    Candidates that are not valid semantic versions are ignored.

    Exits:
        0 on success, 1 if the constraint is invalid.
    """
    resolver = ConstraintResolver()

    try:
        candidates = list(versions) + (read_value_list(file) if file else [])
        if not candidates:
            raise click.UsageError("Provide at least one version or --file.")
        matched = resolver.satisfied_by(candidates, constraint)
    except ForgeKitError as e:
        print_error(f"{e}")
        sys.exit(1)

    ordered = resolver.sort_for_display(candidates)
    logger.info(
        "%d of %d candidate(s) satisfy %r",
        len(matched),
        len(candidates),
        constraint,
    )

    if format.lower() == "json":
        print_json(
            {
                "constraint": constraint,
                "matched": matched,
                "latest": resolver.latest(matched),
                "ignored": [c for c in candidates if c not in ordered],
            }
        )
        return

    matched_set = set(matched)
    data: List[Dict[str, Any]] = [
        {
            "Status": colorize_status("matched") if raw in matched_set else "-",
            "Version": escape(raw),
        }
        for raw in ordered
    ]
    print_table(
        data,
        title=f"Versions matching {escape(constraint)}",
        column_styles={"Status": {"justify": "center", "no_wrap": True}},
    )

    if not matched:
        print_warning(f"No version satisfies {constraint}")
