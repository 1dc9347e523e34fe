"""Normalize command implementation for forgekit.

Runs legacy version labels through the permissive import normalizer, the
same path bulk imports of mod and SPT versions take.

Typical usage::

    $ forgekit normalize "1.5.0 (SPT 3.11)" "Beta 1.9"
    $ forgekit normalize --source spt "SPT 3.8.0 (29197)"
    $ forgekit normalize --file labels.txt --format json
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click
from rich.markup import escape

from forgekit.core import ImportNormalizer
from forgekit.exceptions import ForgeKitError
from forgekit.utils import (
    get_logger,
    print_error,
    print_json,
    print_table,
    read_value_list,
)

logger = get_logger("commands.normalize")


@click.command()
@click.argument("labels", nargs=-1)
@click.option(
    "--source",
    "-s",
    type=click.Choice(["mod", "spt"], case_sensitive=False),
    default="mod",
    help="Which import rules to apply.",
)
@click.option(
    "--file",
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read labels from a file, one per line.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
def normalize(
    labels: Tuple[str, ...],
    source: str,
    file: Optional[Path],
    format: str,
) -> None:
    """Convert legacy version LABELS into semantic versions.

    Unlike ``forgekit parse`` this never rejects input: unparseable labels
    become ``0.0.0`` with the label kept as build metadata.
    """
    try:
        values = list(labels) + (read_value_list(file) if file else [])
        if not values:
            raise click.UsageError("Provide at least one label or --file.")

        normalizer = ImportNormalizer()
        clean = (
            normalizer.clean_spt_import
            if source.lower() == "spt"
            else normalizer.clean_mod_import
        )
        results = [(raw, clean(raw)) for raw in values]

    except ForgeKitError as e:
        print_error(f"{e}")
        sys.exit(1)

    logger.info("Normalized %d label(s) with %s rules", len(results), source)

    if format.lower() == "json":
        data: List[Dict[str, Any]] = [
            {"input": raw, **value.to_json()} for raw, value in results
        ]
        print_json(data)
        return

    print_table(
        [
            {"Input": escape(raw), "Version": escape(value.canonical)}
            for raw, value in results
        ],
        title=f"Normalized {source.upper()} Versions",
        column_styles={"Version": {"style": "bold cyan"}},
    )
