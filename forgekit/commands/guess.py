"""Guess command implementation for forgekit.

Infers a semantic-version constraint from legacy compatibility labels such
as ``"SPT 3.11"`` or ``"SPT 3.4-3.6"``.

Typical usage::

    $ forgekit guess "SPT 3.11" "Outdated"
    $ forgekit guess --exact "SPT 3.8"
"""

from __future__ import annotations

from typing import Tuple

import click
from rich.markup import escape

from forgekit.core import ConstraintGuesser
from forgekit.utils import get_logger, print_json, print_table

logger = get_logger("commands.guess")


@click.command()
@click.argument("labels", nargs=-1, required=True)
@click.option(
    "--exact",
    is_flag=True,
    help="Return the highest version token itself instead of ~X.Y.0.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
def guess(labels: Tuple[str, ...], exact: bool, format: str) -> None:
    """Guess a version constraint for each of LABELS.

    The highest version mentioned in a label wins; labels without any
    version become ``0.0.0``.
    """
    guesser = ConstraintGuesser()
    results = [(raw, guesser.guess(raw, append_any_patch=not exact)) for raw in labels]

    if format.lower() == "json":
        print_json([{"input": raw, "constraint": c} for raw, c in results])
        return

    print_table(
        [{"Label": escape(raw), "Constraint": escape(c)} for raw, c in results],
        title="Guessed Constraints",
        column_styles={"Constraint": {"style": "bold cyan"}},
    )
