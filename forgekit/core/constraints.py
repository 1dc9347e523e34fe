"""Guess a semver constraint from legacy free-text compatibility labels.

Mods imported from the old hub carry a tag such as ``"SPT 3.11"``,
``"SPT 3.4-3.6"`` or ``"Outdated"`` instead of a real constraint. The
guesser maps those tags onto constraint strings through an ordered rule
table; the first rule that produces a value wins:

==========  ======================================  =====================
Rule        Matches                                 Produces
==========  ======================================  =====================
alias       a known label (``Outdated``)            ``0.0.0``
tokens      any ``major.minor[.patch]`` token       ``~major.minor.0`` of
                                                    the highest token
fallback    anything                                ``0.0.0``
==========  ======================================  =====================

Ranges collapse to their upper bound: historic range labels meant "works
with everything up to and including this version". The result is a guess
and should only be used for imported data.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, Union

from forgekit.core.parser import VersionParser
from forgekit.utils.logger import get_logger
from forgekit.constants import CONSTRAINT_ALIASES, NULL_VERSION

logger = get_logger("constraints")

_VERSION_TOKEN = re.compile(r"\b[0-9]+\.[0-9]+(?:\.[0-9]+)?\b")

_parser = VersionParser()


@dataclass(frozen=True)
class ConstraintRule:
    """A single named step of the guessing table.

    Attributes:
        name: Rule identifier, used in debug logs.
        apply: Callable returning a constraint, or ``None`` to fall through.
            It receives the raw label and the ``append_any_patch`` flag.
    """

    name: str
    apply: Callable[[str, bool], Optional[str]]


def _alias_rule(label: str, append_any_patch: bool) -> Optional[str]:
    return CONSTRAINT_ALIASES.get(label.strip().lower())


def _highest_token(tokens: Sequence[str]) -> str:
    def key(token: str) -> Tuple[int, int, int]:
        return _parser.parse(token).release

    return max(tokens, key=key)


def _token_rule(label: str, append_any_patch: bool) -> Optional[str]:
    tokens = _VERSION_TOKEN.findall(label)
    if not tokens:
        return None

    version = _highest_token(tokens)
    if not append_any_patch:
        return version

    major, minor, _ = _parser.parse(version).release
    return f"~{major}.{minor}.0"


def _fallback_rule(label: str, append_any_patch: bool) -> Optional[str]:
    return NULL_VERSION


DEFAULT_RULES: Tuple[ConstraintRule, ...] = (
    ConstraintRule("alias", _alias_rule),
    ConstraintRule("tokens", _token_rule),
    ConstraintRule("fallback", _fallback_rule),
)


class ConstraintGuesser:
    """Evaluate constraint rules top to bottom; first match wins.

    Args:
        rules: Ordered rules; defaults to :data:`DEFAULT_RULES`.
    """

    def __init__(self, rules: Optional[Sequence[ConstraintRule]] = None) -> None:
        self.rules: List[ConstraintRule] = list(rules if rules is not None else DEFAULT_RULES)

    def guess(self, raw: Union[str, int], *, append_any_patch: bool = True) -> str:
        """Guess a constraint for *raw*.

        Args:
            raw: Free-text compatibility label.
            append_any_patch: Anchor the guess to ``~major.minor.0`` so any
                patch release of that line matches. When ``False`` the bare
                version token is returned.

        Returns:
            A constraint string; ``0.0.0`` when nothing is recognized.
        """
        label = str(raw)
        for rule in self.rules:
            result = rule.apply(label, append_any_patch)
            if result is not None:
                logger.debug("Constraint rule %s matched %r -> %s", rule.name, label, result)
                return result

        return NULL_VERSION


_default_guesser = ConstraintGuesser()


def guess_semantic_constraint(raw: Union[str, int], append_any_patch: bool = True) -> str:
    """Guess a constraint for *raw* with the default rule table.

    Examples::

        >>> guess_semantic_constraint("SPT 3.11")
        '~3.11.0'
        >>> guess_semantic_constraint("SPT 3.4-3.6")
        '~3.6.0'
        >>> guess_semantic_constraint("Outdated")
        '0.0.0'
    """
    return _default_guesser.guess(raw, append_any_patch=append_any_patch)
