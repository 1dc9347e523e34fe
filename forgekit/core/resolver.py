"""Constraint resolution over candidate version lists.

Resolves which mod, SPT or addon versions satisfy a compatibility
constraint, and orders version lists for display. Range parsing and
matching are delegated to :class:`semantic_version.NpmSpec`, which
understands the npm range grammar authors use: ``~1.2.0``, ``^1.2.0``,
``>=1.0.0 <2.0.0``, ``1.2.3 - 1.4.5``, ``1.x`` and ``||`` unions.

Matching follows conventional semver precedence: numeric major, minor,
patch; pre-releases below the release they qualify (and excluded unless
the range names a pre-release of the same release); build metadata
ignored.

Typical usage::

    resolver = ConstraintResolver()
    resolver.satisfied_by(["1.2.0", "1.3.0", "2.0.0"], "~1.2.0")
    # ['1.2.0']
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import semantic_version

from forgekit.core.parser import VersionParser
from forgekit.models.version import VersionValue
from forgekit.utils.logger import get_logger
from forgekit.exceptions import InvalidConstraintFormat
from forgekit.constants import DEFAULT_MINOR_LINES, NULL_VERSION

logger = get_logger("resolver")

# Public API
__all__ = ["ConstraintResolver", "sort_for_display"]


class ConstraintResolver:
    """Adapter between forgekit versions and ``semantic_version`` ranges.

    Candidates are read with the strict :class:`VersionParser`, so shortened
    forms such as ``v1.2`` are accepted; the original strings are what gets
    returned.

    Args:
        parser: Parser used to read candidate strings.
    """

    def __init__(self, parser: Optional[VersionParser] = None) -> None:
        self.parser = parser or VersionParser()

    # ------------------------------------------------------------------
    # Constraint handling
    # ------------------------------------------------------------------

    def validate_constraint(self, constraint: str) -> semantic_version.NpmSpec:
        """Parse *constraint*, raising a validation error when malformed.

        Args:
            constraint: npm-style range expression.

        Returns:
            The compiled range.

        Raises:
            InvalidConstraintFormat: Blank or syntactically invalid input.
        """
        if not isinstance(constraint, str) or not constraint.strip():
            raise InvalidConstraintFormat(str(constraint), reason="constraint is empty")

        try:
            return semantic_version.NpmSpec(constraint.strip())
        except ValueError as exc:
            raise InvalidConstraintFormat(constraint, reason=str(exc)) from exc

    def satisfied_by(self, candidates: Iterable[str], constraint: str) -> List[str]:
        """Return the candidates that satisfy *constraint*.

        Args:
            candidates: Version strings to filter.
            constraint: npm-style range expression.

        Returns:
            Matching candidates in their original spelling and order.
            Unparseable candidates are skipped.

        Raises:
            InvalidConstraintFormat: *constraint* is malformed.
        """
        spec = self.validate_constraint(constraint)

        matched: List[str] = []
        for candidate in candidates:
            comparable = self._to_comparable(candidate)
            if comparable is not None and spec.match(comparable):
                matched.append(candidate)

        logger.debug(
            "Constraint %r matched %d candidate(s)",
            constraint,
            len(matched),
        )
        return matched

    def satisfies(self, version: str, constraint: str) -> bool:
        """Return True if *version* satisfies *constraint*."""
        return bool(self.satisfied_by([version], constraint))

    def _to_comparable(self, candidate: str) -> Optional[semantic_version.Version]:
        """Convert a candidate to a ``semantic_version.Version`` without build data."""
        parsed = self.parser.try_parse(candidate)
        if parsed is None:
            logger.debug("Skipping unparseable version candidate %r", candidate)
            return None

        text = "{}.{}.{}".format(*parsed.release)
        if parsed.prerelease:
            text += f"-{parsed.prerelease}"

        try:
            return semantic_version.Version(text)
        except ValueError:
            logger.debug("Skipping non-semver version candidate %r", candidate)
            return None

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def _parsed(self, versions: Iterable[str]) -> List[Tuple[str, VersionValue]]:
        pairs: List[Tuple[str, VersionValue]] = []
        for version in versions:
            parsed = self.parser.try_parse(version)
            if parsed is None:
                logger.debug("Ignoring invalid version %r", version)
                continue
            pairs.append((version, parsed))
        return pairs

    def sort_for_display(self, versions: Iterable[str]) -> List[str]:
        """Order versions for user-facing listings.

        Newest release first; a plain release comes before labeled versions
        of the same ``major.minor.patch``; labels sort ascending among ties.
        Invalid strings are dropped.
        """
        pairs = self._parsed(versions)
        pairs.sort(key=lambda item: item[1].display_key)
        return [version for version, _ in pairs]

    def _real_versions(self, versions: Iterable[str]) -> List[Tuple[str, VersionValue]]:
        """Parsed versions in display order, without the placeholder version."""
        pairs = [
            (raw, parsed)
            for raw, parsed in self._parsed(versions)
            if parsed.canonical != NULL_VERSION
        ]
        pairs.sort(key=lambda item: item[1].display_key)
        return pairs

    def latest(self, versions: Iterable[str]) -> Optional[str]:
        """Return the newest version, ignoring the ``0.0.0`` placeholder."""
        pairs = self._real_versions(versions)
        return pairs[0][0] if pairs else None

    def latest_minor_versions(self, versions: Iterable[str]) -> List[str]:
        """Return every version in the newest ``major.minor`` line.

        For versions ``3.11.0, 3.11.1, 3.10.5`` this returns
        ``["3.11.1", "3.11.0"]``.
        """
        pairs = self._real_versions(versions)
        if not pairs:
            return []

        newest = pairs[0][1]
        return [
            raw
            for raw, parsed in pairs
            if (parsed.major, parsed.minor) == (newest.major, newest.minor)
        ]

    def last_minor_lines(
        self,
        versions: Iterable[str],
        count: int = DEFAULT_MINOR_LINES,
    ) -> List[Dict[str, int]]:
        """Return the newest distinct ``major.minor`` lines.

        Args:
            versions: Version strings to inspect.
            count: Maximum number of lines to return.

        Returns:
            Dicts with ``major`` and ``minor`` keys, newest first.
        """
        lines: List[Dict[str, int]] = []
        seen = set()

        if count <= 0:
            return lines

        for _, parsed in self._real_versions(versions):
            line = (parsed.major, parsed.minor)
            if line in seen:
                continue
            seen.add(line)
            lines.append({"major": parsed.major, "minor": parsed.minor})
            if len(lines) >= count:
                break

        return lines


def sort_for_display(versions: Sequence[str]) -> List[str]:
    """Order *versions* for display with a default :class:`ConstraintResolver`."""
    return ConstraintResolver().sort_for_display(versions)
