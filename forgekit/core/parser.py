"""Strict semantic version parser.

Accepts administrator-entered version numbers in the loose-but-unambiguous
forms the site has always allowed:

- Full versions (``1.2.3``)
- Shortened versions, with missing parts defaulting to zero (``1``, ``1.2``)
- A leading ``v`` or ``V`` (``v1.2.3``)
- A labels suffix holding a pre-release and/or build metadata
  (``1.0.0-rc.1``, ``1.0.0+build.5``, ``1.0.0-x.7.z.92+meta``); numeric
  pre-release identifiers may not have leading zeros (``1.0.0-rc.01``)

Anything else is rejected with :class:`InvalidVersionFormat`; this parser
never guesses. Cleaning up free-text import data is the job of
:mod:`forgekit.core.normalizer`.

Typical usage::

    from forgekit.core.parser import VersionParser

    parser = VersionParser()
    version = parser.parse("v1.2")
    print(version.canonical)   # "1.2.0"

    # Optional-returning variant for lenient callers
    if parser.try_parse(user_input) is None:
        ...
"""

from __future__ import annotations

import re
from typing import Optional, Pattern

from forgekit.models.version import VersionValue
from forgekit.exceptions import InvalidVersionFormat

# ---------------------------------------------------------------------------
# Grammar
# ---------------------------------------------------------------------------

#: Dot separated identifiers of letters, digits and hyphens.
_IDENTIFIERS = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"

#: Prerelease identifiers: numeric ones may not carry leading zeros.
_PRERELEASE_ID = r"(?:0|[1-9][0-9]*|[0-9]*[A-Za-z-][0-9A-Za-z-]*)"
_PRERELEASE = rf"{_PRERELEASE_ID}(?:\.{_PRERELEASE_ID})*"

VERSION_PATTERN: Pattern[str] = re.compile(
    r"[vV]?"
    r"(?P<major>[0-9]+)"
    r"(?:\.(?P<minor>[0-9]+))?"
    r"(?:\.(?P<patch>[0-9]+))?"
    rf"(?P<labels>(?:-{_PRERELEASE})?(?:\+{_IDENTIFIERS})?)"
)


class VersionParser:
    """Stateless strict parser producing :class:`VersionValue` objects.

    Instances hold no mutable state and may be shared across threads.
    """

    pattern: Pattern[str] = VERSION_PATTERN

    def parse(self, raw: str) -> VersionValue:
        """Parse *raw* into a :class:`VersionValue`.

        Args:
            raw: Version string to parse.

        Returns:
            The parsed version; missing minor/patch default to ``0``.

        Raises:
            InvalidVersionFormat: *raw* does not match the grammar.
        """
        if not isinstance(raw, str):
            raise InvalidVersionFormat(repr(raw))

        match = self.pattern.fullmatch(raw)
        if match is None:
            raise InvalidVersionFormat(raw)

        return VersionValue(
            major=int(match.group("major"), 10),
            minor=int(match.group("minor") or "0", 10),
            patch=int(match.group("patch") or "0", 10),
            labels=match.group("labels") or "",
        )

    def try_parse(self, raw: str) -> Optional[VersionValue]:
        """Parse *raw*, returning ``None`` instead of raising."""
        try:
            return self.parse(raw)
        except InvalidVersionFormat:
            return None

    def is_valid(self, raw: str) -> bool:
        """Return True if *raw* is accepted by the strict grammar."""
        return self.try_parse(raw) is not None


_default_parser = VersionParser()


def parse_version(raw: str) -> VersionValue:
    """Parse *raw* with a shared :class:`VersionParser`."""
    return _default_parser.parse(raw)


def try_parse_version(raw: str) -> Optional[VersionValue]:
    """Parse *raw* with a shared parser, returning ``None`` on failure."""
    return _default_parser.try_parse(raw)
