"""Best-effort cleanup of version labels coming from bulk imports.

Legacy hub data and GitHub release tags carry versions typed by humans over
many years: ``"Beta 1.9"``, ``"1.5.0 (SPT 3.11)"``, ``"13.9.1.27928"``,
``"SPT 3.8.0 (29197)"``. :class:`ImportNormalizer` turns any such string into
a valid :class:`VersionValue`:

1. The first run of up to three dot separated integers becomes
   ``major.minor.patch`` (padded with zeros, leading zeros dropped).
2. Everything else (prefix words, parenthetical notes, a fourth numeric
   group) is slugified and kept as build metadata, so distinct labels stay
   distinct without affecting ordering or constraint matching.
3. The result is handed to the strict parser.

Both entry points are total: they never raise for bad input, only for a
defect in the cleanup itself (:class:`NormalizationDefect`).
"""

from __future__ import annotations

import re
import unicodedata
from typing import Optional, Union

from forgekit.core.parser import VersionParser
from forgekit.constants import NULL_VERSION
from forgekit.models.version import VersionValue
from forgekit.utils.logger import get_logger
from forgekit.exceptions import InvalidVersionFormat, NormalizationDefect

logger = get_logger("normalizer")

# A leading "v" (only when a number follows) and any leading dots
_LEADING_NOISE = re.compile(r"^(?:[vV](?=[0-9.]))?\.*")

# pre-text, numeric core of at most three groups, post-text
_IMPORT_PATTERN = re.compile(
    r"^(?P<pre>.*?)(?P<core>[0-9]+(?:\.[0-9]+){0,2})(?P<post>.*)$",
    re.DOTALL,
)

# "SPT 3.8.0 (29197)" -> "3.8.0"
_SPT_TAG_PATTERN = re.compile(r"^SPT\s+([0-9]+\.[0-9]+\.[0-9]+).*", re.DOTALL)

_METADATA_DECORATION = " \t\r\n()[]{}-"

_SLUG_STRIP = re.compile(r"[^\w\s-]", re.ASCII)
_SLUG_SEPARATORS = re.compile(r"[\s_-]+", re.ASCII)


def slugify(text: str) -> str:
    """Reduce free text to a lowercase, hyphen-joined ASCII token.

    Punctuation is removed rather than replaced, so ``"3.11"`` becomes
    ``"311"`` and ``"r7 & r7.1"`` becomes ``"r7-r71"``.

    Args:
        text: Arbitrary text.

    Returns:
        Slug made of ``[a-z0-9-]``, without leading or trailing hyphens.
    """
    ascii_text = (
        unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    )
    stripped = _SLUG_STRIP.sub("", ascii_text).lower()
    return _SLUG_SEPARATORS.sub("-", stripped).strip("-")


class ImportNormalizer:
    """Total normalizer for versions found in imported data.

    Args:
        parser: Strict parser used to materialize the cleaned string.
    """

    def __init__(self, parser: Optional[VersionParser] = None) -> None:
        self.parser = parser or VersionParser()

    def clean_mod_import(self, raw: Union[str, int]) -> VersionValue:
        """Normalize a mod version number typed by a mod author.

        Examples::

            >>> normalizer = ImportNormalizer()
            >>> str(normalizer.clean_mod_import("Beta 1.9"))
            '1.9.0+beta'
            >>> str(normalizer.clean_mod_import("13.9.1.27928"))
            '13.9.1+27928'

        Args:
            raw: Free-text version label.

        Returns:
            A valid :class:`VersionValue`; ``0.0.0`` (plus metadata) when no
            number is present.
        """
        text = str(raw)
        candidate = self._build_candidate(text)
        return self._materialize(text, candidate)

    def clean_spt_import(self, raw: str) -> VersionValue:
        """Normalize an SPT release tag such as ``"SPT 3.8.0 (29197)"``.

        The ``SPT`` prefix and anything after the first full version (the
        build-id parenthetical) are discarded. Tags that do not follow that
        shape fall back to the mod-import rules, so this never raises for
        bad input.

        Args:
            raw: Release tag or name.

        Returns:
            A valid :class:`VersionValue`.
        """
        text = str(raw)
        cleaned = _SPT_TAG_PATTERN.sub(r"\1", text.strip())

        version = self.parser.try_parse(cleaned)
        if version is not None:
            return version

        logger.debug("SPT tag %r is not a plain version, cleaning as free text", text)
        return self.clean_mod_import(cleaned)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _build_candidate(self, text: str) -> str:
        """Compose a grammar-conformant version string from free text."""
        value = _LEADING_NOISE.sub("", text.strip(), count=1)

        match = _IMPORT_PATTERN.match(value)
        if match is None:
            core = NULL_VERSION
            metadata = slugify(value.strip(_METADATA_DECORATION))
        else:
            segments = match.group("core").split(".")
            segments += ["0"] * (3 - len(segments))
            core = ".".join(str(int(segment, 10)) for segment in segments)

            noise = match.group("pre") + match.group("post")
            metadata = slugify(noise.strip(_METADATA_DECORATION))

        return f"{core}+{metadata}" if metadata else core

    def _materialize(self, raw: str, candidate: str) -> VersionValue:
        try:
            return self.parser.parse(candidate)
        except InvalidVersionFormat as exc:
            raise NormalizationDefect(raw, candidate) from exc


_default_normalizer = ImportNormalizer()


def clean_mod_import(raw: Union[str, int]) -> VersionValue:
    """Normalize a mod version label with a shared :class:`ImportNormalizer`."""
    return _default_normalizer.clean_mod_import(raw)


def clean_spt_import(raw: str) -> VersionValue:
    """Normalize an SPT release tag with a shared :class:`ImportNormalizer`."""
    return _default_normalizer.clean_spt_import(raw)
