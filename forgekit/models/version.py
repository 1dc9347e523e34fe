"""
Parsed semantic version value for forgekit.

:class:`VersionValue` is the immutable result of strict parsing. It keeps
pre-release and build metadata together in a single opaque ``labels``
suffix, which is how versions are stored next to their canonical string.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union


@dataclass(frozen=True)
class VersionValue:
    """An immutable parsed semantic version.

    Instances are built by :class:`forgekit.core.parser.VersionParser`;
    constructing one directly skips grammar validation.

    Attributes:
        major: Major version number.
        minor: Minor version number (``0`` when absent from input).
        patch: Patch version number (``0`` when absent from input).
        labels: Pre-release and/or build suffix starting with ``-`` or
            ``+`` (e.g. ``"-rc.1+build.1"``), or ``""``.
    """

    major: int
    minor: int = 0
    patch: int = 0
    labels: str = ""

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")
        if self.labels and self.labels[0] not in "-+":
            raise ValueError(f"labels must start with '-' or '+', got {self.labels!r}")

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def canonical(self) -> str:
        """Normalized string form, ``{major}.{minor}.{patch}{labels}``."""
        return f"{self.major}.{self.minor}.{self.patch}{self.labels}"

    @property
    def release(self) -> Tuple[int, int, int]:
        """The numeric ``(major, minor, patch)`` triple."""
        return (self.major, self.minor, self.patch)

    @property
    def prerelease(self) -> str:
        """Pre-release identifiers without the leading ``-``, or ``""``."""
        if not self.labels.startswith("-"):
            return ""
        return self.labels[1:].split("+", 1)[0]

    @property
    def build(self) -> str:
        """Build metadata without the leading ``+``, or ``""``."""
        _, sep, build = self.labels.partition("+")
        return build if sep else ""

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    @property
    def display_key(self) -> Tuple[int, int, int, int, str]:
        """Sort key for user-facing listings.

        Sorting ascending by this key yields newest release first, plain
        releases ahead of labeled versions of the same release, and labels
        in lexicographic order among ties.
        """
        return (
            -self.major,
            -self.minor,
            -self.patch,
            1 if self.labels else 0,
            self.labels,
        )

    def to_fields(self) -> Dict[str, Union[str, int]]:
        """Return the column values stored alongside a version string."""
        return {
            "version": self.canonical,
            "version_major": self.major,
            "version_minor": self.minor,
            "version_patch": self.patch,
            "version_labels": self.labels,
        }

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "version": self.canonical,
            "major": self.major,
            "minor": self.minor,
            "patch": self.patch,
            "labels": self.labels,
            "prerelease": self.prerelease or None,
            "build": self.build or None,
        }

    def __str__(self) -> str:
        return self.canonical
