"""
forgekit version information.

This module provides a single source of truth for the package version.
It follows Semantic Versioning: https://semver.org/
"""

from __future__ import annotations

import re
from typing import Dict, Optional, Union

# ---------------------------------------------------------------------------
# Main version (single source of truth)
# ---------------------------------------------------------------------------

__version__ = "0.1.0"


# ---------------------------------------------------------------------------
# Structured version metadata
# ---------------------------------------------------------------------------


def _split_version(version: str) -> Dict[str, Union[int, Optional[str], bool]]:
    """Break the package version into components.

    Kept independent of :mod:`forgekit.core.parser` so that importing the
    version never pulls in the rest of the package.
    """
    match = re.match(r"^(\d+)\.(\d+)\.(\d+)(?:[.-]([a-zA-Z0-9]+))?$", version)

    if not match:
        raise ValueError(f"Invalid version string: {version}")

    major, minor, patch, pre = match.groups()

    return {
        "major": int(major),
        "minor": int(minor),
        "patch": int(patch),
        "prerelease": pre,
        "is_dev": pre is not None and pre.startswith("dev"),
    }


VERSION_INFO = _split_version(__version__)

VERSION_STRING = f"forgekit {__version__}"
