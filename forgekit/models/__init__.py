"""
Unified data model exports for forgekit.

This module re-exports all core data models to provide a stable and
convenient public API. Users can import models directly from
``forgekit.models`` instead of individual submodules.

Example:
    >>> from forgekit.models import VersionValue, Comment, SpamStatus
"""

from __future__ import annotations

from forgekit.models.comment import Comment
from forgekit.models.version import VersionValue
from forgekit.models.spam import (
    CheckOutcome,
    SpamCheckResult,
    SpamCheckState,
    SpamStatus,
)

__all__ = [
    "VersionValue",
    "Comment",
    "CheckOutcome",
    "SpamCheckResult",
    "SpamCheckState",
    "SpamStatus",
]
