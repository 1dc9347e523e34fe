"""
Core functionality exports for forgekit.

This module provides convenient access to the core subsystems of forgekit.
Importing from here keeps user-facing imports clean and stable:

    from forgekit.core import VersionParser, ImportNormalizer
"""

from __future__ import annotations

from forgekit.core.parser import VersionParser, parse_version, try_parse_version
from forgekit.core.resolver import ConstraintResolver, sort_for_display
from forgekit.core.spam_checker import AkismetClient
from forgekit.core.normalizer import (
    ImportNormalizer,
    clean_mod_import,
    clean_spt_import,
    slugify,
)
from forgekit.core.constraints import (
    ConstraintGuesser,
    ConstraintRule,
    guess_semantic_constraint,
)
from forgekit.core.spam_lifecycle import (
    AsyncioRecheckScheduler,
    RecheckScheduler,
    SpamChecker,
    SpamCheckLifecycle,
)

__all__ = [
    # Version engine
    "VersionParser",
    "parse_version",
    "try_parse_version",
    "ImportNormalizer",
    "clean_mod_import",
    "clean_spt_import",
    "slugify",
    "ConstraintGuesser",
    "ConstraintRule",
    "guess_semantic_constraint",
    "ConstraintResolver",
    "sort_for_display",
    # Spam checks
    "AkismetClient",
    "SpamChecker",
    "SpamCheckLifecycle",
    "RecheckScheduler",
    "AsyncioRecheckScheduler",
]
