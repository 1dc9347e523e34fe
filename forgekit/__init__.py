"""
forgekit: version engine and comment spam-check lifecycle for a mod forge.

forgekit turns the free-form version labels mod authors type into strict
semantic versions, guesses compatibility constraints from legacy labels,
resolves which versions satisfy a constraint, and drives comments through
spam checking with the Akismet service.

Features include:
    • Strict semantic-version parsing with normalized fields
    • Total normalization of legacy mod and SPT version labels
    • Constraint guessing and npm-style range resolution
    • Spam-check state machine with bounded automatic rechecks
"""

from __future__ import annotations

from forgekit.__version__ import __version__
from forgekit.models import (
    CheckOutcome,
    Comment,
    SpamCheckResult,
    SpamCheckState,
    SpamStatus,
    VersionValue,
)
from forgekit.core import (
    AkismetClient,
    ConstraintGuesser,
    ConstraintResolver,
    ImportNormalizer,
    SpamCheckLifecycle,
    VersionParser,
)

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "forgekit Contributors"
__license__ = "Apache-2.0"
__description__ = "Version engine and spam-check lifecycle for mod forges."

__all__ = [
    "__version__",
    "VersionValue",
    "VersionParser",
    "ImportNormalizer",
    "ConstraintGuesser",
    "ConstraintResolver",
    "Comment",
    "SpamStatus",
    "SpamCheckState",
    "SpamCheckResult",
    "CheckOutcome",
    "AkismetClient",
    "SpamCheckLifecycle",
]
