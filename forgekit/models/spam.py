"""
Spam-check data models for forgekit.

This module defines the per-comment spam state, the verdict returned by
the spam-detection service, and the outcome reported back to callers of
the spam lifecycle.
"""

from __future__ import annotations

from enum import Enum
from datetime import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


class SpamStatus(str, Enum):
    """Spam classification of a comment."""

    PENDING = "pending"
    CLEAN = "clean"
    SPAM = "spam"


class CheckOutcome(str, Enum):
    """What a check request did.

    ``FAILED`` means the external service could not give a verdict and the
    comment's state was left alone; it is deliberately distinct from
    ``CLEAN``.
    """

    SKIPPED = "skipped"
    CLEAN = "clean"
    SPAM = "spam"
    DELETED = "deleted"
    FAILED = "failed"


@dataclass
class SpamCheckState:
    """Mutable spam-check bookkeeping attached to one comment.

    Attributes:
        status: Current classification.
        recheck_count: Number of completed automatic rechecks.
        checked_at: When the last check completed, if ever.
        metadata: Diagnostic data recorded with the last verdict.
    """

    status: SpamStatus = SpamStatus.PENDING
    recheck_count: int = 0
    checked_at: Optional[datetime] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_spam(self) -> bool:
        return self.status is SpamStatus.SPAM

    @property
    def is_clean(self) -> bool:
        return self.status is SpamStatus.CLEAN

    @property
    def is_pending(self) -> bool:
        return self.status is SpamStatus.PENDING

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "status": self.status.value,
            "recheck_count": self.recheck_count,
            "checked_at": self.checked_at.isoformat() if self.checked_at else None,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class SpamCheckResult:
    """Verdict from the spam-detection service.

    Args:
        is_spam: Whether the service classified the comment as spam.
        metadata: Free-form diagnostic data to store with the comment.
        discard: The service is confident enough to recommend deletion.
        pro_tip: Raw ``X-akismet-pro-tip`` header value.
        recheck_after: Raw ``X-akismet-recheck-after`` header value, in
            seconds.
    """

    is_spam: bool
    metadata: Dict[str, Any] = field(default_factory=dict)
    discard: bool = False
    pro_tip: Optional[str] = None
    recheck_after: Optional[str] = None

    @property
    def status(self) -> SpamStatus:
        return SpamStatus.SPAM if self.is_spam else SpamStatus.CLEAN

    @property
    def should_auto_delete(self) -> bool:
        """Return True for spam the service recommends discarding outright."""
        return self.is_spam and self.discard
