"""
Comment data model for forgekit.

Only the fields the spam lifecycle and the spam-detection payload need are
modelled here; storage and rendering belong to the host application.
"""

from __future__ import annotations

from datetime import datetime
from dataclasses import dataclass, field
from typing import Optional

from forgekit.models.spam import SpamCheckState


@dataclass
class Comment:
    """A user comment subject to spam checking.

    Attributes:
        id: Comment identifier.
        body: Comment text.
        author_name: Display name of the author.
        author_email: Email address of the author.
        user_ip: IP address the comment was posted from.
        user_agent: Browser user agent of the author.
        referrer: HTTP referrer at posting time.
        permalink: Public URL of the comment.
        is_reply: Whether the comment answers another comment.
        author_is_staff: Whether the author is a moderator or administrator.
        created_at: When the comment was posted (UTC).
        commentable_created_at: When the commented resource was created.
        spam: Spam-check bookkeeping.
        deleted_at: Set when the comment was removed as discarded spam.
    """

    id: int
    body: str
    author_name: str = ""
    author_email: str = ""
    user_ip: Optional[str] = None
    user_agent: Optional[str] = None
    referrer: Optional[str] = None
    permalink: Optional[str] = None
    is_reply: bool = False
    author_is_staff: bool = False
    created_at: Optional[datetime] = None
    commentable_created_at: Optional[datetime] = None
    spam: SpamCheckState = field(default_factory=SpamCheckState)
    deleted_at: Optional[datetime] = None

    @property
    def comment_type(self) -> str:
        return "reply" if self.is_reply else "comment"

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
