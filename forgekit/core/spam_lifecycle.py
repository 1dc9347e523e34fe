"""Spam-check lifecycle for comments.

Drives a comment's :class:`~forgekit.models.spam.SpamCheckState` through
``pending -> clean | spam``, including automatic rechecks recommended by
the spam-detection service and manual moderator overrides.

Rules enforced by :meth:`SpamCheckLifecycle.request_check`:

1. An initial check on an already-checked comment does nothing.
2. A recheck only runs while ``recheck_count < max_attempts``; the same
   guard is evaluated again before scheduling a follow-up recheck.
3. A transient service failure (:class:`SpamCheckError`) leaves the state
   untouched and is reported as :attr:`CheckOutcome.FAILED`.
4. Spam the service recommends discarding is soft-deleted.

Checks of one comment are serialized by a per-comment lock, which is
forgotten again once no check of that comment holds or awaits it. Scheduled
rechecks are fire-and-forget; the max-attempts guard is the only limit on
how many run, and there is no way to cancel one once scheduled.

Typical usage::

    async with HTTPClient() as http:
        lifecycle = SpamCheckLifecycle(AkismetClient(config, http), config=config)
        outcome = await lifecycle.request_check(comment)
        await lifecycle.scheduler.join()
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Dict,
    Optional,
    Protocol,
    Set,
    Tuple,
)

from forgekit.config import ForgeKitConfig
from forgekit.exceptions import SpamCheckError
from forgekit.models.comment import Comment
from forgekit.utils.logger import extra_context, get_logger
from forgekit.models.spam import CheckOutcome, SpamCheckResult, SpamStatus

logger = get_logger("spam_lifecycle")

__all__ = [
    "AsyncioRecheckScheduler",
    "RecheckScheduler",
    "SpamChecker",
    "SpamCheckLifecycle",
]

RecheckJob = Callable[[], Awaitable[Any]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Collaborator protocols
# ---------------------------------------------------------------------------


class SpamChecker(Protocol):
    """What the lifecycle needs from a spam-detection client."""

    async def check_spam(self, comment: Comment) -> SpamCheckResult: ...

    async def submit_ham(self, comment: Comment) -> bool: ...

    async def submit_spam(self, comment: Comment) -> bool: ...


class RecheckScheduler(Protocol):
    """Runs a recheck job after a delay without blocking the caller."""

    def schedule(self, delay: float, job: RecheckJob) -> None: ...


# ---------------------------------------------------------------------------
# Default scheduler
# ---------------------------------------------------------------------------


class AsyncioRecheckScheduler:
    """Schedule delayed rechecks as background tasks on the running loop.

    Tasks are tracked so that :meth:`join` can wait for every outstanding
    recheck, including rechecks scheduled by other rechecks.
    """

    def __init__(self) -> None:
        self._tasks: Set["asyncio.Task[None]"] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def schedule(self, delay: float, job: RecheckJob) -> None:
        task = asyncio.get_running_loop().create_task(self._run(delay, job))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, delay: float, job: RecheckJob) -> None:
        await asyncio.sleep(delay)
        try:
            await job()
        except Exception:
            logger.exception("Scheduled spam recheck failed")

    async def join(self) -> None:
        """Wait until no scheduled recheck remains."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class SpamCheckLifecycle:
    """State machine coordinating spam checks for comments.

    Args:
        checker: Spam-detection client, typically
            :class:`~forgekit.core.spam_checker.AkismetClient`.
        config: Configuration supplying ``spam_check_enabled`` and
            ``max_recheck_attempts``. Defaults to built-in defaults.
        scheduler: Where follow-up rechecks are scheduled. Defaults to a
            new :class:`AsyncioRecheckScheduler`.
        clock: Returns the current UTC time.
    """

    def __init__(
        self,
        checker: SpamChecker,
        *,
        config: Optional[ForgeKitConfig] = None,
        scheduler: Optional[RecheckScheduler] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.checker = checker
        self.config = config if config is not None else ForgeKitConfig()
        self.scheduler = scheduler if scheduler is not None else AsyncioRecheckScheduler()
        self._clock = clock or _utcnow
        # comment id -> (lock, number of holders and waiters)
        self._locks: Dict[Any, Tuple[asyncio.Lock, int]] = {}

    @property
    def max_attempts(self) -> int:
        return self.config.max_recheck_attempts

    def can_be_rechecked(self, comment: Comment) -> bool:
        """Return True while *comment* has recheck attempts left."""
        return comment.spam.recheck_count < self.max_attempts

    @asynccontextmanager
    async def _lock_for(self, comment: Comment) -> AsyncIterator[None]:
        """Hold the comment's lock; the entry is dropped once nobody uses it."""
        key = comment.id
        entry = self._locks.get(key)
        lock, users = entry if entry is not None else (asyncio.Lock(), 0)
        self._locks[key] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._locks[key]
            if users == 1:
                del self._locks[key]
            else:
                self._locks[key] = (lock, users - 1)

    # ------------------------------------------------------------------
    # Automatic checks
    # ------------------------------------------------------------------

    async def request_check(
        self,
        comment: Comment,
        is_recheck: bool = False,
    ) -> CheckOutcome:
        """Check *comment* for spam and update its state.

        Args:
            comment: Comment to check. Its ``spam`` state is updated in place.
            is_recheck: ``True`` for a follow-up check; bypasses the
                already-checked guard but counts against
                ``max_recheck_attempts``.

        Returns:
            What happened. ``FAILED`` means the service could not be
            reached and nothing was changed.
        """
        async with self._lock_for(comment):
            return await self._check(comment, is_recheck)

    async def _check(self, comment: Comment, is_recheck: bool) -> CheckOutcome:
        state = comment.spam

        if comment.is_deleted:
            logger.debug(
                "Skipping spam check - comment deleted",
                extra=extra_context(comment_id=comment.id),
            )
            return CheckOutcome.SKIPPED

        if not is_recheck and state.checked_at is not None:
            logger.debug(
                "Skipping spam check - already checked",
                extra=extra_context(comment_id=comment.id),
            )
            return CheckOutcome.SKIPPED

        if is_recheck and not self.can_be_rechecked(comment):
            logger.info(
                "Skipping spam recheck - maximum attempts reached",
                extra=extra_context(
                    comment_id=comment.id,
                    recheck_count=state.recheck_count,
                    max_attempts=self.max_attempts,
                ),
            )
            return CheckOutcome.SKIPPED

        if not self.config.spam_check_enabled:
            self._apply(comment, SpamStatus.CLEAN, {"reason": "spam_check_disabled"})
            return CheckOutcome.CLEAN

        try:
            result = await self.checker.check_spam(comment)
        except SpamCheckError as exc:
            logger.warning(
                "Spam check failed, state left unchanged: %s",
                exc.message,
                extra=extra_context(
                    comment_id=comment.id,
                    is_recheck=is_recheck,
                    status_code=exc.status_code,
                ),
            )
            return CheckOutcome.FAILED

        if is_recheck:
            state.recheck_count += 1

        now = self._apply(comment, result.status, dict(result.metadata))

        if result.should_auto_delete:
            comment.deleted_at = now
            logger.info(
                "Deleted comment flagged for discard",
                extra=extra_context(comment_id=comment.id),
            )
            return CheckOutcome.DELETED

        self.schedule_recheck_if_needed(comment, result)

        return CheckOutcome.SPAM if result.is_spam else CheckOutcome.CLEAN

    def schedule_recheck_if_needed(
        self,
        comment: Comment,
        result: SpamCheckResult,
    ) -> bool:
        """Schedule a follow-up recheck when *result* asks for one.

        Returns:
            True if a recheck was scheduled.
        """
        if not result.recheck_after:
            return False

        if not self.can_be_rechecked(comment):
            logger.info(
                "Skipping spam recheck scheduling - maximum attempts reached",
                extra=extra_context(
                    comment_id=comment.id,
                    recheck_count=comment.spam.recheck_count,
                    max_attempts=self.max_attempts,
                ),
            )
            return False

        try:
            delay = max(0, int(result.recheck_after.strip()))
        except ValueError:
            logger.warning(
                "Ignoring malformed recheck delay %r",
                result.recheck_after,
                extra=extra_context(comment_id=comment.id),
            )
            return False

        try:
            self.scheduler.schedule(
                delay,
                lambda: self.request_check(comment, is_recheck=True),
            )
        except Exception as exc:
            logger.error(
                "Failed to schedule spam recheck: %s",
                exc,
                extra=extra_context(
                    comment_id=comment.id,
                    recheck_after=result.recheck_after,
                ),
            )
            return False

        logger.info(
            "Scheduled spam recheck",
            extra=extra_context(
                comment_id=comment.id,
                recheck_delay_seconds=delay,
                recheck_at=(self._clock() + timedelta(seconds=delay)).isoformat(),
                current_recheck_count=comment.spam.recheck_count,
            ),
        )
        return True

    # ------------------------------------------------------------------
    # Moderator overrides
    # ------------------------------------------------------------------

    async def approve(self, comment: Comment) -> None:
        """Mark *comment* as ham after moderator review and report it.

        ``recheck_count`` is left as it is.
        """
        async with self._lock_for(comment):
            now = self._clock()
            self._apply(
                comment,
                SpamStatus.CLEAN,
                {"manually_approved": True, "approved_at": now.isoformat()},
                now=now,
            )
            await self.checker.submit_ham(comment)

    async def flag_as_spam(self, comment: Comment, moderator_id: int) -> None:
        """Mark *comment* as spam on behalf of a moderator and report it.

        ``recheck_count`` is left as it is.
        """
        async with self._lock_for(comment):
            now = self._clock()
            self._apply(
                comment,
                SpamStatus.SPAM,
                {
                    "manually_marked": True,
                    "marked_by": moderator_id,
                    "marked_at": now.isoformat(),
                },
                now=now,
            )
            await self.checker.submit_spam(comment)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _apply(
        self,
        comment: Comment,
        status: SpamStatus,
        metadata: Dict[str, Any],
        *,
        now: Optional[datetime] = None,
    ) -> datetime:
        now = now or self._clock()
        comment.spam.status = status
        comment.spam.metadata = metadata
        comment.spam.checked_at = now
        return now
