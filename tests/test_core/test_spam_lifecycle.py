from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest

from forgekit.config import ForgeKitConfig
from forgekit.core.spam_lifecycle import AsyncioRecheckScheduler, SpamCheckLifecycle
from forgekit.exceptions import SpamCheckError
from forgekit.models.comment import Comment
from forgekit.models.spam import CheckOutcome, SpamCheckResult, SpamStatus

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class RecordingScheduler:
    """Scheduler that keeps jobs instead of running them."""

    def __init__(self) -> None:
        self.jobs: List[Tuple[float, Any]] = []

    def schedule(self, delay: float, job: Any) -> None:
        self.jobs.append((delay, job))

    async def run_next(self) -> Any:
        _, job = self.jobs.pop(0)
        return await job()


def _checker(*results: Any) -> MagicMock:
    checker = MagicMock()
    checker.check_spam = AsyncMock(side_effect=list(results))
    checker.submit_ham = AsyncMock(return_value=True)
    checker.submit_spam = AsyncMock(return_value=True)
    return checker


def _lifecycle(
    checker: MagicMock,
    scheduler: Optional[Any] = None,
    **config: Any,
) -> SpamCheckLifecycle:
    values = {"spam_check_enabled": True, "max_recheck_attempts": 3}
    values.update(config)
    return SpamCheckLifecycle(
        checker,
        config=ForgeKitConfig(**values),
        scheduler=scheduler or RecordingScheduler(),
        clock=lambda: NOW,
    )


def _clean(**kwargs: Any) -> SpamCheckResult:
    return SpamCheckResult(is_spam=False, metadata={"akismet_response": "false"}, **kwargs)


def _spam(**kwargs: Any) -> SpamCheckResult:
    return SpamCheckResult(is_spam=True, metadata={"akismet_response": "true"}, **kwargs)


@pytest.fixture
def comment() -> Comment:
    """A fresh, unchecked comment.

    Returns:
        Comment instance.
    """
    return Comment(id=7, body="Buy cheap mods now")


@pytest.mark.unit
class TestRequestCheck:
    """Tests for the initial check path."""

    @pytest.mark.asyncio
    async def test_clean_verdict(self, comment: Comment) -> None:
        """Test a clean verdict is stored on the comment.

        Args:
            comment: Comment fixture.
        """
        lifecycle = _lifecycle(_checker(_clean()))

        outcome = await lifecycle.request_check(comment)

        assert outcome is CheckOutcome.CLEAN
        assert comment.spam.status is SpamStatus.CLEAN
        assert comment.spam.checked_at == NOW
        assert comment.spam.metadata == {"akismet_response": "false"}
        assert comment.spam.recheck_count == 0

    @pytest.mark.asyncio
    async def test_spam_verdict(self, comment: Comment) -> None:
        lifecycle = _lifecycle(_checker(_spam()))

        assert await lifecycle.request_check(comment) is CheckOutcome.SPAM
        assert comment.spam.is_spam
        assert comment.is_deleted is False

    @pytest.mark.asyncio
    async def test_discarded_spam_is_deleted(self, comment: Comment) -> None:
        scheduler = RecordingScheduler()
        lifecycle = _lifecycle(_checker(_spam(discard=True, recheck_after="60")), scheduler)

        assert await lifecycle.request_check(comment) is CheckOutcome.DELETED
        assert comment.deleted_at == NOW
        assert comment.spam.is_spam
        assert scheduler.jobs == []

    @pytest.mark.asyncio
    async def test_already_checked_is_skipped(self, comment: Comment) -> None:
        checker = _checker(_spam())
        comment.spam.checked_at = NOW

        assert await _lifecycle(checker).request_check(comment) is CheckOutcome.SKIPPED
        checker.check_spam.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deleted_comment_is_skipped(self, comment: Comment) -> None:
        checker = _checker(_spam())
        comment.deleted_at = NOW

        assert await _lifecycle(checker).request_check(comment) is CheckOutcome.SKIPPED
        checker.check_spam.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disabled_marks_clean_without_call(self, comment: Comment) -> None:
        checker = _checker()

        outcome = await _lifecycle(checker, spam_check_enabled=False).request_check(comment)

        assert outcome is CheckOutcome.CLEAN
        assert comment.spam.is_clean
        assert comment.spam.metadata == {"reason": "spam_check_disabled"}
        checker.check_spam.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_service_failure_leaves_state_alone(self, comment: Comment) -> None:
        checker = _checker(SpamCheckError("timeout", comment_id=7, status_code=503))

        outcome = await _lifecycle(checker).request_check(comment)

        assert outcome is CheckOutcome.FAILED
        assert comment.spam.is_pending
        assert comment.spam.checked_at is None
        assert comment.spam.metadata == {}


@pytest.mark.unit
class TestRechecks:
    """Tests for scheduled rechecks."""

    @pytest.mark.asyncio
    async def test_recheck_is_scheduled(self, comment: Comment) -> None:
        scheduler = RecordingScheduler()
        lifecycle = _lifecycle(_checker(_clean(recheck_after="120")), scheduler)

        await lifecycle.request_check(comment)

        assert [delay for delay, _ in scheduler.jobs] == [120]

    @pytest.mark.asyncio
    async def test_scheduled_job_runs_a_recheck(self, comment: Comment) -> None:
        scheduler = RecordingScheduler()
        checker = _checker(_clean(recheck_after="120"), _spam())
        lifecycle = _lifecycle(checker, scheduler)

        await lifecycle.request_check(comment)
        outcome = await scheduler.run_next()

        assert outcome is CheckOutcome.SPAM
        assert comment.spam.recheck_count == 1
        assert comment.spam.is_spam
        assert scheduler.jobs == []

    @pytest.mark.asyncio
    async def test_rechecks_stop_at_max_attempts(self, comment: Comment) -> None:
        scheduler = RecordingScheduler()
        checker = _checker(*[_clean(recheck_after="5") for _ in range(3)])
        lifecycle = _lifecycle(checker, scheduler, max_recheck_attempts=2)

        await lifecycle.request_check(comment)
        await scheduler.run_next()
        assert len(scheduler.jobs) == 1

        await scheduler.run_next()

        assert comment.spam.recheck_count == 2
        assert scheduler.jobs == []
        assert checker.check_spam.await_count == 3

    @pytest.mark.asyncio
    async def test_recheck_beyond_limit_is_noop(self, comment: Comment) -> None:
        checker = _checker(_spam())
        comment.spam.checked_at = NOW
        comment.spam.recheck_count = 3

        outcome = await _lifecycle(checker).request_check(comment, is_recheck=True)

        assert outcome is CheckOutcome.SKIPPED
        assert comment.spam.recheck_count == 3
        checker.check_spam.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_zero_attempts_never_schedules(self, comment: Comment) -> None:
        scheduler = RecordingScheduler()
        lifecycle = _lifecycle(_checker(_clean(recheck_after="60")), scheduler, max_recheck_attempts=0)

        await lifecycle.request_check(comment)

        assert scheduler.jobs == []

    @pytest.mark.asyncio
    async def test_failed_recheck_does_not_count(self, comment: Comment) -> None:
        checker = _checker(SpamCheckError("boom"))
        comment.spam.checked_at = NOW
        comment.spam.status = SpamStatus.CLEAN

        outcome = await _lifecycle(checker).request_check(comment, is_recheck=True)

        assert outcome is CheckOutcome.FAILED
        assert comment.spam.recheck_count == 0
        assert comment.spam.is_clean

    @pytest.mark.parametrize("raw", ["soon", "", "1.5"])
    def test_malformed_delay_is_ignored(self, comment: Comment, raw: str) -> None:
        """Test unparsable recheck delays schedule nothing.

        Args:
            comment: Comment fixture.
            raw: Header value.
        """
        scheduler = RecordingScheduler()
        lifecycle = _lifecycle(_checker(), scheduler)

        assert lifecycle.schedule_recheck_if_needed(comment, _clean(recheck_after=raw)) is False
        assert scheduler.jobs == []

    def test_negative_delay_is_clamped(self, comment: Comment) -> None:
        scheduler = RecordingScheduler()
        lifecycle = _lifecycle(_checker(), scheduler)

        assert lifecycle.schedule_recheck_if_needed(comment, _clean(recheck_after="-30")) is True
        assert scheduler.jobs[0][0] == 0

    @pytest.mark.asyncio
    async def test_scheduler_failure_is_contained(self, comment: Comment) -> None:
        scheduler = MagicMock()
        scheduler.schedule.side_effect = RuntimeError("queue unavailable")
        lifecycle = _lifecycle(_checker(_clean(recheck_after="60")), scheduler)

        assert await lifecycle.request_check(comment) is CheckOutcome.CLEAN
        scheduler.schedule.assert_called_once()


@pytest.mark.unit
class TestModeratorOverrides:
    """Tests for approve and flag_as_spam."""

    @pytest.mark.asyncio
    async def test_approve(self, comment: Comment) -> None:
        checker = _checker()
        comment.spam.status = SpamStatus.SPAM
        comment.spam.recheck_count = 2

        await _lifecycle(checker).approve(comment)

        assert comment.spam.is_clean
        assert comment.spam.checked_at == NOW
        assert comment.spam.metadata == {
            "manually_approved": True,
            "approved_at": NOW.isoformat(),
        }
        assert comment.spam.recheck_count == 2
        checker.submit_ham.assert_awaited_once_with(comment)

    @pytest.mark.asyncio
    async def test_flag_as_spam(self, comment: Comment) -> None:
        checker = _checker()
        comment.spam.recheck_count = 1

        await _lifecycle(checker).flag_as_spam(comment, moderator_id=99)

        assert comment.spam.is_spam
        assert comment.spam.metadata == {
            "manually_marked": True,
            "marked_by": 99,
            "marked_at": NOW.isoformat(),
        }
        assert comment.spam.recheck_count == 1
        checker.submit_spam.assert_awaited_once_with(comment)

    @pytest.mark.asyncio
    async def test_overrides_work_when_checking_disabled(self, comment: Comment) -> None:
        checker = _checker()

        await _lifecycle(checker, spam_check_enabled=False).flag_as_spam(comment, moderator_id=1)

        assert comment.spam.is_spam


@pytest.mark.unit
class TestCommentLocks:
    """Tests for the per-comment lock registry."""

    @pytest.mark.asyncio
    async def test_locks_released_after_many_comments(self) -> None:
        lifecycle = _lifecycle(_checker(*[_clean() for _ in range(200)]))

        for comment_id in range(200):
            await lifecycle.request_check(Comment(id=comment_id, body="hello"))

        assert lifecycle._locks == {}

    @pytest.mark.asyncio
    async def test_concurrent_checks_share_then_release_lock(self, comment: Comment) -> None:
        """Test two checks of one comment run one after the other.

        Args:
            comment: Comment fixture.
        """
        release = asyncio.Event()
        holders = []

        async def slow_check(checked: Comment) -> SpamCheckResult:
            await release.wait()
            holders.append(lifecycle._locks[checked.id][1])
            return _clean()

        checker = _checker()
        checker.check_spam = AsyncMock(side_effect=slow_check)
        lifecycle = _lifecycle(checker)

        first = asyncio.ensure_future(lifecycle.request_check(comment))
        second = asyncio.ensure_future(lifecycle.request_check(comment))
        await asyncio.sleep(0)
        release.set()
        outcomes = await asyncio.gather(first, second)

        assert outcomes == [CheckOutcome.CLEAN, CheckOutcome.SKIPPED]
        assert holders == [2]
        assert checker.check_spam.await_count == 1
        assert lifecycle._locks == {}

    @pytest.mark.asyncio
    async def test_lock_released_after_moderator_action_and_failure(self, comment: Comment) -> None:
        lifecycle = _lifecycle(_checker(SpamCheckError("boom")))

        assert await lifecycle.request_check(comment) is CheckOutcome.FAILED
        await lifecycle.approve(comment)
        await lifecycle.flag_as_spam(comment, moderator_id=3)

        assert lifecycle._locks == {}


@pytest.mark.unit
class TestAsyncioRecheckScheduler:
    """Tests for the default asyncio scheduler."""

    @pytest.mark.asyncio
    async def test_runs_job_and_join_waits(self) -> None:
        scheduler = AsyncioRecheckScheduler()
        ran = asyncio.Event()

        async def job() -> None:
            ran.set()

        scheduler.schedule(0, job)
        assert scheduler.pending == 1

        await scheduler.join()

        assert ran.is_set()
        assert scheduler.pending == 0

    @pytest.mark.asyncio
    async def test_failing_job_is_logged_not_raised(self) -> None:
        scheduler = AsyncioRecheckScheduler()

        async def job() -> None:
            raise RuntimeError("boom")

        scheduler.schedule(0, job)
        await scheduler.join()

        assert scheduler.pending == 0

    @pytest.mark.asyncio
    async def test_end_to_end_recheck(self, comment: Comment) -> None:
        scheduler = AsyncioRecheckScheduler()
        checker = _checker(_clean(recheck_after="0"), _spam())
        lifecycle = _lifecycle(checker, scheduler)

        await lifecycle.request_check(comment)
        await scheduler.join()

        assert comment.spam.is_spam
        assert comment.spam.recheck_count == 1
