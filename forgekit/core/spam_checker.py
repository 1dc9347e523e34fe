"""Akismet spam-detection client for forgekit.

Wraps the Akismet REST API on top of the shared async
:class:`~forgekit.utils.http.HTTPClient`:

- ``verify_key``: ``POST /1.1/verify-key`` (cached per key for a day)
- ``check_spam``: ``POST /1.1/comment-check``
- ``submit_ham``: ``POST /1.1/submit-ham``
- ``submit_spam``: ``POST /1.1/submit-spam``
- ``usage_limit``: ``GET /1.2/usage-limit``

``check_spam`` never hides a failed call behind a "not spam" verdict: any
network or protocol failure surfaces as :class:`SpamCheckError` so the
lifecycle can leave the comment untouched and report the failure.

Typical usage::

    async with HTTPClient() as http:
        client = AkismetClient(config, http)
        result = await client.check_spam(comment)
        if result.should_auto_delete:
            ...
"""

from __future__ import annotations

import time
import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple

import httpx

from forgekit.config import ForgeKitConfig
from forgekit.utils.http import HTTPClient
from forgekit.models.comment import Comment
from forgekit.models.spam import SpamCheckResult
from forgekit.exceptions import NetworkError, SpamCheckError
from forgekit.utils.logger import extra_context, get_logger
from forgekit.constants import (
    AKISMET_API_VERSION,
    AKISMET_BASE_URL,
    AKISMET_KEY_CACHE_TTL,
)

logger = get_logger("spam_checker")

__all__ = ["AkismetClient"]

_GMT_FORMAT = "%Y-%m-%d %H:%M:%S"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _gmt(value: Optional[datetime]) -> Optional[str]:
    """Format *value* as an Akismet GMT timestamp; naive values are UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(_GMT_FORMAT)


class AkismetClient:
    """Async client for the Akismet spam-detection service.

    Args:
        config: Loaded forgekit configuration (enablement, key, blog URL,
            test mode).
        http_client: Shared HTTP client; the caller owns its lifetime.
        base_url: Akismet REST endpoint.
        language: Site language reported as ``blog_lang``.
        clock: Returns the current UTC time; used for result metadata.
        monotonic: Monotonic time source for the key-verification cache.
    """

    def __init__(
        self,
        config: ForgeKitConfig,
        http_client: HTTPClient,
        *,
        base_url: str = AKISMET_BASE_URL,
        language: str = "en",
        clock: Callable[[], datetime] = _utcnow,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.language = language
        self._clock = clock
        self._monotonic = monotonic

        # api key -> (is_valid, expires_at)
        self._key_cache: Dict[str, Tuple[bool, float]] = {}
        self._key_lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self.config.spam_check_enabled

    # ------------------------------------------------------------------
    # Key verification
    # ------------------------------------------------------------------

    async def verify_key(self) -> bool:
        """Return whether the configured API key is accepted by Akismet.

        Returns ``False`` when spam checking is disabled, no key is
        configured, or the verification call fails. Definitive answers
        are cached for a day; failed calls are not cached.
        """
        if not self.enabled:
            return False

        try:
            return await self._key_is_valid()
        except NetworkError as exc:
            logger.error(
                "Akismet key verification error: %s",
                exc,
                extra=extra_context(status_code=exc.status_code),
            )
            return False

    async def _key_is_valid(self) -> bool:
        """Verify the key, propagating :class:`NetworkError` on failure."""
        api_key = self.config.akismet_api_key
        if not api_key:
            logger.warning("Akismet API key is not configured")
            return False

        cached = self._cached_key_verdict(api_key)
        if cached is not None:
            return cached

        async with self._key_lock:
            cached = self._cached_key_verdict(api_key)
            if cached is not None:
                return cached

            response = await self.http_client.post_form(
                self._url("/1.1/verify-key"),
                {"key": api_key, "blog": self.config.akismet_blog_url},
            )
            is_valid = response.text.strip() == "valid"

            if not is_valid:
                logger.warning(
                    "Akismet API key verification failed",
                    extra=extra_context(
                        debug_help=response.headers.get("X-akismet-debug-help")
                    ),
                )

            self._key_cache[api_key] = (
                is_valid,
                self._monotonic() + AKISMET_KEY_CACHE_TTL,
            )
            return is_valid

    def _cached_key_verdict(self, api_key: str) -> Optional[bool]:
        entry = self._key_cache.get(api_key)
        if entry is None:
            return None
        is_valid, expires_at = entry
        if self._monotonic() >= expires_at:
            del self._key_cache[api_key]
            return None
        return is_valid

    # ------------------------------------------------------------------
    # Comment check
    # ------------------------------------------------------------------

    async def check_spam(self, comment: Comment) -> SpamCheckResult:
        """Classify *comment* with Akismet.

        Args:
            comment: The comment to check.

        Returns:
            The verdict. When checking is disabled the result is "not spam"
            with ``{"reason": "spam_check_disabled"}``; when the key is
            rejected it is "not spam" with ``{"error": "invalid_api_key"}``.

        Raises:
            SpamCheckError: Akismet could not be reached or answered with
                something other than ``true``/``false``.
        """
        if not self.enabled:
            return SpamCheckResult(
                is_spam=False,
                metadata={"reason": "spam_check_disabled"},
            )

        try:
            if not await self._key_is_valid():
                return SpamCheckResult(
                    is_spam=False,
                    metadata={"error": "invalid_api_key"},
                )

            url = self._url("/1.1/comment-check")
            response = await self.http_client.post_form(
                url,
                self._prepare_payload(comment),
            )
        except NetworkError as exc:
            raise SpamCheckError(
                f"Spam check failed for comment {comment.id}: {exc.message}",
                comment_id=comment.id,
                url=exc.url,
                status_code=exc.status_code,
                response_body=exc.response_body,
            ) from exc

        return self._parse_check_response(comment, response, url)

    def _parse_check_response(
        self,
        comment: Comment,
        response: httpx.Response,
        url: str,
    ) -> SpamCheckResult:
        body = response.text.strip()
        if body not in ("true", "false"):
            raise SpamCheckError(
                f"Unexpected Akismet response for comment {comment.id}: {body!r}",
                comment_id=comment.id,
                url=url,
                status_code=response.status_code,
                response_body=response.headers.get("X-akismet-debug-help") or body,
            )

        pro_tip = response.headers.get("X-akismet-pro-tip") or None
        recheck_after = response.headers.get("X-akismet-recheck-after") or None

        metadata: Dict[str, Any] = {
            "akismet_response": body,
            "checked_at": self._clock().isoformat(),
            "api_version": AKISMET_API_VERSION,
        }
        if pro_tip:
            metadata["pro_tip"] = pro_tip
        if recheck_after:
            metadata["recheck_after"] = recheck_after

        result = SpamCheckResult(
            is_spam=body == "true",
            metadata=metadata,
            discard=pro_tip == "discard",
            pro_tip=pro_tip,
            recheck_after=recheck_after,
        )
        logger.debug(
            "Akismet verdict received",
            extra=extra_context(
                comment_id=comment.id,
                is_spam=result.is_spam,
                pro_tip=pro_tip,
                recheck_after=recheck_after,
            ),
        )
        return result

    # ------------------------------------------------------------------
    # Training feedback
    # ------------------------------------------------------------------

    async def submit_ham(self, comment: Comment) -> bool:
        """Report *comment* as a false positive. Returns True if sent."""
        return await self._submit("/1.1/submit-ham", comment, label="ham")

    async def submit_spam(self, comment: Comment) -> bool:
        """Report *comment* as missed spam. Returns True if sent."""
        return await self._submit("/1.1/submit-spam", comment, label="spam")

    async def _submit(self, endpoint: str, comment: Comment, *, label: str) -> bool:
        if not await self.verify_key():
            return False

        try:
            await self.http_client.post_form(
                self._url(endpoint),
                self._prepare_payload(comment),
            )
        except NetworkError as exc:
            logger.error(
                "Failed to report comment as %s to Akismet: %s",
                label,
                exc,
                extra=extra_context(comment_id=comment.id),
            )
            return False

        logger.info(
            "Reported comment as %s to Akismet",
            label,
            extra=extra_context(comment_id=comment.id),
        )
        return True

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    async def usage_limit(self) -> Optional[Dict[str, Any]]:
        """Return the account's usage statistics, or ``None`` if unavailable."""
        if not self.enabled:
            return None

        try:
            return await self.http_client.get_json(
                self._url("/1.2/usage-limit"),
                params={"api_key": self.config.akismet_api_key},
            )
        except NetworkError as exc:
            logger.error("Failed to retrieve Akismet usage limit: %s", exc)
            return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}{endpoint}"

    def _prepare_payload(self, comment: Comment) -> Dict[str, Any]:
        """Build the form fields Akismet expects for *comment*.

        ``None`` values are dropped by :meth:`HTTPClient.post_form`.
        """
        payload: Dict[str, Any] = {
            "api_key": self.config.akismet_api_key,
            "blog": self.config.akismet_blog_url,
            "user_ip": comment.user_ip,
            "user_agent": comment.user_agent,
            "referrer": comment.referrer,
            "permalink": comment.permalink,
            "comment_type": comment.comment_type,
            "comment_author": comment.author_name,
            "comment_author_email": comment.author_email,
            "comment_content": comment.body,
            "comment_date_gmt": _gmt(comment.created_at),
            "comment_post_modified_gmt": _gmt(comment.commentable_created_at),
            "blog_lang": self.language,
            "blog_charset": "UTF-8",
        }

        if comment.author_is_staff:
            payload["user_role"] = "staff"

        if self.config.akismet_test_mode:
            payload["is_test"] = "1"

        return payload
