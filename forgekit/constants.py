"""
Centralized constants for forgekit.

This module defines immutable configuration values used across forgekit,
including version placeholders, spam-check defaults, network settings and
logging formats. All values are intended to be treated as read-only.
"""

from typing import Final, Mapping

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "forgekit/{version} | Akismet/{api_version}"

# ---------------------------------------------------------------------------
# Versions
# ---------------------------------------------------------------------------

#: Placeholder version that outdated or unrecognized imports resolve to.
NULL_VERSION: Final[str] = "0.0.0"

#: Free-text labels from legacy imports mapped straight to a constraint.
CONSTRAINT_ALIASES: Final[Mapping[str, str]] = {
    "outdated": NULL_VERSION,
}

#: Number of newest major.minor lines reported by ``last_minor_lines``.
DEFAULT_MINOR_LINES: Final[int] = 3

# ---------------------------------------------------------------------------
# Spam checking
# ---------------------------------------------------------------------------

#: Default cap on automatic spam rechecks per comment.
DEFAULT_MAX_RECHECK_ATTEMPTS: Final[int] = 3

#: Spam checking is opt-in.
DEFAULT_SPAM_CHECK_ENABLED: Final[bool] = False

#: Payloads are flagged as test traffic unless explicitly disabled.
DEFAULT_AKISMET_TEST_MODE: Final[bool] = True

#: Base URL for the Akismet REST API.
AKISMET_BASE_URL: Final[str] = "https://rest.akismet.com"

#: Akismet API version used for key verification and comment checks.
AKISMET_API_VERSION: Final[str] = "1.1"

#: Seconds a key verification result stays cached.
AKISMET_KEY_CACHE_TTL: Final[int] = 24 * 60 * 60

#: Environment variable overriding the configured Akismet API key.
AKISMET_API_KEY_ENV: Final[str] = "FORGEKIT_AKISMET_API_KEY"

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 10

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading version lists.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
