"""
Custom exception hierarchy for forgekit.

This module defines structured exception types used across forgekit.
All exceptions inherit from :class:`ForgeKitError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.

Validation errors (:class:`InvalidVersionFormat`,
:class:`InvalidConstraintFormat`) are meant to be surfaced to end users as
field-level messages. :class:`SpamCheckError` marks a transient failure of
the external spam-detection service and is recovered locally by the spam
lifecycle.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class ForgeKitError(Exception):
    """Base exception for all forgekit errors.

    All forgekit-specific exceptions should inherit from this class.
    It supports structured metadata via ``details`` for richer error
    reporting and debugging.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        # Internally normalize to a mutable dict
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


class InvalidVersionFormat(ForgeKitError):
    """Raised when a version string does not match the strict grammar.

    Args:
        raw: The offending input, kept for diagnostics.
        message: Optional override for the default message.
    """

    __slots__ = ("raw",)

    def __init__(self, raw: str, *, message: Optional[str] = None) -> None:
        super().__init__(
            message or f"Invalid version number: {_truncate(raw)!r}",
            {"version": _truncate(raw)},
        )
        self.raw = raw


class InvalidConstraintFormat(ForgeKitError):
    """Raised when a constraint expression is not valid semver-range syntax.

    Args:
        constraint: The offending constraint expression.
        reason: Parser message explaining the rejection, if available.
    """

    __slots__ = ("constraint", "reason")

    def __init__(self, constraint: str, *, reason: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {"constraint": _truncate(constraint)}
        _add_if(details, "reason", reason)

        super().__init__(f"Invalid version constraint: {_truncate(constraint)!r}", details)

        self.constraint = constraint
        self.reason = reason


class NormalizationDefect(ForgeKitError):
    """Raised when import normalization builds a string the parser rejects.

    Normalization is total over its input; seeing this error means the
    cleanup logic itself is broken, not that the input was bad.

    Args:
        raw: Original import value.
        candidate: The string handed to the strict parser.
    """

    __slots__ = ("raw", "candidate")

    def __init__(self, raw: str, candidate: str) -> None:
        super().__init__(
            "Import normalization produced an unparseable version",
            {"raw": _truncate(raw), "candidate": candidate},
        )
        self.raw = raw
        self.candidate = candidate


class ConfigError(ForgeKitError):
    """Raised when configuration cannot be loaded or is invalid.

    Args:
        message: Error description.
        config_path: Path of the configuration file involved.
        option: Name of the offending option.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option


class NetworkError(ForgeKitError):
    """Raised when HTTP or network operations fail.

    Args:
        message: Error description.
        url: URL being accessed.
        status_code: HTTP status code, if available.
        response_body: Raw response body, truncated for safety.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        _add_if(details, "status_code", status_code)

        if response_body is not None:
            details["response"] = _truncate(response_body)

        super().__init__(message, details)

        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class SpamCheckError(NetworkError):
    """Raised when the spam-detection service could not give a verdict.

    Args:
        message: Error description.
        comment_id: Identifier of the comment being checked.
        **kwargs: Additional arguments forwarded to ``NetworkError``.
    """

    __slots__ = ("comment_id",)

    def __init__(
        self,
        message: str,
        *,
        comment_id: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)

        self.comment_id = comment_id
        if comment_id is not None:
            self.details["comment_id"] = comment_id


class FileOperationError(ForgeKitError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write/delete).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error
