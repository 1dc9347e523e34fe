"""
Utility helpers for forgekit.

This package provides reusable utilities used across forgekit, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem reading helpers
- Async HTTP client utilities

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from forgekit.utils.filesystem import read_value_list, safe_read_file

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from forgekit.utils.logger import (
    extra_context,
    get_logger,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from forgekit.utils.console import (
    colorize_status,
    print_error,
    print_json,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# HTTP utilities
# ---------------------------------------------------------------------------

from forgekit.utils.http import HTTPClient

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "print_error",
    "print_json",
    "print_table",
    "print_success",
    "print_warning",
    "reconfigure_console",
    "colorize_status",
    # Logging
    "get_logger",
    "extra_context",
    "setup_logging",
    # Filesystem
    "safe_read_file",
    "read_value_list",
    # HTTP
    "HTTPClient",
]
