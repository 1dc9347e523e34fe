"""
Filesystem utilities for forgekit.

This module provides safe helpers for reading the plain-text version lists
the CLI accepts (one version or label per line). All filesystem errors are
normalized to ``FileOperationError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

from forgekit.constants import MAX_FILE_SIZE
from forgekit.utils.logger import get_logger
from forgekit.exceptions import FileOperationError

logger = get_logger("filesystem")

PathLike = Union[str, Path]


def _validated_file(path: Path) -> Path:
    """Validate and resolve an existing file path."""
    if not path.exists():
        raise FileOperationError(
            f"File not found: {path}",
            file_path=str(path),
            operation="read",
        )
    if not path.is_file():
        raise FileOperationError(
            f"Not a file: {path}",
            file_path=str(path),
            operation="read",
        )
    return path.resolve()


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Safely read a text file with optional size limits.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed file size in bytes (None disables limit).
        encoding: Text encoding.

    Returns:
        File contents as a string.
    """
    path = _validated_file(Path(file_path))
    size = path.stat().st_size

    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        return path.read_text(encoding=encoding)
    except Exception as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def read_value_list(file_path: PathLike) -> List[str]:
    """Read one value per line, skipping blank lines and ``#`` comments.

    Lines are stripped of surrounding whitespace; inner text is kept as-is
    so free-text labels such as ``"1.5.0 (SPT 3.11)"`` survive.
    """
    values = [
        line.strip()
        for line in safe_read_file(file_path).splitlines()
        if line.strip() and not line.lstrip().startswith("#")
    ]
    logger.debug("Read %d value(s) from %s", len(values), file_path)
    return values
