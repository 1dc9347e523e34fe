"""Configuration file loader for forgekit.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``forgekit.toml``: settings under ``[forgekit]`` table
- ``pyproject.toml``: settings under ``[tool.forgekit]`` table

Discovery order:

1. Explicit path from ``--config`` or ``FORGEKIT_CONFIG``
2. ``forgekit.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.forgekit]`` section

Configuration precedence: defaults < config file < environment < CLI args.
The only environment override is ``FORGEKIT_AKISMET_API_KEY``, which keeps
the API key out of checked-in files.

Typical usage::

    config = load_config()  # Auto-discover
    config = load_config(Path("custom.toml"))  # Explicit path

Example (``forgekit.toml``)::

    [forgekit]
    max_recheck_attempts = 3
    spam_check_enabled = true
    akismet_blog_url = "https://forge.example.com"
    akismet_test_mode = false
"""

from __future__ import annotations

import os
import tomli as tomllib
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from forgekit.exceptions import ConfigError
from forgekit.utils.logger import get_logger
from forgekit.constants import (
    AKISMET_API_KEY_ENV,
    DEFAULT_AKISMET_TEST_MODE,
    DEFAULT_MAX_RECHECK_ATTEMPTS,
    DEFAULT_SPAM_CHECK_ENABLED,
)

logger = get_logger("config")


@dataclass
class ForgeKitConfig:
    """Parsed and validated forgekit configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        max_recheck_attempts: Upper bound on automatic spam rechecks per
            comment. ``0`` disables rechecking.
        spam_check_enabled: Send comments to the spam-detection service.
            When ``False`` every comment is marked clean without a call.
        akismet_api_key: Akismet API key.
        akismet_blog_url: Site URL registered with Akismet.
        akismet_test_mode: Flag payloads as test traffic.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    max_recheck_attempts: int = DEFAULT_MAX_RECHECK_ATTEMPTS
    spam_check_enabled: bool = DEFAULT_SPAM_CHECK_ENABLED
    akismet_api_key: Optional[str] = field(default=None, repr=False)
    akismet_blog_url: Optional[str] = None
    akismet_test_mode: bool = DEFAULT_AKISMET_TEST_MODE

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging.

        Excludes ``source_path`` metadata and masks the API key.

        Returns:
            Dictionary of configuration option names to values.
        """
        return {
            "max_recheck_attempts": self.max_recheck_attempts,
            "spam_check_enabled": self.spam_check_enabled,
            "akismet_api_key": "***" if self.akismet_api_key else None,
            "akismet_blog_url": self.akismet_blog_url,
            "akismet_test_mode": self.akismet_test_mode,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Search order:

    1. ``explicit_path`` (from ``--config`` or ``FORGEKIT_CONFIG``)
    2. ``forgekit.toml`` in current directory
    3. ``pyproject.toml`` with ``[tool.forgekit]`` section in current directory

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    forgekit_toml = cwd / "forgekit.toml"
    if forgekit_toml.is_file():
        logger.debug("Found forgekit.toml: %s", forgekit_toml)
        return forgekit_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_forgekit_section(pyproject_toml):
        logger.debug("Found [tool.forgekit] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_forgekit_section(path: Path) -> bool:
    """Check if pyproject.toml contains a [tool.forgekit] section.

    A pyproject.toml that cannot be parsed is treated as not having one;
    it belongs to the surrounding project, not to forgekit.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return "forgekit" in raw.get("tool", {})


def load_config(
    config_path: Optional[Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> ForgeKitConfig:
    """Load and validate forgekit configuration.

    Discovers config file (or uses provided path), parses and validates it,
    then applies environment overrides. Returns config with defaults if no
    file is found.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        Validated :class:`ForgeKitConfig`.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    environ = os.environ if environ is None else environ
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return _apply_environment(ForgeKitConfig(), environ)

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("forgekit", {})
    else:
        section = raw.get("forgekit", {})

    if not section:
        logger.debug("Config file found but no forgekit section, using defaults")
        return _apply_environment(ForgeKitConfig(source_path=resolved), environ)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved
    config = _apply_environment(config, environ)

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _apply_environment(
    config: ForgeKitConfig,
    environ: Mapping[str, str],
) -> ForgeKitConfig:
    """Apply environment variable overrides in place and return *config*."""
    api_key = environ.get(AKISMET_API_KEY_ENV)
    if api_key:
        logger.debug("Using Akismet API key from %s", AKISMET_API_KEY_ENV)
        config.akismet_api_key = api_key
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is invalid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


#: option name -> (expected types, human readable type)
_OPTION_TYPES: Dict[str, Tuple[Tuple[type, ...], str]] = {
    "max_recheck_attempts": ((int,), "an integer"),
    "spam_check_enabled": ((bool,), "a boolean"),
    "akismet_api_key": ((str,), "a string"),
    "akismet_blog_url": ((str,), "a string"),
    "akismet_test_mode": ((bool,), "a boolean"),
}


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> ForgeKitConfig:
    """Parse and validate a ``[forgekit]`` or ``[tool.forgekit]`` table.

    Rejects unknown keys and type mismatches.

    Raises:
        ConfigError: Unknown keys, incorrect types, or out-of-range values.
    """
    config = ForgeKitConfig()

    unknown = set(section.keys()) - set(_OPTION_TYPES)
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    for option, value in section.items():
        expected, label = _OPTION_TYPES[option]
        # bool is a subclass of int; don't accept true for a count
        if not isinstance(value, expected) or (
            expected == (int,) and isinstance(value, bool)
        ):
            raise ConfigError(
                f"{option} must be {label}, got {type(value).__name__}",
                config_path=config_path,
                option=option,
            )
        setattr(config, option, value)

    if config.max_recheck_attempts < 0:
        raise ConfigError(
            f"max_recheck_attempts must be >= 0, got {config.max_recheck_attempts}",
            config_path=config_path,
            option="max_recheck_attempts",
        )

    return config
