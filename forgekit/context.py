"""
Shared context object for forgekit CLI commands.

This module defines the Click context object used to share configuration
and runtime options across CLI subcommands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from forgekit.config import ForgeKitConfig


class ForgeKitContext:
    """Global context object for forgekit CLI commands.

    Attributes:
        config_path: Path to the forgekit configuration file, if any.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration, set by the root command.
    """

    __slots__ = ("config_path", "verbose", "color", "config")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: Optional[ForgeKitConfig] = None

    def effective_config(self) -> ForgeKitConfig:
        """Return the loaded configuration, or defaults when none was loaded."""
        return self.config if self.config is not None else ForgeKitConfig()


#: Click decorator for injecting :class:`ForgeKitContext` into commands.
pass_context = click.make_pass_decorator(ForgeKitContext, ensure=True)
