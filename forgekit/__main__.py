"""
Executable module for forgekit.

Running:
    python -m forgekit

is equivalent to:
    forgekit
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Report a CLI import failure on stderr."""
    try:
        from forgekit.__version__ import __version__

        version = __version__
    except ImportError:
        version = "<unknown>"

    sys.stderr.write("forgekit CLI could not be loaded.\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    sys.stderr.write(f"forgekit version: {version}\n")
    sys.stderr.write("\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """Entrypoint for ``python -m forgekit``.

    Returns:
        Exit code returned by the CLI, or ``1`` if it cannot be imported.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from forgekit.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
