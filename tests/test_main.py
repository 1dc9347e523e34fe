from __future__ import annotations

import sys
from unittest.mock import MagicMock, patch

import pytest

from forgekit.__main__ import _print_startup_error, main


@pytest.mark.unit
class TestMain:
    """Tests for main() entry point function."""

    @pytest.mark.parametrize(
        "exit_code",
        [0, 1, 130],
        ids=["success", "error", "interrupted"],
    )
    def test_main_returns_cli_exit_code(self, exit_code: int) -> None:
        """Test main returns exit code from cli_main when import succeeds."""
        mock_cli_module = MagicMock()
        mock_cli_module.main = MagicMock(return_value=exit_code)

        with patch.dict("sys.modules", {"forgekit.cli": mock_cli_module}):
            result = main()

        assert result == exit_code
        mock_cli_module.main.assert_called_once_with()

    def test_main_import_error_returns_one(self, capsys: pytest.CaptureFixture) -> None:
        """Test main returns 1 and reports when the cli module cannot be imported."""
        # A None entry in sys.modules makes the import raise ImportError
        with patch.dict("sys.modules", {"forgekit.cli": None}):
            result = main()

        assert result == 1
        captured = capsys.readouterr()
        assert "ImportError:" in captured.err
        assert "forgekit.cli" in captured.err


@pytest.mark.unit
class TestPrintStartupError:
    """Tests for _print_startup_error helper function."""

    def test_prints_version_when_available(self, capsys: pytest.CaptureFixture) -> None:
        """Test the package version is included in the report."""
        mock_version_module = MagicMock(__version__="1.2.3")

        with patch.dict(sys.modules, {"forgekit.__version__": mock_version_module}):
            _print_startup_error(ImportError("Test error message"))

        captured = capsys.readouterr()
        assert "forgekit version: 1.2.3" in captured.err
        assert "ImportError: Test error message" in captured.err

    def test_version_import_failure_is_reported_as_unknown(
        self, capsys: pytest.CaptureFixture
    ) -> None:
        """Test an unavailable version module does not break the report."""
        with patch.dict(sys.modules, {"forgekit.__version__": None}):
            _print_startup_error(ImportError("Test error message"))

        captured = capsys.readouterr()
        assert "forgekit version: <unknown>" in captured.err
        assert "ImportError: Test error message" in captured.err

    def test_writes_to_stderr_only(self, capsys: pytest.CaptureFixture) -> None:
        """Test the report goes to stderr, not stdout."""
        _print_startup_error(ImportError("Test error"))

        captured = capsys.readouterr()
        assert "ImportError:" in captured.err
        assert captured.out == ""

    def test_includes_blank_line(self, capsys: pytest.CaptureFixture) -> None:
        """Test a blank line separates the environment from the error."""
        _print_startup_error(ImportError("Test error"))

        lines = capsys.readouterr().err.split("\n")
        assert "" in lines[:-1]
