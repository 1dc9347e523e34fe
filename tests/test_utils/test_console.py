from __future__ import annotations

import json
from typing import Generator

import pytest

import forgekit.utils.console as console_module
from forgekit.utils.console import (
    colorize_status,
    print_error,
    print_json,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)


@pytest.fixture(autouse=True)
def plain_console(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Give every test a fresh, colorless console.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Yields:
        None
    """
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setenv("COLUMNS", "120")
    reconfigure_console()
    yield
    reconfigure_console()


@pytest.mark.unit
class TestStatusMessages:
    """Tests for print_success, print_error and print_warning."""

    def test_success(self, capsys: pytest.CaptureFixture) -> None:
        print_success("Key verified")

        assert capsys.readouterr().out.strip() == "[OK] Key verified"

    def test_error(self, capsys: pytest.CaptureFixture) -> None:
        print_error("Invalid constraint")

        assert capsys.readouterr().out.strip() == "[ERROR] Invalid constraint"

    def test_warning_custom_prefix(self, capsys: pytest.CaptureFixture) -> None:
        print_warning("No versions matched", prefix="!")

        assert capsys.readouterr().out.strip() == "! No versions matched"

    def test_brackets_are_not_markup(self, capsys: pytest.CaptureFixture) -> None:
        print_error("Unexpected token [bold]")

        assert "[bold]" in capsys.readouterr().out


@pytest.mark.unit
class TestPrintTable:
    """Tests for print_table."""

    def test_renders_headers_and_rows(self, capsys: pytest.CaptureFixture) -> None:
        print_table(
            [
                {"Input": "v1.2.3", "Status": "valid"},
                {"Input": "banana", "Status": "invalid"},
            ],
            title="Versions",
        )

        out = capsys.readouterr().out
        assert "Versions" in out
        assert "Input" in out
        assert "v1.2.3" in out
        assert "banana" in out

    def test_header_order(self, capsys: pytest.CaptureFixture) -> None:
        print_table([{"a": "1", "b": "2"}], headers=["b", "a"])

        header_line = next(
            line for line in capsys.readouterr().out.splitlines() if "a" in line and "b" in line
        )
        assert header_line.index("b") < header_line.index("a")

    def test_empty_data_prints_nothing(self, capsys: pytest.CaptureFixture) -> None:
        print_table([])

        assert capsys.readouterr().out == ""


@pytest.mark.unit
class TestPrintJson:
    """Tests for print_json."""

    def test_output_is_parseable(self, capsys: pytest.CaptureFixture) -> None:
        data = [{"input": "~1.2", "constraint": "~1.2.0", "note": ":smile: [x]"}]

        print_json(data)

        assert json.loads(capsys.readouterr().out) == data


@pytest.mark.unit
class TestColorizeStatus:
    """Tests for colorize_status."""

    @pytest.mark.parametrize(
        "status,expected",
        [
            ("valid", "[green]valid[/green]"),
            ("spam", "[red]spam[/red]"),
            ("Pending", "[yellow]Pending[/yellow]"),
            ("unknown", "unknown"),
        ],
    )
    def test_colors(self, status: str, expected: str) -> None:
        """Test known statuses are wrapped in markup.

        Args:
            status: Input status.
            expected: Expected markup.
        """
        assert colorize_status(status) == expected


@pytest.mark.unit
def test_reconfigure_console_creates_new_instance() -> None:
    first = console_module._get_console()
    reconfigure_console()

    assert console_module._get_console() is not first
