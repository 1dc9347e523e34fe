from __future__ import annotations

import pytest

from forgekit.core.parser import VersionParser, parse_version, try_parse_version
from forgekit.exceptions import InvalidVersionFormat


@pytest.fixture
def parser() -> VersionParser:
    return VersionParser()


@pytest.mark.unit
class TestParseValid:
    """Tests for inputs accepted by the strict grammar."""

    @pytest.mark.parametrize(
        "raw,release,labels",
        [
            ("1.2.3", (1, 2, 3), ""),
            ("1", (1, 0, 0), ""),
            ("1.2", (1, 2, 0), ""),
            ("v1.2.3", (1, 2, 3), ""),
            ("V2", (2, 0, 0), ""),
            ("0.0.0", (0, 0, 0), ""),
            ("1.0.0-rc.1", (1, 0, 0), "-rc.1"),
            ("1.0.0+build.5", (1, 0, 0), "+build.5"),
            ("1.0.0-x.7.z.92+meta", (1, 0, 0), "-x.7.z.92+meta"),
            ("1.2-beta", (1, 2, 0), "-beta"),
            ("10.20.30", (10, 20, 30), ""),
            ("1.0.0-0", (1, 0, 0), "-0"),
            ("1.0.0-0a.10", (1, 0, 0), "-0a.10"),
            ("1.0.0+001.02", (1, 0, 0), "+001.02"),
        ],
    )
    def test_parses(
        self,
        parser: VersionParser,
        raw: str,
        release: tuple,
        labels: str,
    ) -> None:
        """Test each accepted form parses into its parts.

        Args:
            parser: Parser under test.
            raw: Input string.
            release: Expected ``(major, minor, patch)``.
            labels: Expected labels suffix.
        """
        value = parser.parse(raw)

        assert value.release == release
        assert value.labels == labels

    @pytest.mark.parametrize(
        "canonical",
        ["1.2.3", "0.1.0", "1.0.0-alpha", "1.0.0-x.7.z.92+meta", "4.5.6+001"],
    )
    def test_canonical_round_trip(self, parser: VersionParser, canonical: str) -> None:
        """Test canonical strings parse back to themselves.

        Args:
            parser: Parser under test.
            canonical: A canonical version string.
        """
        assert parser.parse(canonical).canonical == canonical

    def test_leading_v_is_stripped(self, parser: VersionParser) -> None:
        assert parser.parse("v1.2.3").canonical == parser.parse("1.2.3").canonical

    def test_leading_zeros_are_dropped(self, parser: VersionParser) -> None:
        assert parser.parse("1.02.003").canonical == "1.2.3"


@pytest.mark.unit
class TestParseInvalid:
    """Tests for inputs rejected by the strict grammar."""

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "abc",
            "1.2.3.4",
            " 1.2.3",
            "1.2.3 ",
            "1.0.0-",
            "1.0.0+",
            "1.0.0-rc..1",
            "Beta 1.9",
            "vv1.0.0",
            "1.2.3 (SPT 3.11)",
            "-1.0.0",
            "1.2.3-01",
            "1.2.3-rc.01",
            "1.2.3-rc.1.00+build",
        ],
    )
    def test_rejects(self, parser: VersionParser, raw: str) -> None:
        """Test non-conforming input raises InvalidVersionFormat.

        Args:
            parser: Parser under test.
            raw: Invalid input.
        """
        with pytest.raises(InvalidVersionFormat) as exc_info:
            parser.parse(raw)

        assert exc_info.value.raw == raw
        assert exc_info.value.details["version"] == raw

    def test_rejects_non_string(self, parser: VersionParser) -> None:
        with pytest.raises(InvalidVersionFormat):
            parser.parse(123)  # type: ignore[arg-type]


@pytest.mark.unit
class TestLenientHelpers:
    """Tests for the optional-returning helpers."""

    def test_try_parse(self, parser: VersionParser) -> None:
        assert parser.try_parse("1.2") is not None
        assert parser.try_parse("nope") is None

    def test_is_valid(self, parser: VersionParser) -> None:
        assert parser.is_valid("1.0.0-rc.1")
        assert not parser.is_valid("1.0.0.0")

    def test_module_functions(self) -> None:
        assert parse_version("v3.11").canonical == "3.11.0"
        assert try_parse_version("3.11 final") is None

        with pytest.raises(InvalidVersionFormat):
            parse_version("3.11 final")
