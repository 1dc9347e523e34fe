from __future__ import annotations

import pytest

from forgekit.models.version import VersionValue


@pytest.mark.unit
class TestVersionValueInit:
    """Tests for VersionValue construction and validation."""

    def test_defaults(self) -> None:
        """Test minor, patch and labels default to empty values."""
        value = VersionValue(major=1)

        assert value.release == (1, 0, 0)
        assert value.labels == ""
        assert value.canonical == "1.0.0"

    @pytest.mark.parametrize("field", ["major", "minor", "patch"])
    def test_negative_numbers_rejected(self, field: str) -> None:
        """Test version numbers must be non-negative.

        Args:
            field: Name of the numeric field to make negative.
        """
        kwargs = {"major": 1, "minor": 0, "patch": 0, field: -1}

        with pytest.raises(ValueError, match=field):
            VersionValue(**kwargs)

    def test_labels_must_start_with_separator(self) -> None:
        with pytest.raises(ValueError, match="labels"):
            VersionValue(major=1, labels="beta")

    def test_is_immutable(self) -> None:
        value = VersionValue(major=1)

        with pytest.raises(AttributeError):
            value.major = 2  # type: ignore[misc]

    def test_equal_values_are_equal_and_hashable(self) -> None:
        assert VersionValue(1, 2, 3, "-rc.1") == VersionValue(1, 2, 3, "-rc.1")
        assert len({VersionValue(1, 2, 3), VersionValue(1, 2, 3)}) == 1


@pytest.mark.unit
class TestVersionValueLabels:
    """Tests for the pre-release and build views of the labels suffix."""

    @pytest.mark.parametrize(
        "labels,prerelease,build",
        [
            ("", "", ""),
            ("-rc.1", "rc.1", ""),
            ("+build.5", "", "build.5"),
            ("-x.7.z.92+meta", "x.7.z.92", "meta"),
            ("-beta+exp.sha.5114f85", "beta", "exp.sha.5114f85"),
        ],
    )
    def test_prerelease_and_build(self, labels: str, prerelease: str, build: str) -> None:
        """Test labels split into pre-release and build metadata.

        Args:
            labels: Combined labels suffix.
            prerelease: Expected pre-release identifiers.
            build: Expected build metadata.
        """
        value = VersionValue(1, 0, 0, labels)

        assert value.prerelease == prerelease
        assert value.build == build
        assert value.is_prerelease is bool(prerelease)

    def test_canonical_keeps_labels_verbatim(self) -> None:
        assert VersionValue(1, 0, 0, "-x.7.z.92+meta").canonical == "1.0.0-x.7.z.92+meta"


@pytest.mark.unit
class TestVersionValueSerialization:
    """Tests for field and JSON serialization."""

    def test_to_fields(self) -> None:
        """Test the stored columns mirror the parsed parts."""
        assert VersionValue(3, 11, 2, "+spt").to_fields() == {
            "version": "3.11.2+spt",
            "version_major": 3,
            "version_minor": 11,
            "version_patch": 2,
            "version_labels": "+spt",
        }

    def test_to_json(self) -> None:
        data = VersionValue(1, 2, 3, "-rc.1").to_json()

        assert data["version"] == "1.2.3-rc.1"
        assert data["prerelease"] == "rc.1"
        assert data["build"] is None

    def test_str_is_canonical(self) -> None:
        assert str(VersionValue(2, 0, 1)) == "2.0.1"


@pytest.mark.unit
class TestDisplayKey:
    """Tests for the display ordering key."""

    def test_newest_release_first(self) -> None:
        values = [VersionValue(1, 0, 0), VersionValue(1, 10, 0), VersionValue(2, 0, 0)]

        ordered = sorted(values, key=lambda v: v.display_key)

        assert [v.canonical for v in ordered] == ["2.0.0", "1.10.0", "1.0.0"]

    def test_plain_release_before_labeled(self) -> None:
        values = [
            VersionValue(1, 0, 0, "-rc.2"),
            VersionValue(1, 0, 0),
            VersionValue(1, 0, 0, "-rc.1"),
        ]

        ordered = sorted(values, key=lambda v: v.display_key)

        assert [v.canonical for v in ordered] == ["1.0.0", "1.0.0-rc.1", "1.0.0-rc.2"]
