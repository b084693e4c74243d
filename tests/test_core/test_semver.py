from __future__ import annotations

import pytest

from taginfo.core.semver import (
    SemverParts,
    compare_semver,
    is_semver,
    parse_semver,
    sort_tags_by_semver,
)


@pytest.mark.unit
class TestParseSemver:
    """Tests for parse_semver."""

    def test_plain_version(self) -> None:
        """Test a bare major.minor.patch string is parsed."""
        assert parse_semver("1.2.3") == SemverParts(1, 2, 3)

    @pytest.mark.parametrize("tag", ["v1.2.3", "V1.2.3"])
    def test_strips_single_v_prefix(self, tag: str) -> None:
        """Test one leading v or V is ignored."""
        assert parse_semver(tag) == SemverParts(1, 2, 3)

    def test_only_one_prefix_is_stripped(self) -> None:
        """Test 'vv1.2.3' is not a semantic version."""
        assert parse_semver("vv1.2.3") is None

    def test_prerelease_and_build(self) -> None:
        """Test prerelease and build metadata are captured separately."""
        parts = parse_semver("10.20.30-beta.1+build.5")

        assert parts == SemverParts(10, 20, 30, prerelease="beta.1", build="build.5")

    def test_build_without_prerelease(self) -> None:
        """Test build metadata may appear without a prerelease."""
        parts = parse_semver("1.0.0+sha.abc")

        assert parts is not None
        assert parts.prerelease is None
        assert parts.build == "sha.abc"

    @pytest.mark.parametrize(
        "tag",
        ["latest", "1.2", "1.2.3.4", "3.23-bae0df8a-ls3", "1.2.x", "", "1.2.3-", "1.2.3\n"],
    )
    def test_rejects_non_semver(self, tag: str) -> None:
        """Test names that are not major.minor.patch return None."""
        assert parse_semver(tag) is None

    def test_is_semver(self) -> None:
        """Test is_semver mirrors parse_semver."""
        assert is_semver("v2.0.0") is True
        assert is_semver("edge") is False


@pytest.mark.unit
class TestCompareSemver:
    """Tests for compare_semver ordering rules."""

    @pytest.mark.parametrize(
        "lower, higher",
        [
            ("1.0.0", "2.0.0"),
            ("1.1.0", "1.2.0"),
            ("1.1.1", "1.1.2"),
            ("1.9.0", "1.10.0"),
            ("1.0.0-beta", "1.0.0"),
            ("1.0.0-alpha", "1.0.0-beta"),
            ("v1.0.0", "1.0.1"),
        ],
    )
    def test_ordering_is_antisymmetric(self, lower: str, higher: str) -> None:
        """Test compare(a, b) == -compare(b, a) for ordered pairs."""
        assert compare_semver(lower, higher) == -1
        assert compare_semver(higher, lower) == 1

    @pytest.mark.parametrize("tag", ["1.0.0", "v2.3.4-rc.1", "0.0.1+meta"])
    def test_reflexive(self, tag: str) -> None:
        """Test a version compares equal to itself."""
        assert compare_semver(tag, tag) == 0

    def test_build_metadata_is_ignored(self) -> None:
        """Test versions differing only in build metadata compare equal."""
        assert compare_semver("1.0.0+build.1", "1.0.0+build.2") == 0

    def test_prerelease_compared_as_plain_strings(self) -> None:
        """Test 'alpha.10' sorts before 'alpha.9' (string order, not numeric)."""
        assert compare_semver("1.0.0-alpha.10", "1.0.0-alpha.9") == -1

    @pytest.mark.parametrize(
        "left, right",
        [("latest", "edge"), ("foo", "1.0.0"), ("2.0.0", "bar"), ("1.2", "1.3")],
    )
    def test_non_semver_compares_equal(self, left: str, right: str) -> None:
        """Test any pair involving a non-semver compares equal."""
        assert compare_semver(left, right) == 0


@pytest.mark.unit
class TestSortTagsBySemver:
    """Tests for sort_tags_by_semver."""

    def test_sorts_descending(self) -> None:
        """Test the highest version comes first."""
        assert sort_tags_by_semver(["1.0.0", "v2.0.0", "1.5.0"]) == ["v2.0.0", "1.5.0", "1.0.0"]

    def test_release_before_prerelease(self) -> None:
        """Test a release outranks its own prerelease."""
        assert sort_tags_by_semver(["1.0.0-rc.1", "1.0.0"]) == ["1.0.0", "1.0.0-rc.1"]

    def test_stable_for_equal_elements(self) -> None:
        """Test mutually equal elements keep their input order."""
        tags = ["edge", "latest", "dev"]

        assert sort_tags_by_semver(tags) == tags

    def test_stable_for_build_variants(self) -> None:
        """Test versions equal except for build metadata keep input order."""
        tags = ["1.0.0+b", "1.0.0+a"]

        assert sort_tags_by_semver(tags) == ["1.0.0+b", "1.0.0+a"]

    def test_does_not_mutate_input(self) -> None:
        """Test the input list is left untouched."""
        tags = ["1.0.0", "2.0.0"]
        sort_tags_by_semver(tags)

        assert tags == ["1.0.0", "2.0.0"]
