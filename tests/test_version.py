"""Tests for update_checker.version."""

import pytest

from update_checker.exceptions import InvalidVersionFormatError
from update_checker.version import compare_versions, is_newer, parse_version


class TestParseVersion:
    def test_components(self):
        assert parse_version("1.2.10") == (1, 2, 10)

    def test_trailing_zeros_dropped(self):
        assert parse_version("1.2.0.0") == (1, 2)
        assert parse_version("0.0") == (0,)

    def test_surrounding_whitespace(self):
        assert parse_version(" 3.1 ") == (3, 1)

    @pytest.mark.parametrize("token", ["", "1..2", "1.2.", ".1", "1.x", "1.-2", "v1.0", "1.2-beta", "١.٢"])
    def test_invalid(self, token):
        with pytest.raises(InvalidVersionFormatError):
            parse_version(token)

    def test_not_a_string(self):
        with pytest.raises(InvalidVersionFormatError):
            parse_version(None)  # type: ignore[arg-type]


class TestCompareVersions:
    def test_numeric_not_lexicographic(self):
        assert compare_versions("1.2.10", "1.2.9") == 1
        assert compare_versions("1.2.9", "1.2.10") == -1

    @pytest.mark.parametrize("a,b", [("1.2", "1.2.0"), ("1", "1.0.0.0"), ("01.2", "1.2")])
    def test_equal_after_normalizing(self, a, b):
        assert compare_versions(a, b) == 0
        assert compare_versions(b, a) == 0

    def test_missing_components_are_zero(self):
        assert compare_versions("1.2", "1.2.1") == -1
        assert compare_versions("1.0.1", "1") == 1

    def test_transitive(self):
        ordered = ["0.9", "1", "1.0.1", "1.2", "1.10", "2.0.0"]
        for i, low in enumerate(ordered):
            for high in ordered[i + 1 :]:
                assert compare_versions(low, high) == -1
                assert compare_versions(high, low) == 1

    def test_invalid_propagates(self):
        with pytest.raises(InvalidVersionFormatError):
            compare_versions("1.0", "one")


def test_is_newer():
    assert is_newer("1.3.0", "1.2.0") is True
    assert is_newer("1.2", "1.2.0") is False
    assert is_newer("1.1", "1.2") is False
