"""Tests for version.py module."""

import itertools

import pytest

from bedrock_updater.core.errors import ErrorKind, NoVersionString
from bedrock_updater.core.version import Ordering, VersionString, compare


class TestParse:
    """Test VersionString.parse."""

    def test_plain_version(self):
        assert VersionString.parse("1.21.0.3") == VersionString(1, 21, 0, 3)

    def test_from_file_name(self):
        version = VersionString.parse("bedrock-server-linux-x64-1.21.0.3.zip")
        assert version.parts == (1, 21, 0, 3)

    def test_first_match_wins(self):
        version = VersionString.parse("1.2.3.4-to-5.6.7.8")
        assert version == VersionString(1, 2, 3, 4)

    def test_surrounding_whitespace(self):
        assert VersionString.parse("1.20.0.1\n") == VersionString(1, 20, 0, 1)

    def test_multi_digit_components(self):
        assert VersionString.parse("1.20.81.01").parts == (1, 20, 81, 1)

    def test_three_parts_rejected(self):
        with pytest.raises(NoVersionString) as exc_info:
            VersionString.parse("bedrock-server-1.21.0.zip")
        assert exc_info.value.kind is ErrorKind.VERSION_PARSE

    def test_empty_text(self):
        with pytest.raises(NoVersionString):
            VersionString.parse("")

    def test_str(self):
        assert str(VersionString.parse("release 1.21.0.3")) == "1.21.0.3"


class TestCompare:
    """Test version ordering."""

    def test_equal(self):
        assert compare(VersionString.parse("1.20.0.1"), VersionString.parse("1.20.0.1")) is Ordering.EQUAL

    def test_less(self):
        assert compare(VersionString.parse("1.20.0.1"), VersionString.parse("1.21.0.3")) is Ordering.LESS

    def test_greater(self):
        assert compare(VersionString.parse("1.21.0.0"), VersionString.parse("1.20.0.1")) is Ordering.GREATER

    def test_numeric_not_textual(self):
        assert compare(VersionString.parse("1.9.0.0"), VersionString.parse("1.10.0.0")) is Ordering.LESS

    def test_most_significant_first(self):
        assert compare(VersionString(2, 0, 0, 0), VersionString(1, 99, 99, 99)) is Ordering.GREATER
        assert compare(VersionString(1, 0, 0, 9), VersionString(1, 0, 1, 0)) is Ordering.LESS

    def test_leading_zeros_compare_equal(self):
        assert compare(VersionString.parse("1.20.0.01"), VersionString.parse("1.20.0.1")) is Ordering.EQUAL

    def test_operators_agree_with_compare(self):
        low, high = VersionString(1, 20, 0, 1), VersionString(1, 21, 0, 3)
        assert low < high
        assert high > low
        assert low != high

    def test_total_order(self):
        versions = [
            VersionString(1, 20, 0, 1),
            VersionString(1, 20, 0, 2),
            VersionString(1, 20, 1, 0),
            VersionString(1, 21, 0, 3),
            VersionString(2, 0, 0, 0),
        ]
        for a, b in itertools.product(versions, repeat=2):
            assert compare(a, b) == -compare(b, a)
        for a, b, c in itertools.product(versions, repeat=3):
            if compare(a, b) is Ordering.LESS and compare(b, c) is Ordering.LESS:
                assert compare(a, c) is Ordering.LESS
