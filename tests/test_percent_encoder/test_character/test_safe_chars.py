"""Tests for SafeCharacterSet."""

import pytest

from percent_encoder.character.safe_chars import SafeCharacterSet


class TestSafeCharacterSetConstruction:
    """Test building safe sets."""

    def test_from_chars_accepts_characters_and_code_points(self):
        safe = SafeCharacterSet.from_chars(["a", 0x62, "c"])

        assert "a" in safe
        assert "b" in safe
        assert ord("c") in safe
        assert "d" not in safe
        assert len(safe) == 3

    def test_from_ranges_is_inclusive(self):
        safe = SafeCharacterSet.from_ranges(("a", "c"), (0x30, 0x31))

        assert list(safe) == [0x30, 0x31, ord("a"), ord("b"), ord("c")]

    def test_reversed_range_rejected(self):
        with pytest.raises(ValueError, match="Reversed range"):
            SafeCharacterSet.from_ranges(("z", "a"))

    def test_multi_character_string_rejected(self):
        with pytest.raises(ValueError, match="single character"):
            SafeCharacterSet.from_chars(["ab"])

    def test_out_of_range_code_point_rejected(self):
        with pytest.raises(ValueError, match="out of range"):
            SafeCharacterSet.from_chars([0x110000])
        with pytest.raises(ValueError, match="out of range"):
            SafeCharacterSet.from_chars([-1])

    def test_non_character_values_rejected(self):
        with pytest.raises(TypeError):
            SafeCharacterSet.from_chars([1.5])
        with pytest.raises(TypeError):
            SafeCharacterSet.from_chars([True])


class TestSafeCharacterSetPresets:
    """Test the convenience constructors."""

    def test_alphanumeric(self):
        safe = SafeCharacterSet.alphanumeric()

        assert len(safe) == 62
        assert all(c in safe for c in "azAZ09")
        assert "-" not in safe
        assert " " not in safe

    def test_unreserved(self):
        safe = SafeCharacterSet.unreserved()

        assert len(safe) == 66
        assert all(c in safe for c in "-._~")
        assert all(c not in safe for c in "/?#[]@!$&'()*+,;=% ")

    def test_non_ascii_letters_are_not_safe(self):
        assert "é" not in SafeCharacterSet.alphanumeric()


class TestSafeCharacterSetOperations:
    """Test set operations and value semantics."""

    def test_membership_of_non_characters(self):
        safe = SafeCharacterSet.from_chars("a")

        assert "ab" not in safe
        assert "" not in safe
        assert None not in safe

    def test_union(self):
        base = SafeCharacterSet.alphanumeric()

        merged = base.union("/", [ord("?")])

        assert "/" in merged
        assert "?" in merged
        assert "/" not in base
        assert len(merged) == 64

    def test_or_operator(self):
        merged = SafeCharacterSet.from_chars("a") | SafeCharacterSet.from_chars("b")

        assert merged == SafeCharacterSet.from_chars("ab")

    def test_equality_and_hash(self):
        first = SafeCharacterSet.from_chars("abc")
        second = SafeCharacterSet.from_ranges(("a", "c"))

        assert first == second
        assert hash(first) == hash(second)
        assert first != SafeCharacterSet.from_chars("ab")
        assert first != "abc"

    def test_code_points_is_frozen(self):
        safe = SafeCharacterSet.from_chars("a")

        assert safe.code_points == frozenset({ord("a")})
        assert isinstance(safe.code_points, frozenset)

    def test_repr(self):
        assert repr(SafeCharacterSet.from_chars("ab")) == "SafeCharacterSet(<2 code points>)"
