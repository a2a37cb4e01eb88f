"""Tests for encoding error types."""

import pytest

from percent_encoder.shared.errors import (
    EncodingError,
    InvalidSurrogatePairError,
    MalformedInputError,
    TranscoderOverflowError,
    UnmappableCharacterError,
)


class TestErrorHierarchy:
    """Test how the error types relate."""

    @pytest.mark.parametrize(
        "error_type",
        [InvalidSurrogatePairError, MalformedInputError, UnmappableCharacterError],
    )
    def test_caller_visible_errors_share_a_base(self, error_type):
        assert issubclass(error_type, EncodingError)
        assert issubclass(error_type, ValueError)

    def test_overflow_is_a_defect_not_an_encoding_error(self):
        assert issubclass(TranscoderOverflowError, RuntimeError)
        assert not issubclass(TranscoderOverflowError, EncodingError)


class TestInvalidSurrogatePairError:
    """Test InvalidSurrogatePairError details."""

    def test_high_surrogate_at_end_of_input(self):
        error = InvalidSurrogatePairError(4, "\ud83d")

        assert error.position == 4
        assert error.next_position is None
        assert error.following is None
        assert "last character" in str(error)
        assert "U+D83D" in str(error)

    def test_high_surrogate_followed_by_other_character(self):
        error = InvalidSurrogatePairError(0, "\ud83d", "x")

        assert error.position == 0
        assert error.next_position == 1
        assert error.following == "x"
        assert "character 1 is not a low surrogate (U+0078)" in str(error)


class TestTranscoderErrors:
    """Test malformed and unmappable errors."""

    def test_malformed_length(self):
        error = MalformedInputError(1)
        assert error.length == 1
        assert "length 1" in str(error)

    def test_unmappable_length(self):
        error = UnmappableCharacterError(2)
        assert error.length == 2
        assert "length 2" in str(error)
