"""Error types raised by percent encoding operations.

Encoding failures are all-or-nothing: once one of these is raised the call
that raised it has produced no valid result.
"""

from typing import Optional


class EncodingError(ValueError):
    """Base exception for caller-visible encoding failures."""


class InvalidSurrogatePairError(EncodingError):
    """A high surrogate is not immediately followed by a low surrogate."""

    def __init__(
        self,
        position: int,
        high_surrogate: str,
        following: Optional[str] = None,
    ) -> None:
        self.position = position
        self.high_surrogate = high_surrogate
        self.following = following
        self.next_position = None if following is None else position + 1

        if following is None:
            message = (
                "Invalid UTF-16: the last character in the input is a high "
                f"surrogate (U+{ord(high_surrogate):04X}) at position {position}"
            )
        else:
            message = (
                f"Invalid UTF-16: character {position} is a high surrogate "
                f"(U+{ord(high_surrogate):04X}), but character {position + 1} "
                f"is not a low surrogate (U+{ord(following):04X})"
            )
        super().__init__(message)


class MalformedInputError(EncodingError):
    """The transcoder could not interpret the pending characters."""

    def __init__(self, length: int) -> None:
        super().__init__(f"Malformed input of length {length}")
        self.length = length


class UnmappableCharacterError(EncodingError):
    """The pending characters have no representation in the target charset."""

    def __init__(self, length: int) -> None:
        super().__init__(f"Unmappable character sequence of length {length}")
        self.length = length


class TranscoderOverflowError(RuntimeError):
    """The byte buffer overflowed while transcoding.

    Buffers are sized from the transcoder's maximum bytes per character, so
    this indicates a broken invariant rather than bad input.
    """
