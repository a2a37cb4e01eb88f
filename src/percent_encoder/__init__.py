"""Percent Encoder.

Encodes text for URL components by replacing every character outside a safe
set with ``%XX`` escapes of its bytes in a configurable charset.

Progressive API Disclosure:
- Level 1: Simple function - percent_encode()
- Level 2: Reusable encoder - PercentEncoder with SafeCharacterSet and sinks
- Level 3: Configured encoder - PercentEncoderConfig presets and overrides
"""

from typing import Iterable, Optional, Union, cast

__version__ = "0.1.0"
__author__ = "Percent Encoder Team"

from .character.encoder import PercentEncoder
from .character.safe_chars import CharLike, SafeCharacterSet
from .character.sink import PercentEncoderSink, StreamSink, StringBuilderSink
from .character.transcoder import Transcoder
from .shared.config import EncoderConfig, PercentEncoderConfig
from .shared.errors import (
    EncodingError,
    InvalidSurrogatePairError,
    MalformedInputError,
    TranscoderOverflowError,
    UnmappableCharacterError,
)


def percent_encode(
    text: str,
    safe: Optional[Union[SafeCharacterSet, Iterable[CharLike]]] = None,
    charset: str = "utf-8",
    errors: str = "strict",
) -> str:
    """Percent-encode ``text`` with a one-shot encoder.

    Args:
        text: Text to encode
        safe: Characters left unescaped; RFC 3986 unreserved by default
        charset: Charset used for escaped characters
        errors: Codec error handler

    Returns:
        Encoded text
    """
    if safe is None:
        safe = SafeCharacterSet.unreserved()
    encoder = PercentEncoder(safe, config=EncoderConfig(charset=charset, errors=errors))
    return cast(str, encoder.encode(text))


__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple encoding function
    "percent_encode",

    # Level 2: Encoder, safe set, transcoder and sinks
    "PercentEncoder",
    "SafeCharacterSet",
    "Transcoder",
    "PercentEncoderSink",
    "StringBuilderSink",
    "StreamSink",

    # Level 3: Configuration
    "EncoderConfig",
    "PercentEncoderConfig",

    # Errors
    "EncodingError",
    "InvalidSurrogatePairError",
    "MalformedInputError",
    "UnmappableCharacterError",
    "TranscoderOverflowError",
]
