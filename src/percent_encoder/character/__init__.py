"""Character processing layer for percent encoding.

This module provides the safe-character set, the charset transcoder, output
sinks and the encoder engine that ties them together.
"""

from .encoder import PercentEncoder
from .safe_chars import SafeCharacterSet
from .sink import PercentEncoderSink, StreamSink, StringBuilderSink
from .transcoder import Transcoder

__all__ = [
    # Modules
    "encoder",
    "safe_chars",
    "sink",
    "transcoder",
    # Main classes for direct access
    "PercentEncoder",
    "SafeCharacterSet",
    "Transcoder",
    # Sinks
    "PercentEncoderSink",
    "StreamSink",
    "StringBuilderSink",
]
