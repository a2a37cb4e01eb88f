"""Resettable text-to-bytes transcoding on top of Python codecs.

A Transcoder wraps one incremental encoder and reports each step as a tagged
TranscodeResult instead of raising, so the encoder engine decides how each
outcome surfaces to callers.
"""

import codecs
import unicodedata
from functools import lru_cache
from typing import Tuple

from percent_encoder.shared.config import BOUNDED_ERROR_HANDLERS
from percent_encoder.shared.result import TranscodeResult

SURROGATE_RANGE_START = 0xD800
SURROGATE_RANGE_END = 0xDFFF
BMP_MAX = 0xFFFF
MAX_CODE_POINT = 0x10FFFF

# Characters whose encoded length bounds a codec's bytes per character:
# ASCII, Latin-1 edge, 2- and 3-byte UTF-8 edges, supplementary planes, and
# lone surrogates for handlers such as surrogatepass or backslashreplace.
PROBE_CHARACTERS: Tuple[str, ...] = (
    "a",
    "\x7f",
    "\xff",
    "\u07ff",
    "\u0800",
    "\uffff",
    "\U00010000",
    "\U0010ffff",
    "\ud800",
    "\udfff",
)


def utf16_length(text: str) -> int:
    """Number of UTF-16 code units needed for ``text``."""
    return sum(2 if ord(c) > BMP_MAX else 1 for c in text)


def is_surrogate(char: str) -> bool:
    return SURROGATE_RANGE_START <= ord(char) <= SURROGATE_RANGE_END


@lru_cache(maxsize=None)
def longest_named_character() -> str:
    """Character whose Unicode name is longest; bounds ``namereplace`` output."""
    longest = ""
    longest_length = 0
    for code_point in range(MAX_CODE_POINT + 1):
        length = len(unicodedata.name(chr(code_point), ""))
        if length > longest_length:
            longest = chr(code_point)
            longest_length = length
    return longest


def probe_max_bytes_per_char(charset: str, errors: str = "strict") -> int:
    """Largest byte output of a single character from a fresh encoder.

    Includes any byte-order mark the codec writes after a reset. Characters
    the codec cannot encode under ``errors`` are skipped.

    Raises:
        LookupError: if ``charset`` is unknown or does not encode text to bytes
    """
    factory = codecs.getincrementalencoder(charset)
    probes = PROBE_CHARACTERS
    if errors == "namereplace":
        probes += (longest_named_character(),)
    largest = 1
    for char in probes:
        try:
            data = factory(errors).encode(char, True)
        except UnicodeEncodeError:
            continue
        except TypeError:
            raise LookupError(f"{charset} is not a text-to-bytes encoding") from None
        if not isinstance(data, bytes):
            raise LookupError(f"{charset} is not a text-to-bytes encoding")
        largest = max(largest, len(data))
    return largest


class Transcoder:
    """Stateful converter from runs of characters to bytes.

    Not thread-safe: one owner, reset before each run.
    """

    def __init__(self, charset: str = "utf-8", errors: str = "strict") -> None:
        """Initialize the transcoder.

        Args:
            charset: Codec name, normalised through ``codecs.lookup``
            errors: Codec error handler name

        Raises:
            LookupError: for an unknown charset or error handler
            ValueError: for a registered error handler whose output per
                character has no known bound
        """
        self.charset = codecs.lookup(charset).name
        codecs.lookup_error(errors)
        if errors not in BOUNDED_ERROR_HANDLERS:
            raise ValueError(f"Error handler {errors} has no known output bound")
        self.errors = errors
        self._encoder = codecs.getincrementalencoder(self.charset)(errors)
        self.max_bytes_per_char = probe_max_bytes_per_char(self.charset, errors)

    def __repr__(self) -> str:
        return f"Transcoder(charset={self.charset!r}, errors={self.errors!r})"

    def reset(self) -> None:
        """Discard codec state left over from a previous run."""
        self._encoder.reset()

    def encode(self, chars: str, out: bytearray, limit: int) -> TranscodeResult:
        """Encode ``chars`` as a complete run and append the bytes to ``out``.

        Nothing is appended unless the whole result fits within ``limit``.
        """
        try:
            data = self._encoder.encode(chars, True)
        except UnicodeEncodeError as e:
            return self._classify(e)
        return self._append(data, out, limit)

    def flush(self, out: bytearray, limit: int) -> TranscodeResult:
        """Drain any bytes the codec still holds after the final run."""
        try:
            data = self._encoder.encode("", True)
        except UnicodeEncodeError as e:
            return self._classify(e)
        return self._append(data, out, limit)

    @staticmethod
    def _append(data: bytes, out: bytearray, limit: int) -> TranscodeResult:
        if len(out) + len(data) > limit:
            return TranscodeResult.overflow(len(data))
        out.extend(data)
        return TranscodeResult.underflow(len(data))

    @staticmethod
    def _classify(error: UnicodeEncodeError) -> TranscodeResult:
        # codecs report a run of failing characters as one range; only the
        # first character of the run is reported
        offending = error.object[error.start:error.start + 1]
        length = max(1, utf16_length(offending))
        if offending and is_surrogate(offending):
            return TranscodeResult.malformed(length)
        return TranscodeResult.unmappable(length)
