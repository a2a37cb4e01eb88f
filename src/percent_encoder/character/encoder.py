"""Percent encoder engine.

Characters outside a safe set are transcoded to bytes and written as ``%XX``
escapes with uppercase hex digits. Runs of unsafe characters are buffered and
transcoded together; surrogate pairs always stay in the same run.

Encoder instances reuse their transcoder and buffers across calls and are
therefore not safe for concurrent use. Give each thread its own encoder; the
SafeCharacterSet itself can be shared.
"""

import time
from typing import Iterable, List, Optional, Union

from percent_encoder.character.safe_chars import CharLike, SafeCharacterSet
from percent_encoder.character.sink import PercentEncoderSink, StringBuilderSink
from percent_encoder.character.transcoder import BMP_MAX, Transcoder
from percent_encoder.shared.config import EncoderConfig
from percent_encoder.shared.errors import (
    InvalidSurrogatePairError,
    MalformedInputError,
    TranscoderOverflowError,
    UnmappableCharacterError,
)
from percent_encoder.shared.logging import get_logger
from percent_encoder.shared.result import EncodingMetrics, TranscodeResult

HIGH_SURROGATE_START = 0xD800
HIGH_SURROGATE_END = 0xDBFF
LOW_SURROGATE_START = 0xDC00
LOW_SURROGATE_END = 0xDFFF
SUPPLEMENTARY_BASE = 0x10000

HEX_DIGITS = "0123456789ABCDEF"


def is_high_surrogate(char: str) -> bool:
    return HIGH_SURROGATE_START <= ord(char) <= HIGH_SURROGATE_END


def is_low_surrogate(char: str) -> bool:
    return LOW_SURROGATE_START <= ord(char) <= LOW_SURROGATE_END


def combine_surrogates(high: str, low: str) -> str:
    """Join a high/low surrogate pair into the character it represents."""
    return chr(
        SUPPLEMENTARY_BASE
        + ((ord(high) - HIGH_SURROGATE_START) << 10)
        + (ord(low) - LOW_SURROGATE_START)
    )


class PercentEncoder:
    """Encodes unsafe characters as sequences of ``%XX`` hex-encoded bytes.

    Example:
        >>> encoder = PercentEncoder(SafeCharacterSet.alphanumeric())
        >>> encoder.encode("a b")
        'a%20b'
    """

    def __init__(
        self,
        safe_chars: Union[SafeCharacterSet, Iterable[CharLike]],
        transcoder: Optional[Transcoder] = None,
        config: Optional[EncoderConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize the encoder.

        Args:
            safe_chars: Characters to pass through unescaped; treated as read only
            transcoder: Transcoder owned by this encoder from now on; built
                from ``config`` when omitted
            config: Encoder configuration; defaults to UTF-8, strict
            correlation_id: Optional correlation ID for log records
        """
        if not isinstance(safe_chars, SafeCharacterSet):
            safe_chars = SafeCharacterSet(chars=safe_chars)
        self.config = config or EncoderConfig()
        self.safe_chars = safe_chars
        self.transcoder = transcoder or Transcoder(self.config.charset, self.config.errors)
        self.logger = get_logger(__name__, correlation_id, "percent_encoder")

        max_bytes_per_char = (
            self.config.max_bytes_per_char or self.transcoder.max_bytes_per_char
        )
        self.pending_capacity = self.config.pending_capacity
        self.byte_capacity = (1 + max_bytes_per_char) * self.pending_capacity

        self._code_points = safe_chars.code_points
        self._pending: List[str] = []
        self._pending_units = 0
        self._byte_buffer = bytearray()
        self._string_sink = StringBuilderSink()
        self._metrics: Optional[EncodingMetrics] = None
        self.last_metrics: Optional[EncodingMetrics] = None

        self.logger.debug(
            "Percent encoder initialized",
            extra={
                "charset": self.transcoder.charset,
                "errors": self.transcoder.errors,
                "safe_chars": len(safe_chars),
                "pending_capacity": self.pending_capacity,
                "byte_capacity": self.byte_capacity,
            },
        )

    @classmethod
    def from_config(
        cls,
        safe_chars: Union[SafeCharacterSet, Iterable[CharLike]],
        config: EncoderConfig,
        correlation_id: Optional[str] = None,
    ) -> "PercentEncoder":
        return cls(safe_chars, config=config, correlation_id=correlation_id)

    def encode(self, text: str, sink: Optional[PercentEncoderSink] = None) -> Optional[str]:
        """Percent-encode ``text``.

        Args:
            text: Characters to encode
            sink: Receives output characters in order; when omitted the
                output is collected and returned as a string

        Returns:
            The encoded string when no sink is given, otherwise None

        Raises:
            InvalidSurrogatePairError: if a high surrogate is not followed by
                a low surrogate
            MalformedInputError: if the transcoder reports malformed input
            UnmappableCharacterError: if the transcoder cannot map a character
        """
        if sink is None:
            string_sink = self._string_sink
            string_sink.reset()
            if self.config.presize_output:
                string_sink.ensure_capacity(len(text))
            self._encode(text, string_sink)
            return string_sink.get_contents()

        self._encode(text, sink)
        return None

    def _encode(self, text: str, sink: PercentEncoderSink) -> None:
        started = time.perf_counter()
        self._metrics = EncodingMetrics() if self.config.enable_metrics else None
        self._pending.clear()
        self._pending_units = 0

        try:
            self._scan(text, sink)
        except (InvalidSurrogatePairError, MalformedInputError,
                UnmappableCharacterError) as e:
            self._pending.clear()
            self._pending_units = 0
            self.last_metrics = None
            self.logger.debug(
                "Encoding aborted",
                extra={"error_type": type(e).__name__, "input_length": len(text)},
            )
            raise

        if self._metrics is not None:
            self._metrics.characters_processed = len(text)
            self._metrics.processing_time_ms = (time.perf_counter() - started) * 1000.0
        self.last_metrics = self._metrics

    def _scan(self, text: str, sink: PercentEncoderSink) -> None:
        safe = self._code_points
        metrics = self._metrics
        length = len(text)
        i = 0

        while i < length:
            char = text[i]

            if ord(char) in safe:
                if self._pending_units:
                    self._flush(sink)
                sink.on_encoded_char(char)
                if metrics is not None:
                    metrics.safe_characters += 1
                i += 1
                continue

            if is_high_surrogate(char):
                if i + 1 >= length:
                    raise InvalidSurrogatePairError(i, char)
                low = text[i + 1]
                if not is_low_surrogate(low):
                    raise InvalidSurrogatePairError(i, char, low)
                self._pending.append(combine_surrogates(char, low))
                self._pending_units += 2
                i += 2
            else:
                self._pending.append(char)
                self._pending_units += 2 if ord(char) > BMP_MAX else 1
                i += 1

            if metrics is not None:
                metrics.escaped_characters += 1

            # flush if the next pair might not fit
            if self.pending_capacity - self._pending_units < 2:
                self._flush(sink)

        if self._pending_units:
            self._flush(sink)

    def _flush(self, sink: PercentEncoderSink) -> None:
        """Transcode the pending run and write its bytes as hex escapes.

        Side effects: the pending buffer is emptied and the byte buffer is
        overwritten.
        """
        chars = "".join(self._pending)
        buffer = self._byte_buffer
        buffer.clear()

        self.transcoder.reset()
        self._check_result(self.transcoder.encode(chars, buffer, self.byte_capacity))
        self._check_result(self.transcoder.flush(buffer, self.byte_capacity))

        for byte in buffer:
            sink.on_encoded_char("%")
            sink.on_encoded_char(HEX_DIGITS[byte >> 4])
            sink.on_encoded_char(HEX_DIGITS[byte & 0xF])

        if self._metrics is not None:
            self._metrics.escaped_bytes += len(buffer)
            self._metrics.flush_count += 1

        self._pending.clear()
        self._pending_units = 0

    def _check_result(self, result: TranscodeResult) -> None:
        if result.is_overflow:
            self.logger.error(
                "Byte buffer overflow while transcoding",
                extra={"byte_capacity": self.byte_capacity, "needed": result.length},
                exc_info=False,
            )
            raise TranscoderOverflowError(
                f"Byte buffer overflow ({self.byte_capacity} bytes); "
                f"{self.transcoder!r} exceeded its probed size"
            )
        if result.is_malformed:
            raise MalformedInputError(result.length)
        if result.is_unmappable:
            raise UnmappableCharacterError(result.length)
