"""Result objects and metrics for percent encoding operations.

This module defines the tagged result produced by each transcoder step and the
per-call metrics collected by the encoder.
"""

from dataclasses import dataclass
from enum import Enum, auto


class TranscodeOutcome(Enum):
    """Outcome of a single transcoder step."""

    UNDERFLOW = auto()    # All input consumed, output written
    OVERFLOW = auto()     # Output buffer too small
    MALFORMED = auto()    # Input not valid under the charset rules
    UNMAPPABLE = auto()   # Valid input with no representation in the charset


@dataclass(frozen=True)
class TranscodeResult:
    """Tagged result of encoding a run of characters to bytes.

    Attributes:
        outcome: What happened during the step
        length: Number of offending code units for error outcomes
        byte_count: Number of bytes written on success
    """

    outcome: TranscodeOutcome
    length: int = 0
    byte_count: int = 0

    def __post_init__(self) -> None:
        """Validate result counters."""
        if self.length < 0:
            raise ValueError("length must be >= 0")
        if self.byte_count < 0:
            raise ValueError("byte_count must be >= 0")

    @classmethod
    def underflow(cls, byte_count: int = 0) -> "TranscodeResult":
        return cls(TranscodeOutcome.UNDERFLOW, byte_count=byte_count)

    @classmethod
    def overflow(cls, length: int = 0) -> "TranscodeResult":
        return cls(TranscodeOutcome.OVERFLOW, length=length)

    @classmethod
    def malformed(cls, length: int) -> "TranscodeResult":
        return cls(TranscodeOutcome.MALFORMED, length=length)

    @classmethod
    def unmappable(cls, length: int) -> "TranscodeResult":
        return cls(TranscodeOutcome.UNMAPPABLE, length=length)

    @property
    def is_underflow(self) -> bool:
        return self.outcome is TranscodeOutcome.UNDERFLOW

    @property
    def is_overflow(self) -> bool:
        return self.outcome is TranscodeOutcome.OVERFLOW

    @property
    def is_malformed(self) -> bool:
        return self.outcome is TranscodeOutcome.MALFORMED

    @property
    def is_unmappable(self) -> bool:
        return self.outcome is TranscodeOutcome.UNMAPPABLE

    @property
    def is_error(self) -> bool:
        """True for malformed and unmappable outcomes."""
        return self.is_malformed or self.is_unmappable


@dataclass
class EncodingMetrics:
    """Counters collected during a single encode call."""

    characters_processed: int = 0
    safe_characters: int = 0
    escaped_characters: int = 0
    escaped_bytes: int = 0
    flush_count: int = 0
    processing_time_ms: float = 0.0

    @property
    def output_characters(self) -> int:
        """Number of characters delivered to the sink."""
        return self.safe_characters + 3 * self.escaped_bytes

    @property
    def escape_ratio(self) -> float:
        """Fraction of logical input characters that were escaped."""
        total = self.safe_characters + self.escaped_characters
        if total == 0:
            return 0.0
        return self.escaped_characters / total

    @property
    def expansion_ratio(self) -> float:
        """Output length relative to input length."""
        if self.characters_processed == 0:
            return 1.0
        return self.output_characters / self.characters_processed

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    def to_dict(self) -> dict:
        return {
            "characters_processed": self.characters_processed,
            "safe_characters": self.safe_characters,
            "escaped_characters": self.escaped_characters,
            "escaped_bytes": self.escaped_bytes,
            "flush_count": self.flush_count,
            "output_characters": self.output_characters,
            "processing_time_ms": self.processing_time_ms,
        }
