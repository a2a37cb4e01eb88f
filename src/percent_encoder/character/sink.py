"""Output sinks receiving encoded characters one at a time.

The encoder only ever calls ``on_encoded_char``; how the characters are
collected is up to the sink.
"""

from abc import ABC, abstractmethod
from typing import List, TextIO


class PercentEncoderSink(ABC):
    """Receives encoder output in strict left-to-right order."""

    @abstractmethod
    def on_encoded_char(self, char: str) -> None:
        """Accept the next output character."""


class StringBuilderSink(PercentEncoderSink):
    """Accumulates output characters into a string.

    Reusable across calls: ``reset`` clears the contents but keeps the
    capacity hint.
    """

    def __init__(self, capacity: int = 16) -> None:
        self._chars: List[str] = []
        self.capacity = capacity

    def on_encoded_char(self, char: str) -> None:
        self._chars.append(char)

    def reset(self) -> None:
        self._chars.clear()

    def ensure_capacity(self, minimum: int) -> None:
        """Record that at least ``minimum`` characters are expected."""
        if minimum > self.capacity:
            self.capacity = minimum

    def get_contents(self) -> str:
        return "".join(self._chars)

    def __len__(self) -> int:
        return len(self._chars)


class StreamSink(PercentEncoderSink):
    """Writes each output character straight to a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self.characters_written = 0

    def on_encoded_char(self, char: str) -> None:
        self.stream.write(char)
        self.characters_written += 1
