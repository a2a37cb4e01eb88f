"""Immutable sets of characters that pass through the encoder unescaped."""

import string
from typing import FrozenSet, Iterable, Iterator, Tuple, Union

MAX_CODE_POINT = 0x10FFFF

# https://datatracker.ietf.org/doc/html/rfc3986#section-2.3
UNRESERVED_PUNCTUATION = "-._~"

CharLike = Union[str, int]


def _to_code_point(value: CharLike) -> int:
    if isinstance(value, str):
        if len(value) != 1:
            raise ValueError(f"Expected a single character, got {value!r}")
        return ord(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Expected a character or code point, got {type(value).__name__}")
    if not 0 <= value <= MAX_CODE_POINT:
        raise ValueError(f"Code point out of range: {value:#x}")
    return value


class SafeCharacterSet:
    """Read-only membership test over code point values.

    Instances never change after construction, so one set can back any number
    of encoders across threads.
    """

    __slots__ = ("_code_points",)

    def __init__(
        self,
        chars: Iterable[CharLike] = (),
        ranges: Iterable[Tuple[CharLike, CharLike]] = (),
    ) -> None:
        code_points = {_to_code_point(c) for c in chars}
        for low, high in ranges:
            start, end = _to_code_point(low), _to_code_point(high)
            if start > end:
                raise ValueError(f"Reversed range: {start:#x} > {end:#x}")
            code_points.update(range(start, end + 1))
        self._code_points: FrozenSet[int] = frozenset(code_points)

    @classmethod
    def from_chars(cls, chars: Iterable[CharLike]) -> "SafeCharacterSet":
        return cls(chars=chars)

    @classmethod
    def from_ranges(cls, *ranges: Tuple[CharLike, CharLike]) -> "SafeCharacterSet":
        """Build a set from inclusive ``(low, high)`` ranges."""
        return cls(ranges=ranges)

    @classmethod
    def alphanumeric(cls) -> "SafeCharacterSet":
        """ASCII letters and digits."""
        return cls(chars=string.ascii_letters + string.digits)

    @classmethod
    def unreserved(cls) -> "SafeCharacterSet":
        """RFC 3986 unreserved characters."""
        return cls(chars=string.ascii_letters + string.digits + UNRESERVED_PUNCTUATION)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return len(item) == 1 and ord(item) in self._code_points
        return item in self._code_points

    def __len__(self) -> int:
        return len(self._code_points)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._code_points))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SafeCharacterSet):
            return NotImplemented
        return self._code_points == other._code_points

    def __hash__(self) -> int:
        return hash(self._code_points)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(<{len(self)} code points>)"

    def union(self, *others: Union["SafeCharacterSet", Iterable[CharLike]]) -> "SafeCharacterSet":
        """Return a new set containing this set's members and ``others``."""
        merged = set(self._code_points)
        for other in others:
            if isinstance(other, SafeCharacterSet):
                merged.update(other._code_points)
            else:
                merged.update(_to_code_point(c) for c in other)
        return SafeCharacterSet(chars=merged)

    def __or__(self, other: object) -> "SafeCharacterSet":
        if not isinstance(other, SafeCharacterSet):
            return NotImplemented
        return self.union(other)

    @property
    def code_points(self) -> FrozenSet[int]:
        return self._code_points
