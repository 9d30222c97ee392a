"""Character/storage offset translation for checked text.

LanguageTool reports offsets in Unicode scalar values. The renderer splices
markup into the *encoded* text, where a scalar value may take several storage
units (bytes for UTF-8). ``TextBuffer`` keeps the text, its encoded storage,
and a prefix table of storage offsets so a character range can be turned into
the storage range that covers exactly the same scalar values, never splitting
a multi-byte character.

Ranges are validated when constructed: a ``CharSpan`` or ``StorageSpan`` that
exists is always well formed, and ``TextBuffer.span`` additionally checks it
against the buffer length. A bad range is a bug in the caller and raises
``InvalidSpanError`` straight away.
"""

from __future__ import annotations

import codecs
from bisect import bisect_left
from dataclasses import dataclass
from functools import cached_property
from itertools import accumulate


# Codecs that prefix every encode() call with a byte order mark, mapped to
# their BOM-free equivalent
_BOM_FREE_ENCODINGS = {
    "utf-16": "utf-16-le",
    "utf-32": "utf-32-le",
    "utf-8-sig": "utf-8",
}


class InvalidSpanError(ValueError):
    """Raised when a range violates ``0 <= start <= end <= length``."""


@dataclass(frozen=True)
class CharSpan:
    """Half-open ``[start, end)`` range counted in scalar values."""

    start: int
    end: int

    def __post_init__(self) -> None:
        _validate_bounds(self.start, self.end)

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class StorageSpan:
    """Half-open ``[start, end)`` range counted in storage units (bytes)."""

    start: int
    end: int

    def __post_init__(self) -> None:
        _validate_bounds(self.start, self.end)

    @property
    def length(self) -> int:
        return self.end - self.start


def _validate_bounds(start: object, end: object) -> None:
    if not isinstance(start, int) or not isinstance(end, int):
        raise InvalidSpanError(f"span bounds must be integers: {start!r}, {end!r}")
    if isinstance(start, bool) or isinstance(end, bool):
        raise InvalidSpanError(f"span bounds must be integers: {start!r}, {end!r}")
    if start < 0 or end < start:
        raise InvalidSpanError(f"invalid span [{start}, {end})")


class TextBuffer:
    """Immutable text together with its encoded storage."""

    def __init__(self, text: str, *, encoding: str = "utf-8") -> None:
        self._text = text
        name = codecs.lookup(encoding).name
        self._encoding = _BOM_FREE_ENCODINGS.get(name, name)
        self._storage = text.encode(self._encoding)

    @property
    def text(self) -> str:
        return self._text

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def storage(self) -> bytes:
        return self._storage

    def __len__(self) -> int:
        return len(self._text)

    def __repr__(self) -> str:
        return f"TextBuffer({self._text!r}, encoding={self._encoding!r})"

    @cached_property
    def _storage_offsets(self) -> list[int]:
        # offsets[i] is the storage offset of scalar value i; offsets[-1] is
        # the total storage length.
        widths = (len(ch.encode(self._encoding)) for ch in self._text)
        return list(accumulate(widths, initial=0))

    def span(self, start: int, end: int) -> CharSpan:
        """Return a validated character span inside this buffer."""
        span = CharSpan(start, end)
        if span.end > len(self._text):
            raise InvalidSpanError(
                f"span [{start}, {end}) exceeds buffer length {len(self._text)}"
            )
        return span

    def to_storage(self, span: CharSpan) -> StorageSpan:
        """Translate a character span into the storage span covering it."""
        if span.end > len(self._text):
            raise InvalidSpanError(
                f"span [{span.start}, {span.end}) exceeds buffer length {len(self._text)}"
            )
        offsets = self._storage_offsets
        return StorageSpan(offsets[span.start], offsets[span.end])

    def to_chars(self, span: StorageSpan) -> CharSpan:
        """Translate a storage span back into character coordinates.

        Both ends must sit on character boundaries.
        """
        return CharSpan(self._char_index(span.start), self._char_index(span.end))

    def _char_index(self, storage_offset: int) -> int:
        offsets = self._storage_offsets
        index = bisect_left(offsets, storage_offset)
        if index >= len(offsets) or offsets[index] != storage_offset:
            raise InvalidSpanError(
                f"storage offset {storage_offset} is not on a character boundary"
            )
        return index

    def slice(self, span: CharSpan) -> str:
        """Return the text covered by ``span``."""
        if span.end > len(self._text):
            raise InvalidSpanError(
                f"span [{span.start}, {span.end}) exceeds buffer length {len(self._text)}"
            )
        return self._text[span.start : span.end]
