"""Delimiter scanning: is an offset inside an embedded code region?

Membership is decided by counting delimiter matches that end before the
offset: the offset is embedded when more openers than closers precede it.
Regions are assumed to be well formed; nothing here validates pairing.
Patterns must not match across a newline or look behind the start of a
line, which lets the cached scanner keep per-line counts. They are compiled
with ``re.MULTILINE`` so ``^`` and ``$`` anchor to line boundaries in both
the per-line and the full-text scan.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple
from weakref import WeakKeyDictionary

from dualmode_engine.buffer import Buffer, Cursor

SECTION_PREFIXES = ("ARCH", "BLOCK", "ENTITY", "FOO", "PACKAGE", "PROCESS")

OPEN_PATTERN = (
    r"\b(?:" + "|".join(SECTION_PREFIXES) + r")_[A-Z][A-Z0-9]*[ \t]+[A-Za-z_]\w*"
)
CLOSE_PATTERN = r"\bENDCODE\b"

Counts = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class DelimiterPair:
    """Compiled opening and closing marker patterns for one buffer type."""

    open: Pattern[str]
    close: Pattern[str]

    @classmethod
    def compile(cls, open_pattern: str, close_pattern: str) -> "DelimiterPair":
        # line anchors must agree between single lines and the joined text
        return cls(
            open=re.compile(open_pattern, re.MULTILINE),
            close=re.compile(close_pattern, re.MULTILINE),
        )

    def counts(self, text: str, start: int = 0, end: Optional[int] = None) -> Counts:
        return (
            count_matches(self.open, text, start, end),
            count_matches(self.close, text, start, end),
        )

    def matches_line(self, line: str) -> bool:
        return bool(self.open.search(line) or self.close.search(line))


DEFAULT_DELIMITERS = DelimiterPair.compile(OPEN_PATTERN, CLOSE_PATTERN)


def count_matches(
    pattern: Pattern[str], text: str, start: int = 0, end: Optional[int] = None
) -> int:
    """Number of non-overlapping matches lying entirely within ``text[start:end]``."""

    stop = len(text) if end is None else end
    return sum(1 for _ in pattern.finditer(text, start, stop))


def is_inside(text: str, offset: int, pair: DelimiterPair = DEFAULT_DELIMITERS) -> bool:
    """Reference full-rescan membership test."""

    opens, closes = pair.counts(text, 0, offset)
    return opens > closes


class DelimiterIndex:
    """Cumulative delimiter counts at each line start of one buffer.

    ``_prefix[row]`` holds the counts of all lines before ``row``. An edit
    touching ``row`` keeps ``_prefix[: row + 1]`` and drops the rest; the
    table is then extended lazily up to whatever row the next query needs.
    """

    def __init__(self, pair: DelimiterPair) -> None:
        self.pair = pair
        self._prefix: List[Counts] = [(0, 0)]
        self._version: Optional[int] = None

    def invalidate_from(self, row: int) -> None:
        del self._prefix[max(row, 0) + 1 :]
        self._version = None

    def reset(self) -> None:
        self._prefix = [(0, 0)]
        self._version = None

    @property
    def cached_rows(self) -> int:
        return len(self._prefix)

    def counts_before(self, buffer: Buffer, cursor: Cursor) -> Counts:
        version = buffer.document.version
        if self._version is not None and self._version != version:
            # document swapped without a change notification
            self.reset()
        self._version = version

        row, col = cursor
        while len(self._prefix) <= row:
            opens, closes = self._prefix[-1]
            line_opens, line_closes = self.pair.counts(
                buffer.document.get_line(len(self._prefix) - 1)
            )
            self._prefix.append((opens + line_opens, closes + line_closes))

        opens, closes = self._prefix[row]
        line = buffer.document.get_line(row)
        line_opens, line_closes = self.pair.counts(line, 0, col)
        return (opens + line_opens, closes + line_closes)


class DelimiterScanner:
    """Membership test over buffers with one cached index per buffer."""

    def __init__(self, pair: DelimiterPair = DEFAULT_DELIMITERS) -> None:
        self.pair = pair
        self._indexes: "WeakKeyDictionary[Buffer, DelimiterIndex]" = (
            WeakKeyDictionary()
        )

    def index_for(self, buffer: Buffer) -> DelimiterIndex:
        index = self._indexes.get(buffer)
        if index is None:
            index = DelimiterIndex(self.pair)
            buffer.add_change_listener(index.invalidate_from)
            self._indexes[buffer] = index
        return index

    def forget(self, buffer: Buffer) -> None:
        index = self._indexes.pop(buffer, None)
        if index is not None:
            buffer.remove_change_listener(index.invalidate_from)

    def is_inside(self, buffer: Buffer, offset: int) -> bool:
        return self.is_inside_at(buffer, buffer.cursor_for(offset))

    def is_inside_at(self, buffer: Buffer, cursor: Cursor) -> bool:
        opens, closes = self.index_for(buffer).counts_before(buffer, cursor)
        return opens > closes

    def line_has_delimiter(self, line: str) -> bool:
        return self.pair.matches_line(line)

    def find_open_above(self, buffer: Buffer, row: int) -> Optional[int]:
        for candidate in range(row - 1, -1, -1):
            if self.pair.open.search(buffer.document.get_line(candidate)):
                return candidate
        return None

    def find_close_below(self, buffer: Buffer, row: int) -> Optional[int]:
        for candidate in range(row + 1, buffer.line_count):
            if self.pair.close.search(buffer.document.get_line(candidate)):
                return candidate
        return None


__all__ = [
    "CLOSE_PATTERN",
    "DEFAULT_DELIMITERS",
    "DelimiterIndex",
    "DelimiterPair",
    "DelimiterScanner",
    "OPEN_PATTERN",
    "SECTION_PREFIXES",
    "count_matches",
    "is_inside",
]
