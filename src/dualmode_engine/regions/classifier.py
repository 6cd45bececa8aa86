"""Two-state language classification built on the delimiter scanner."""

from __future__ import annotations

from enum import Enum

from dualmode_engine.buffer import Buffer, Cursor

from .delimiters import DEFAULT_DELIMITERS, DelimiterPair, DelimiterScanner


class LanguageMode(str, Enum):
    """Which sub-language governs a position in the buffer."""

    HOST = "host"
    EMBEDDED = "embedded"


class RegionClassifier:
    """Single source of truth for "which language applies here".

    The dispatcher, the indent coordinator and the syntax classifier all
    share one instance so highlighting and indentation never disagree.
    """

    def __init__(self, scanner: DelimiterScanner | None = None) -> None:
        self.scanner = scanner or DelimiterScanner(DEFAULT_DELIMITERS)

    @classmethod
    def for_pair(cls, pair: DelimiterPair) -> "RegionClassifier":
        return cls(DelimiterScanner(pair))

    @property
    def pair(self) -> DelimiterPair:
        return self.scanner.pair

    def classify(self, buffer: Buffer, offset: int) -> LanguageMode:
        return self._mode(self.scanner.is_inside(buffer, offset))

    def classify_cursor(
        self, buffer: Buffer, cursor: Cursor | None = None
    ) -> LanguageMode:
        position = cursor if cursor is not None else buffer.state.cursor
        return self._mode(self.scanner.is_inside_at(buffer, position))

    def classify_line(self, buffer: Buffer, row: int) -> LanguageMode:
        return self.classify_cursor(buffer, (row, 0))

    @staticmethod
    def _mode(inside: bool) -> LanguageMode:
        return LanguageMode.EMBEDDED if inside else LanguageMode.HOST


__all__ = ["LanguageMode", "RegionClassifier"]
