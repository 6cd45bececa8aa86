"""Line indenters for the two sub-languages.

Both operate on the cursor row, which is the only capability the indent
coordinator requires. They are intentionally shallow: real hosts plug in
their own language tooling through :class:`LineIndenter`.
"""

from __future__ import annotations

import re
from typing import List, Optional, Protocol

from dualmode_engine.buffer import Buffer, indentation_of, is_blank

_STRING_LITERAL = re.compile(r'"(?:\\.|[^"\\])*"|' + r"'(?:\\.|[^'\\])*'")


class LineIndenter(Protocol):
    def indent_current_line(self, buffer: Buffer) -> None:
        ...


def _code_part(line: str) -> str:
    # block comments are not tracked
    return _STRING_LITERAL.sub("", line).split("//", 1)[0]


class BraceIndenter:
    """Brace-depth indenter for the embedded C-like language.

    A line is indented ``width`` columns past the line that opened the
    innermost unclosed ``{``; a line starting with ``}`` aligns with that
    opener instead.
    """

    name = "brace"

    def __init__(self, width: int = 4) -> None:
        self.width = width

    def column_for(self, buffer: Buffer, row: int) -> int:
        openers: List[int] = []
        for above in range(row):
            raw = buffer.document.get_line(above)
            for char in _code_part(raw):
                if char == "{":
                    openers.append(indentation_of(raw))
                elif char == "}" and openers:
                    openers.pop()
        if not openers:
            return 0
        if _code_part(buffer.document.get_line(row)).lstrip().startswith("}"):
            return openers[-1]
        return openers[-1] + self.width

    def indent_current_line(self, buffer: Buffer) -> None:
        row = buffer.state.cursor[0]
        buffer.set_indentation(row, self.column_for(buffer, row))


class BlockKeywordIndenter:
    """Previous-line keyword heuristic for the host description language."""

    name = "block-keyword"

    OPENERS = re.compile(
        r"\b(?:BEGIN|IS|THEN|LOOP|GENERATE|ELSE|RECORD)\s*$", re.IGNORECASE
    )
    CLOSERS = re.compile(r"^\s*(?:END|ELSE|ELSIF|BEGIN)\b", re.IGNORECASE)

    def __init__(self, width: int = 2, base_offset: int = 0) -> None:
        self.width = width
        self.base_offset = base_offset

    def _previous_code_row(self, buffer: Buffer, row: int) -> Optional[int]:
        for above in range(row - 1, -1, -1):
            if not is_blank(buffer.document.get_line(above)):
                return above
        return None

    def column_for(self, buffer: Buffer, row: int) -> int:
        previous = self._previous_code_row(buffer, row)
        if previous is None:
            return self.base_offset
        prev_line = buffer.document.get_line(previous)
        column = indentation_of(prev_line)
        if self.OPENERS.search(prev_line.split("--", 1)[0].rstrip()):
            column += self.width
        if self.CLOSERS.match(buffer.document.get_line(row)):
            column -= self.width
        return max(self.base_offset, column)

    def indent_current_line(self, buffer: Buffer) -> None:
        row = buffer.state.cursor[0]
        buffer.set_indentation(row, self.column_for(buffer, row))


__all__ = ["BlockKeywordIndenter", "BraceIndenter", "LineIndenter"]
