"""Cursor state, host snapshots and position errors for buffers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Tuple

Cursor = Tuple[int, int]  # (row, column)


class BufferValidationError(RuntimeError):
    """A row, column or offset fell outside the document."""

    def __init__(self, message: str, *, cursor: Cursor | None = None) -> None:
        super().__init__(message)
        self.cursor = cursor


@dataclass(slots=True)
class BufferState:
    """Cursor position plus the document version of the latest edit."""

    cursor: Cursor = (0, 0)
    last_change_tick: int = 0

    def set_cursor(self, row: int, col: int) -> None:
        self.cursor = (row, col)

    def clamp_to(self, lines: Sequence[str]) -> Cursor:
        """Pull the cursor back inside ``lines`` after they shrank."""

        row = min(self.cursor[0], len(lines) - 1)
        col = min(self.cursor[1], len(lines[row]))
        self.cursor = (row, col)
        return self.cursor


@dataclass(slots=True)
class BufferMirror:
    """What a host widget needs to redraw: text, cursor and version."""

    text: str
    cursor: Cursor
    version: int = 0
    attributes: dict[str, str] = field(default_factory=dict)
