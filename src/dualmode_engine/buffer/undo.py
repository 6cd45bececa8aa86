"""Undo history for buffer edits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .state import Cursor


@dataclass(frozen=True, slots=True)
class UndoEntry:
    label: str
    before_text: str
    after_text: str
    cursor_before: Cursor
    cursor_after: Cursor


class UndoTimeline:
    """Linear undo/redo history; pushing after an undo drops the redo tail."""

    def __init__(self) -> None:
        self._entries: List[UndoEntry] = []
        self._cursor: int = 0

    def __len__(self) -> int:
        return self._cursor

    def push(self, entry: UndoEntry) -> None:
        del self._entries[self._cursor :]
        self._entries.append(entry)
        self._cursor = len(self._entries)

    def labels(self) -> tuple[str, ...]:
        return tuple(entry.label for entry in self._entries[: self._cursor])

    def undo(self) -> Optional[UndoEntry]:
        if self._cursor == 0:
            return None
        self._cursor -= 1
        return self._entries[self._cursor]

    def redo(self) -> Optional[UndoEntry]:
        if self._cursor >= len(self._entries):
            return None
        self._cursor += 1
        return self._entries[self._cursor - 1]
