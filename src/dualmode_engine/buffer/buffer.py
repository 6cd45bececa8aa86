"""High-level buffer façade combining document, cursor state, and undo."""

from __future__ import annotations

from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass
from typing import Callable, ContextManager, Iterator, List, Optional

from dualmode_engine.runtime import telemetry

from .document import BufferDocument, indentation_of
from .state import BufferMirror, BufferState, Cursor
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_cursor, ensure_offset, ensure_row

ChangeListener = Callable[[int], None]


@dataclass(slots=True)
class BufferDelta:
    version: int
    first_row: int
    cursor: Cursor
    label: str


class Buffer:
    """Mutable text buffer that reports the first touched row of every edit.

    Listeners registered through :meth:`add_change_listener` receive that row
    so derived caches (delimiter counts, highlighting) can drop only what the
    edit could have affected.
    """

    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        undo: Optional[UndoTimeline] = None,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.undo = undo or UndoTimeline()
        self._listeners: List[ChangeListener] = []
        self._undo_group: Optional[str] = None

    @classmethod
    def from_text(cls, text: str, *, name: str = "default") -> "Buffer":
        return cls(name=name, document=BufferDocument.from_text(text))

    @property
    def text(self) -> str:
        return self.document.text()

    @property
    def line_count(self) -> int:
        return self.document.line_count

    def line(self, row: int) -> str:
        return self.document.get_line(ensure_row(self.document, row))

    def add_change_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def remove_change_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            text=self.text,
            cursor=self.state.cursor,
            version=self.document.version,
            attributes=dict(attributes or {}),
        )

    def offset_for(self, cursor: Cursor) -> int:
        row, col = ensure_cursor(self.document, cursor)
        return self.document.line_start_offset(row) + col

    def cursor_for(self, offset: int) -> Cursor:
        return self.document.position_for_offset(ensure_offset(self.document, offset))

    def move_cursor(self, row: int, col: int = 0) -> Cursor:
        cursor = ensure_cursor(self.document, (row, col))
        self.state.set_cursor(*cursor)
        return cursor

    def replace_range(
        self,
        start: Cursor,
        end: Cursor,
        text: str,
        *,
        label: str,
    ) -> BufferDelta:
        start = ensure_cursor(self.document, start)
        end = ensure_cursor(self.document, end)
        if start > end:
            start, end = end, start
        with Transaction(self, label):
            (start_row, start_col), (end_row, end_col) = start, end
            head = self.document.get_line(start_row)[:start_col]
            tail = self.document.get_line(end_row)[end_col:]
            new_lines = (head + text + tail).split("\n")
            self._apply(start_row, end_row + 1, new_lines)
            last_row = start_row + len(new_lines) - 1
            last_col = len(new_lines[-1]) - len(tail)
            self.state.set_cursor(last_row, last_col)
        return self._delta(start_row, label)

    def insert_text(self, text: str, *, cursor: Optional[Cursor] = None) -> BufferDelta:
        position = cursor or self.state.cursor
        return self.replace_range(position, position, text, label="insert_text")

    def replace_text(self, text: str, *, label: str) -> Optional[BufferDelta]:
        """Make the buffer read ``text`` by rewriting only the span that differs.

        Shared leading and trailing text is kept, so listeners see the first
        row that actually changed. Returns ``None`` when nothing differs.
        """

        current = self.text
        if current == text:
            return None
        limit = min(len(current), len(text))
        head = 0
        while head < limit and current[head] == text[head]:
            head += 1
        tail = 0
        while tail < limit - head and current[-1 - tail] == text[-1 - tail]:
            tail += 1
        return self.replace_range(
            self.cursor_for(head),
            self.cursor_for(len(current) - tail),
            text[head : len(text) - tail],
            label=label,
        )

    def insert_line(self, row: int, text: str) -> BufferDelta:
        """Insert ``text`` as a new line so that it becomes line ``row``."""

        if row != self.line_count:
            ensure_row(self.document, row)
        with Transaction(self, "insert_line"):
            cursor_row, cursor_col = self.state.cursor
            self._apply(row, row, [text])
            if cursor_row >= row:
                self.state.set_cursor(cursor_row + 1, cursor_col)
        return self._delta(row, "insert_line")

    def delete_line(self, row: int) -> BufferDelta:
        ensure_row(self.document, row)
        with Transaction(self, "delete_line"):
            cursor_row, cursor_col = self.state.cursor
            self._apply(row, row + 1, [])
            if cursor_row > row:
                self.state.set_cursor(cursor_row - 1, cursor_col)
            elif cursor_row == row:
                self.state.clamp_to(self.document.snapshot())
        return self._delta(row, "delete_line")

    def set_indentation(self, row: int, width: int) -> int:
        """Re-indent ``row`` to ``width`` spaces; returns the column delta.

        A cursor on ``row`` keeps its position relative to the line's text and
        is moved to the new indentation when it sat inside the old one.
        """

        if width < 0:
            raise ValueError("indentation width cannot be negative")
        line = self.line(row)
        current = indentation_of(line)
        updated = " " * width + line[current:]
        if updated == line:
            return 0
        delta = width - current
        with Transaction(self, "set_indentation"):
            cursor_row, cursor_col = self.state.cursor
            self._apply(row, row + 1, [updated])
            if cursor_row == row:
                self.state.set_cursor(row, max(width, cursor_col + delta))
        return delta

    def restore(self, entry: UndoEntry, *, forward: bool = False) -> None:
        text = entry.after_text if forward else entry.before_text
        cursor = entry.cursor_after if forward else entry.cursor_before
        with Transaction(self, "restore", record_undo=False):
            self._apply(0, self.line_count, text.split("\n"))
            self.state.cursor = cursor
            self.state.clamp_to(self.document.snapshot())

    def undo_last(self) -> Optional[UndoEntry]:
        entry = self.undo.undo()
        if entry is not None:
            self.restore(entry)
        return entry

    def redo_last(self) -> Optional[UndoEntry]:
        entry = self.undo.redo()
        if entry is not None:
            self.restore(entry, forward=True)
        return entry

    @property
    def in_undo_group(self) -> bool:
        return self._undo_group is not None

    @contextmanager
    def undo_group(self, label: str) -> Iterator[None]:
        """Collapse every edit made inside the block into one undo entry.

        Nested groups fold into the outermost one. The entry is recorded even
        when the block raises, as long as the text changed.
        """

        if self._undo_group is not None:
            yield
            return
        before_text = self.text
        before_cursor = self.state.cursor
        self._undo_group = label
        try:
            yield
        finally:
            self._undo_group = None
            after_text = self.text
            if after_text != before_text:
                self.undo.push(
                    UndoEntry(
                        label=label,
                        before_text=before_text,
                        after_text=after_text,
                        cursor_before=before_cursor,
                        cursor_after=self.state.cursor,
                    )
                )

    def _apply(self, start: int, end: int, new_lines: List[str]) -> None:
        self.document = self.document.update_lines(start, end, new_lines)
        self.state.last_change_tick = self.document.version
        for listener in list(self._listeners):
            listener(start)

    def _delta(self, first_row: int, label: str) -> BufferDelta:
        return BufferDelta(
            version=self.document.version,
            first_row=first_row,
            cursor=self.state.cursor,
            label=label,
        )


class Transaction(AbstractContextManager["Transaction"]):
    """Wraps one edit in a telemetry span and records it for undo."""

    def __init__(self, buffer: Buffer, label: str, *, record_undo: bool = True) -> None:
        self.buffer = buffer
        self.label = label
        self.record_undo = record_undo and not buffer.in_undo_group
        self._span_cm: Optional[ContextManager[object]] = None
        self._before_text = ""
        self._before_cursor: Cursor = (0, 0)

    def __enter__(self) -> "Transaction":
        self._before_cursor = self.buffer.state.cursor
        if self.record_undo:
            self._before_text = self.buffer.text
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None and self.record_undo:
            self.buffer.undo.push(
                UndoEntry(
                    label=self.label,
                    before_text=self._before_text,
                    after_text=self.buffer.text,
                    cursor_before=self._before_cursor,
                    cursor_after=self.buffer.state.cursor,
                )
            )
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
