"""Buffer abstractions and undo data structures."""

from .buffer import Buffer, BufferDelta, ChangeListener, Transaction
from .document import BufferDocument, indentation_of, is_blank
from .state import BufferMirror, BufferState, BufferValidationError, Cursor
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_cursor, ensure_offset, ensure_row

__all__ = [
    "BufferDocument",
    "BufferState",
    "Cursor",
    "UndoTimeline",
    "UndoEntry",
    "Buffer",
    "BufferDelta",
    "ChangeListener",
    "Transaction",
    "BufferMirror",
    "BufferValidationError",
    "ensure_cursor",
    "ensure_offset",
    "ensure_row",
    "indentation_of",
    "is_blank",
]
