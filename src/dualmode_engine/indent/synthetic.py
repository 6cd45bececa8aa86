"""Scoped insertion of the temporary braces around an embedded region."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from dualmode_engine.buffer import Buffer
from dualmode_engine.regions import DelimiterScanner

OPEN_BRACE = "{"
CLOSE_BRACE = "}"


@dataclass(slots=True)
class SyntheticBraces:
    """Rows of the inserted brace lines and the shifted target row."""

    target_row: int
    open_row: Optional[int] = None
    close_row: Optional[int] = None


@contextmanager
def synthetic_braces(
    buffer: Buffer, scanner: DelimiterScanner, row: int, offset: int = 0
) -> Iterator[SyntheticBraces]:
    """Wrap ``row``'s region in brace lines for the duration of the block.

    The open brace goes right after the nearest opening delimiter line above
    ``row``, the close brace right before the nearest closing delimiter line
    below it; a missing delimiter skips that side. Both lines are removed on
    every exit path, leaving only edits made inside the block. Removal looks
    the brace line up again in case the block moved it.
    """

    pad = " " * offset
    above = scanner.find_open_above(buffer, row)
    below = scanner.find_close_below(buffer, row)
    braces = SyntheticBraces(target_row=row)
    try:
        if above is not None:
            buffer.insert_line(above + 1, pad + OPEN_BRACE)
            braces.open_row = above + 1
            braces.target_row += 1
        if below is not None:
            close_row = below + (1 if braces.open_row is not None else 0)
            buffer.insert_line(close_row, pad + CLOSE_BRACE)
            braces.close_row = close_row
        yield braces
    finally:
        if braces.close_row is not None:
            _remove_brace(buffer, braces.close_row, CLOSE_BRACE)
        if braces.open_row is not None:
            _remove_brace(buffer, braces.open_row, OPEN_BRACE)


def _remove_brace(buffer: Buffer, row: int, brace: str) -> None:
    """Delete the brace line nearest to ``row``.

    The indenter may have added or joined lines, so ``row`` is only where the
    search starts. Nothing is deleted when no brace line is left.
    """

    for distance in range(buffer.line_count):
        for candidate in (row - distance, row + distance):
            if 0 <= candidate < buffer.line_count and (
                buffer.line(candidate).strip() == brace
            ):
                buffer.delete_line(candidate)
                return


__all__ = ["CLOSE_BRACE", "OPEN_BRACE", "SyntheticBraces", "synthetic_braces"]
