"""Indentation dispatch between the host and embedded language indenters."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

from dualmode_engine.buffer import Buffer, is_blank
from dualmode_engine.regions import LanguageMode, RegionClassifier
from dualmode_engine.runtime import telemetry

from .indenters import LineIndenter
from .synthetic import synthetic_braces

if TYPE_CHECKING:
    from dualmode_engine.modes.base_mode import BufferSession, ModeProfile


class IndentCoordinator:
    """Indents lines with the rules of whichever language governs them.

    The embedded indenter expects brace-delimited blocks that the region
    markers do not provide, so embedded lines are indented inside a
    :func:`synthetic_braces` scope. Lines holding a delimiter are host
    structure and always go to the host base offset.
    """

    def __init__(
        self,
        classifier: RegionClassifier,
        profiles: Mapping[LanguageMode, "ModeProfile"],
    ) -> None:
        self.classifier = classifier
        self.profiles = profiles
        self.logger = telemetry.get_logger("dualmode_engine.indent")

    def indenter_for(self, mode: LanguageMode) -> LineIndenter:
        return self.profiles[mode].indenter

    def indent_line(self, session: "BufferSession", row: int) -> LanguageMode:
        """Indent ``row``; returns the language whose rules were applied."""

        buffer = session.buffer
        with telemetry.span(
            "indent::line",
            component="indent",
            metadata={"buffer": session.key, "row": row},
        ) as handle, buffer.undo_group("indent_line"):
            if self.classifier.scanner.line_has_delimiter(buffer.line(row)):
                handle.add_metadata("rule", "delimiter")
                buffer.set_indentation(row, session.settings.host_base_offset)
                return LanguageMode.HOST

            mode = self.classifier.classify_line(buffer, row)
            handle.add_metadata("rule", mode.value)
            if mode == LanguageMode.HOST:
                _run_on_row(self.indenter_for(LanguageMode.HOST), buffer, row)
            else:
                self._indent_embedded(session, row)
            return mode

    def indent_region(self, session: "BufferSession", start: int, end: int) -> int:
        """Indent the non-blank lines of ``[start, end)``; returns how many."""

        buffer = session.buffer
        indented = 0
        with buffer.undo_group("indent_region"):
            for row in range(max(start, 0), min(end, buffer.line_count)):
                if is_blank(buffer.document.get_line(row)):
                    continue
                self.indent_line(session, row)
                indented += 1
        return indented

    def _indent_embedded(self, session: "BufferSession", row: int) -> None:
        buffer = session.buffer
        indenter = self.indenter_for(LanguageMode.EMBEDDED)
        with synthetic_braces(
            buffer,
            self.classifier.scanner,
            row,
            session.settings.embedded_indent_offset,
        ) as braces:
            try:
                _run_on_row(indenter, buffer, braces.target_row)
            except Exception as exc:
                telemetry.record_event(
                    "indent.embedded_failure",
                    level="warning",
                    data={"buffer": session.key, "row": row, "error": repr(exc)},
                )


def _run_on_row(indenter: LineIndenter, buffer: Buffer, row: int) -> None:
    """Run ``indenter`` with the cursor on ``row``, then put the cursor back.

    A cursor already on ``row`` is left where the indenter placed it.
    """

    original = buffer.state.cursor
    if original[0] == row:
        indenter.indent_current_line(buffer)
        return
    buffer.move_cursor(row, 0)
    try:
        indenter.indent_current_line(buffer)
    finally:
        buffer.state.set_cursor(*original)


__all__ = ["IndentCoordinator"]
