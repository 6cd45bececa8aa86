"""Editor session: owns open buffers and wires the engine components together."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterator, Optional, Sequence

from dualmode_engine.buffer import Buffer
from dualmode_engine.indent import IndentCoordinator
from dualmode_engine.modes import (
    BufferSession,
    ModeDispatcher,
    ProfileMap,
    default_profiles,
)
from dualmode_engine.regions import (
    DEFAULT_DELIMITERS,
    DelimiterPair,
    LanguageMode,
    RegionClassifier,
)
from dualmode_engine.runtime import telemetry
from dualmode_engine.runtime.config import EngineSettings
from dualmode_engine.runtime.idle import IdleScheduler, ManualIdleScheduler
from dualmode_engine.syntax import SyntaxClassifier, TokenSpan

FILE_ASSOCIATIONS: Sequence[str] = (r"\.hdc\Z", r"\.vhdc\Z", r"\.hdl\.c\Z")


def is_associated(path: str | Path) -> bool:
    name = Path(path).name
    return any(re.search(pattern, name) for pattern in FILE_ASSOCIATIONS)


class EditorSession:
    """Document manager holding one :class:`BufferSession` per open buffer.

    Every component shares one :class:`RegionClassifier`, so the dispatcher,
    the indent coordinator and the syntax classifier always agree about which
    language governs a position.
    """

    def __init__(
        self,
        *,
        settings: Optional[EngineSettings] = None,
        pair: DelimiterPair = DEFAULT_DELIMITERS,
        profiles: Optional[ProfileMap] = None,
        scheduler: Optional[IdleScheduler] = None,
    ) -> None:
        self.settings = settings or EngineSettings()
        self.classifier = RegionClassifier.for_pair(pair)
        self.profiles = profiles or default_profiles()
        self.coordinator = IndentCoordinator(self.classifier, self.profiles)
        self.scheduler: IdleScheduler = scheduler or ManualIdleScheduler()
        self.dispatcher = ModeDispatcher(
            self.classifier,
            self.profiles,
            scheduler=self.scheduler,
            indent_hook=self.coordinator.indent_line,
        )
        self.syntax = SyntaxClassifier(
            self.classifier,
            {mode: profile.syntax for mode, profile in self.profiles.items()},
        )
        self._sessions: Dict[str, BufferSession] = {}

    def __iter__(self) -> Iterator[BufferSession]:
        return iter(self._sessions.values())

    def __contains__(self, name: object) -> bool:
        return name in self._sessions

    def open_buffer(
        self, buffer: Buffer, *, settings: Optional[EngineSettings] = None
    ) -> BufferSession:
        if buffer.name in self._sessions:
            raise ValueError(f"Buffer '{buffer.name}' is already open")
        session = BufferSession(buffer=buffer, settings=settings or self.settings)
        self.dispatcher.open_buffer(session)
        self._sessions[buffer.name] = session
        telemetry.record_event(
            "buffer.opened",
            data={
                "buffer": buffer.name,
                "mode": getattr(session.active_mode, "value", None),
            },
        )
        return session

    def open_text(
        self, name: str, text: str, *, settings: Optional[EngineSettings] = None
    ) -> BufferSession:
        return self.open_buffer(Buffer.from_text(text, name=name), settings=settings)

    def open_file(
        self, path: str | Path, *, settings: Optional[EngineSettings] = None
    ) -> BufferSession:
        file_path = Path(path)
        if not is_associated(file_path):
            raise ValueError(f"'{file_path.name}' is not a mixed-language source file")
        text = file_path.read_text(encoding="utf-8")
        return self.open_text(str(file_path), text, settings=settings)

    def get(self, name: str) -> BufferSession:
        try:
            return self._sessions[name]
        except KeyError:
            raise KeyError(f"Buffer '{name}' is not open") from None

    def close(self, name: str) -> None:
        session = self._sessions.pop(name, None)
        if session is None:
            return
        self.dispatcher.close_buffer(session)
        self.classifier.scanner.forget(session.buffer)

    def move_cursor(self, name: str, row: int, col: int = 0) -> BufferSession:
        session = self.get(name)
        session.buffer.move_cursor(row, col)
        self.dispatcher.note_activity(session)
        return session

    def insert_text(self, name: str, text: str) -> BufferSession:
        session = self.get(name)
        session.buffer.insert_text(text)
        self.dispatcher.note_activity(session)
        return session

    def indent_line(self, name: str, row: Optional[int] = None) -> LanguageMode:
        session = self.get(name)
        target = session.buffer.state.cursor[0] if row is None else row
        if session.indent_function is None:
            return self.coordinator.indent_line(session, target)
        return session.indent_function(target)  # type: ignore[return-value]

    def indent_region(self, name: str, start: int, end: int) -> int:
        return self.coordinator.indent_region(self.get(name), start, end)

    def reindent_buffer(self, name: str) -> int:
        session = self.get(name)
        return self.indent_region(name, 0, session.buffer.line_count)

    def highlight_line(self, name: str, row: int) -> list[TokenSpan]:
        return self.syntax.highlight_line(self.get(name).buffer, row)


def reindent_text(
    text: str, *, settings: Optional[EngineSettings] = None, name: str = "<text>"
) -> str:
    """Reindent every line of ``text`` and return the result."""

    editor = EditorSession(settings=settings)
    session = editor.open_text(name, text)
    editor.reindent_buffer(name)
    return session.buffer.text


__all__ = ["EditorSession", "FILE_ASSOCIATIONS", "is_associated", "reindent_text"]
