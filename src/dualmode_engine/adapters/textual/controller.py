"""Textual adapter: Textual timers as the idle trigger plus UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol

from dualmode_engine.buffer import BufferMirror
from dualmode_engine.modes import BufferSession
from dualmode_engine.regions import LanguageMode
from dualmode_engine.runtime.idle import IdleCallback
from dualmode_engine.session import EditorSession


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


class TimerHandle(Protocol):
    def stop(self) -> object:
        ...


SetTimer = Callable[[float, Callable[[], object]], TimerHandle]


class TextualIdleScheduler:
    """Idle scheduler built on ``App.set_timer``; one live timer per key."""

    def __init__(self, set_timer: SetTimer) -> None:
        self._set_timer = set_timer
        self._timers: Dict[str, TimerHandle] = {}
        self._generation: Dict[str, int] = {}

    def schedule(self, key: str, delay: float, callback: IdleCallback) -> None:
        self.cancel(key)
        generation = self._generation.get(key, 0) + 1
        self._generation[key] = generation
        self._timers[key] = self._set_timer(
            delay, lambda: self._fire(key, generation, callback)
        )

    def cancel(self, key: str) -> None:
        timer = self._timers.pop(key, None)
        if timer is not None:
            timer.stop()

    def pending(self, key: str) -> bool:
        return key in self._timers

    def _fire(self, key: str, generation: int, callback: IdleCallback) -> None:
        if self._generation.get(key) != generation:
            return
        self._timers.pop(key, None)
        callback()


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


class TextualModeAdapter:
    """Bridges one editor buffer to a Textual surface."""

    def __init__(
        self, editor: EditorSession, session: BufferSession, hooks: TextualUIHooks
    ) -> None:
        self.editor = editor
        self.session = session
        self.hooks = hooks
        self._refresh_status()
        self._refresh_buffer()

    @classmethod
    def open(
        cls, editor: EditorSession, name: str, text: str, hooks: TextualUIHooks
    ) -> "TextualModeAdapter":
        adapter: Optional[TextualModeAdapter] = None

        def on_enter(session: BufferSession) -> None:
            if adapter is not None:
                adapter._on_mode_entered(session)

        settings = editor.settings.add_hook("host", on_enter).add_hook(
            "embedded", on_enter
        )
        session = editor.open_text(name, text, settings=settings)
        adapter = cls(editor, session, hooks)
        return adapter

    @property
    def name(self) -> str:
        return self.session.key

    def handle_cursor(self, row: int, col: int) -> None:
        if self.session.buffer.state.cursor == (row, col):
            return
        self.editor.move_cursor(self.name, row, col)
        self._log("cursor ->", row=row, col=col)

    def handle_host_text(self, text: str) -> None:
        """Adopt the widget's full text after a host-side edit."""

        buffer = self.session.buffer
        cursor = buffer.state.cursor
        if buffer.replace_text(text, label="host_edit") is None:
            return
        buffer.state.cursor = cursor
        buffer.state.clamp_to(buffer.document.snapshot())
        self.editor.dispatcher.note_activity(self.session)
        self._log("edit ->", lines=buffer.line_count)

    def indent_current_line(self) -> LanguageMode:
        mode = self.editor.indent_line(self.name)
        cursor = self.session.buffer.state.cursor
        self._log("indent <-", mode=mode.value, cursor=cursor)
        self._refresh_buffer()
        return mode

    def reindent(self) -> int:
        count = self.editor.reindent_buffer(self.name)
        self._refresh_buffer()
        return count

    def _on_mode_entered(self, session: BufferSession) -> None:
        self._log("mode ->", mode=getattr(session.active_mode, "value", "?"))
        self._refresh_status()

    def _refresh_buffer(self) -> None:
        mode = self.session.active_mode
        attributes = {"mode": mode.value} if mode is not None else {}
        self.hooks.update_buffer(self.session.buffer.mirror(attributes=attributes))

    def _refresh_status(self) -> None:
        profile = self.session.profile
        label = profile.display_name if profile else "?"
        row, col = self.session.buffer.state.cursor
        self.hooks.update_status(f"{label}  {row + 1}:{col + 1}  {self.name}")

    def _log(self, prefix: str, **fields: object) -> None:
        parts = [prefix] + [f"{key}={value!r}" for key, value in fields.items()]
        self.hooks.log(" ".join(parts))


__all__ = ["TextualIdleScheduler", "TextualModeAdapter", "TextualUIHooks"]
