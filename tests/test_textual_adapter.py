from __future__ import annotations

from typing import Callable, List

from dualmode_engine.adapters.textual import (
    TextualIdleScheduler,
    TextualModeAdapter,
    TextualUIHooks,
)
from dualmode_engine.buffer import BufferMirror
from dualmode_engine.regions import LanguageMode
from dualmode_engine.session import EditorSession

SCENARIO = "A\nFOO_X CODE\nstmt;\nENDCODE;\nB\n"


class FakeTimer:
    def __init__(self, delay: float, callback: Callable[[], object]) -> None:
        self.delay = delay
        self.callback = callback
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True

    def fire(self) -> None:
        if not self.stopped:
            self.callback()


class FakeApp:
    def __init__(self) -> None:
        self.timers: List[FakeTimer] = []

    def set_timer(self, delay: float, callback: Callable[[], object]) -> FakeTimer:
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer


def make_adapter(
    app: FakeApp, statuses: List[str], updates: List[str], logs: List[str]
) -> TextualModeAdapter:
    editor = EditorSession(scheduler=TextualIdleScheduler(app.set_timer))
    hooks = TextualUIHooks(
        update_buffer=lambda mirror: updates.append(mirror.text),
        update_status=statuses.append,
        log=logs.append,
    )
    return TextualModeAdapter.open(editor, "buf", SCENARIO, hooks)


def test_adapter_reports_initial_mode() -> None:
    statuses: List[str] = []
    updates: List[str] = []
    make_adapter(FakeApp(), statuses, updates, [])

    assert statuses == ["HDL  1:1  buf"]
    assert updates == [SCENARIO]


def test_adapter_switches_mode_when_timer_fires() -> None:
    app = FakeApp()
    statuses: List[str] = []
    logs: List[str] = []
    adapter = make_adapter(app, statuses, [], logs)

    adapter.handle_cursor(2, 0)
    assert adapter.session.active_mode is LanguageMode.HOST
    assert len(app.timers) == 1

    app.timers[-1].fire()

    assert adapter.session.active_mode is LanguageMode.EMBEDDED
    assert statuses[-1] == "C  3:1  buf"
    assert any(line.startswith("mode ->") for line in logs)


def test_rescheduling_stops_previous_timer() -> None:
    app = FakeApp()
    adapter = make_adapter(app, [], [], [])

    adapter.handle_cursor(2, 0)
    adapter.handle_cursor(4, 0)

    first, second = app.timers
    assert first.stopped is True
    first.callback()
    assert adapter.session.pending_update is True

    second.fire()
    assert adapter.session.active_mode is LanguageMode.HOST
    assert adapter.session.pending_update is False


def test_host_text_edit_and_indent() -> None:
    app = FakeApp()
    updates: List[str] = []
    adapter = make_adapter(app, [], updates, [])

    adapter.handle_host_text(SCENARIO.replace("stmt;", "  x = 1;"))
    adapter.handle_cursor(2, 2)
    mode = adapter.indent_current_line()

    assert mode is LanguageMode.EMBEDDED
    assert adapter.session.buffer.line(2) == "    x = 1;"
    assert updates[-1] == "A\nFOO_X CODE\n    x = 1;\nENDCODE;\nB\n"


def test_reindent_refreshes_buffer() -> None:
    updates: List[str] = []
    adapter = make_adapter(FakeApp(), [], updates, [])

    count = adapter.reindent()

    assert count == 5
    assert updates[-1] == "A\nFOO_X CODE\n    stmt;\nENDCODE;\nB\n"


def test_buffer_updates_carry_mode_and_version() -> None:
    app = FakeApp()
    mirrors: List[BufferMirror] = []
    editor = EditorSession(scheduler=TextualIdleScheduler(app.set_timer))
    hooks = TextualUIHooks(update_buffer=mirrors.append)
    adapter = TextualModeAdapter.open(editor, "buf", SCENARIO, hooks)

    adapter.handle_cursor(2, 0)
    app.timers[-1].fire()
    adapter.indent_current_line()

    assert mirrors[0].attributes == {"mode": "host"}
    assert mirrors[-1].attributes == {"mode": "embedded"}
    assert mirrors[-1].version > mirrors[0].version


def test_host_edit_on_last_line_keeps_earlier_index_rows() -> None:
    app = FakeApp()
    adapter = make_adapter(app, [], [], [])
    editor = adapter.editor
    buffer = adapter.session.buffer
    editor.classifier.classify_cursor(buffer, (buffer.line_count - 1, 0))
    index = editor.classifier.scanner.index_for(buffer)
    assert index.cached_rows == 6

    adapter.handle_host_text(SCENARIO + "C")

    assert index.cached_rows == 6
    assert buffer.text == SCENARIO + "C"
    assert editor.classifier.classify_line(buffer, 5) is LanguageMode.HOST
    assert editor.classifier.classify_line(buffer, 2) is LanguageMode.EMBEDDED
