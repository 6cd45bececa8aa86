"""Executable Textual app editing a mixed-language file with the engine."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from textual.app import App, ComposeResult
    from textual.widgets import Footer, Header, Static, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use dualmode_engine.adapters.textual.app"
    ) from exc

from dualmode_engine.buffer import BufferMirror
from dualmode_engine.runtime.config import EngineSettings
from dualmode_engine.session import EditorSession, is_associated, reindent_text

from .controller import TextualIdleScheduler, TextualModeAdapter, TextualUIHooks


class DualModeApp(App[None]):  # pragma: no cover - manual demo
    """Text area whose status line follows the language under the cursor."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#editor {
		height: 1fr;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("tab", "indent_line", "Indent line"),
        ("ctrl+r", "reindent", "Reindent buffer"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self, path: Path, *, settings: Optional[EngineSettings] = None
    ) -> None:
        super().__init__()
        self.path = path
        self.settings = settings or EngineSettings.from_env()
        self.adapter: TextualModeAdapter | None = None
        self._syncing = False
        self._shown_version = -1

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        yield TextArea("", id="editor")
        yield Static("", id="status-line")
        yield Footer()

    def on_mount(self) -> None:
        editor = EditorSession(
            settings=self.settings,
            scheduler=TextualIdleScheduler(self.set_timer),
        )
        text = self.path.read_text(encoding="utf-8") if self.path.exists() else ""
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            log=self.log.info,
        )
        self.adapter = TextualModeAdapter.open(editor, str(self.path), text, hooks)
        self.query_one("#editor", TextArea).focus()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self.adapter and not self._syncing:
            self.adapter.handle_host_text(event.text_area.text)

    def on_text_area_selection_changed(self, event: TextArea.SelectionChanged) -> None:
        if self.adapter and not self._syncing:
            row, col = event.selection.end
            self.adapter.handle_cursor(row, col)

    def action_indent_line(self) -> None:
        if self.adapter:
            self.adapter.indent_current_line()

    def action_reindent(self) -> None:
        if self.adapter:
            self.adapter.reindent()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        area = self.query_one("#editor", TextArea)
        self._syncing = True
        try:
            if mirror.version != self._shown_version and area.text != mirror.text:
                area.load_text(mirror.text)
            self._shown_version = mirror.version
            area.cursor_location = mirror.cursor
        finally:
            self._syncing = False

    def _update_status(self, status: str) -> None:
        self.query_one("#status-line", Static).update(status)


def _column(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid column: {raw!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError("column must be >= 0")
    return value


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Edit or reindent host-language files with embedded code."
    )
    parser.add_argument("path", type=Path, help="File to open")
    parser.add_argument(
        "--reindent",
        action="store_true",
        help="Print the reindented file to stdout instead of opening the editor",
    )
    parser.add_argument(
        "--embedded-indent-offset",
        type=_column,
        default=None,
        help="Column of the synthetic braces around embedded regions",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Accept files whose extension is not a known association",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    settings = EngineSettings.from_env()
    if args.embedded_indent_offset is not None:
        settings = settings.with_overrides(
            embedded_indent_offset=args.embedded_indent_offset
        )
    if not args.force and not is_associated(args.path):
        print(f"{args.path.name}: not a mixed-language source file", file=sys.stderr)
        return 2

    if args.reindent:
        text = args.path.read_text(encoding="utf-8")
        sys.stdout.write(reindent_text(text, settings=settings, name=str(args.path)))
        return 0

    DualModeApp(args.path, settings=settings).run()  # pragma: no cover - manual demo
    return 0


if __name__ == "__main__":  # pragma: no cover - manual demo
    raise SystemExit(main())
