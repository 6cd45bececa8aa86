from __future__ import annotations

from dualmode_engine.regions import LanguageMode
from dualmode_engine.session import EditorSession
from dualmode_engine.syntax import TokenSpan

TEXT = (
    "signal a : integer; -- note\n"
    "FOO_X CODE\n"
    "unsigned int x = 0; // c\n"
    "ENDCODE;\n"
)


def test_host_line_uses_host_table() -> None:
    editor = EditorSession()
    editor.open_text("buf", TEXT)

    assert editor.highlight_line("buf", 0) == [
        TokenSpan(0, 6, "keyword"),
        TokenSpan(11, 18, "type"),
        TokenSpan(20, 27, "comment"),
    ]


def test_embedded_line_uses_embedded_table() -> None:
    editor = EditorSession()
    editor.open_text("buf", TEXT)

    assert editor.highlight_line("buf", 2) == [
        TokenSpan(0, 12, "type"),
        TokenSpan(20, 24, "comment"),
    ]


def test_delimiter_lines_are_host_structure() -> None:
    editor = EditorSession()
    session = editor.open_text("buf", TEXT)

    assert editor.syntax.language_for_line(session.buffer, 1) is LanguageMode.HOST
    assert editor.syntax.language_for_line(session.buffer, 3) is LanguageMode.HOST
    assert editor.highlight_line("buf", 1) == [TokenSpan(0, 10, "delimiter")]
    assert editor.highlight_line("buf", 3) == [TokenSpan(0, 7, "delimiter")]


def test_host_keywords_are_case_insensitive() -> None:
    editor = EditorSession()
    editor.open_text("buf", "ENTITY top IS")

    kinds = [span.kind for span in editor.highlight_line("buf", 0)]

    assert kinds == ["keyword", "keyword"]
