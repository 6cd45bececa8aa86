from __future__ import annotations

import re

from dualmode_engine.buffer import Buffer
from dualmode_engine.regions import (
    DEFAULT_DELIMITERS,
    DelimiterPair,
    DelimiterScanner,
    count_matches,
    is_inside,
)

SCENARIO = "A\nFOO_X CODE\nstmt;\nENDCODE;\nB\n"

MULTI = (
    "entity top is\n"
    "ARCH_C CODE\n"
    "int a;\n"
    "ENDCODE;\n"
    "signal s : bit;\n"
    "PROCESS_C worker\n"
    "x = 1;\n"
    "y = 2;\n"
    "ENDCODE;\n"
    "FOO_X CODE stmt; ENDCODE;\n"
    "end top;\n"
)


def make_buffer(text: str = MULTI) -> Buffer:
    return Buffer.from_text(text, name="scan")


def naive(text: str, offset: int) -> bool:
    return is_inside(text, offset, DEFAULT_DELIMITERS)


def test_default_patterns_match_section_markers() -> None:
    assert DEFAULT_DELIMITERS.open.search("FOO_X CODE")
    assert DEFAULT_DELIMITERS.open.search("  PROCESS_C worker")
    assert not DEFAULT_DELIMITERS.open.search("ENDCODE;")
    assert not DEFAULT_DELIMITERS.open.search("foo_x code")
    assert DEFAULT_DELIMITERS.close.search("ENDCODE;")
    assert not DEFAULT_DELIMITERS.close.search("ENDCODES")


def test_count_matches_ignores_partial_match_at_bound() -> None:
    close = DEFAULT_DELIMITERS.close

    assert count_matches(close, "ENDCODE; ENDCODE;") == 2
    assert count_matches(close, "ENDCODE;", 0, 5) == 0
    assert count_matches(close, "x ENDCODE;", 2) == 1
    assert count_matches(close, "") == 0


def test_scenario_classification() -> None:
    assert naive(SCENARIO, SCENARIO.index("stmt;")) is True
    assert naive(SCENARIO, SCENARIO.index("A")) is False
    assert naive(SCENARIO, SCENARIO.index("B")) is False


def test_well_formed_regions_are_embedded_strictly_between_markers() -> None:
    pair = DEFAULT_DELIMITERS
    opens = list(pair.open.finditer(MULTI))
    closes = list(pair.close.finditer(MULTI))
    assert len(opens) == len(closes) == 3

    for open_match, close_match in zip(opens, closes):
        for offset in range(open_match.end(), close_match.start() + 1):
            assert naive(MULTI, offset) is True

    markers = [(m.start(), m.end()) for m in opens + closes]
    for offset in range(len(MULTI) + 1):
        if any(start < offset < end for start, end in markers):
            continue
        inside = any(
            o.end() <= offset <= c.start() for o, c in zip(opens, closes)
        )
        assert naive(MULTI, offset) is inside


def test_cached_scanner_matches_naive_scan() -> None:
    buffer = make_buffer()
    scanner = DelimiterScanner()

    for offset in range(len(buffer.text) + 1):
        assert scanner.is_inside(buffer, offset) is naive(buffer.text, offset)


def test_cached_scanner_tracks_edits() -> None:
    buffer = make_buffer()
    scanner = DelimiterScanner()
    scanner.is_inside(buffer, len(buffer.text))

    buffer.insert_line(4, "BLOCK_Q CODE")
    buffer.delete_line(1)
    buffer.insert_text("ENDCODE;", cursor=(6, 0))

    for offset in range(len(buffer.text) + 1):
        assert scanner.is_inside(buffer, offset) is naive(buffer.text, offset)


def test_index_keeps_rows_before_edit() -> None:
    buffer = make_buffer()
    scanner = DelimiterScanner()
    scanner.is_inside_at(buffer, (buffer.line_count - 1, 0))
    index = scanner.index_for(buffer)
    assert index.cached_rows == buffer.line_count

    buffer.set_indentation(3, 4)

    assert index.cached_rows == 4


def test_index_resets_when_document_swapped_silently() -> None:
    buffer = make_buffer(SCENARIO)
    scanner = DelimiterScanner()
    assert scanner.is_inside_at(buffer, (2, 0)) is True

    buffer.document = buffer.document.update_lines(1, 2, ["plain"])

    assert scanner.is_inside_at(buffer, (2, 0)) is False


def test_nested_open_counts_as_still_embedded() -> None:
    text = "FOO_X CODE\nPROCESS_Y main\nstmt;\nENDCODE;\nx;\nENDCODE;\nz;"
    buffer = make_buffer(text)
    scanner = DelimiterScanner()

    assert scanner.is_inside_at(buffer, (4, 0)) is True
    assert scanner.is_inside_at(buffer, (6, 0)) is False


def test_find_delimiter_lines_around_row() -> None:
    buffer = make_buffer()
    scanner = DelimiterScanner()

    assert scanner.find_open_above(buffer, 7) == 5
    assert scanner.find_close_below(buffer, 6) == 8
    assert scanner.find_open_above(buffer, 1) is None
    assert scanner.find_close_below(buffer, 10) is None


def test_custom_pair() -> None:
    pair = DelimiterPair.compile(r"%\{", r"%\}")
    text = "head\n%{\nbody\n%}\ntail"

    assert is_inside(text, text.index("body"), pair) is True
    assert is_inside(text, text.index("tail"), pair) is False
    assert pair.matches_line("  %}  ")
    assert not pair.matches_line("body")
    assert isinstance(pair.open, re.Pattern)


def test_classification_is_stable_without_edits() -> None:
    buffer = make_buffer()
    scanner = DelimiterScanner()
    first = [scanner.is_inside(buffer, o) for o in range(len(buffer.text) + 1)]
    second = [scanner.is_inside(buffer, o) for o in range(len(buffer.text) + 1)]

    assert first == second


def test_anchored_pair_cached_scan_matches_full_text_scan() -> None:
    pair = DelimiterPair.compile(r"^%\{", r"^%\}$")
    text = "head %{\n%{\nbody\n%} x\n%}\ntail"
    buffer = make_buffer(text)
    scanner = DelimiterScanner(pair)

    assert is_inside(text, text.index("body"), pair) is True
    assert is_inside(text, text.index("tail"), pair) is False
    for offset in range(len(text) + 1):
        assert scanner.is_inside(buffer, offset) is is_inside(text, offset, pair)
