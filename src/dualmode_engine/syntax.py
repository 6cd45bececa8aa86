"""Keyword tables and per-line syntax classification for both languages."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Mapping, NamedTuple, Optional, Pattern

from dualmode_engine.buffer import Buffer
from dualmode_engine.regions import LanguageMode, RegionClassifier

_WORD = re.compile(r"[A-Za-z_]\w*")


class TokenSpan(NamedTuple):
    start: int
    end: int
    kind: str


@dataclass(frozen=True)
class SyntaxTable:
    """Fixed keyword and numeric-type table for one language."""

    name: str
    keywords: frozenset[str]
    types: Pattern[str]
    comment_prefix: str
    case_insensitive: bool = False
    extra: Mapping[str, str] = field(default_factory=dict)

    def is_keyword(self, word: str) -> bool:
        return (word.lower() if self.case_insensitive else word) in self.keywords


HOST_SYNTAX = SyntaxTable(
    name="host",
    keywords=frozenset(
        """
        architecture begin case component constant else elsif end entity
        for generate generic if is library loop of package port process
        signal then use variable when
        """.split()
    ),
    types=re.compile(
        r"\b(?:integer|natural|positive|real|bit|bit_vector|std_logic"
        r"|std_logic_vector|signed|unsigned)\b",
        re.IGNORECASE,
    ),
    comment_prefix="--",
    case_insensitive=True,
)

EMBEDDED_SYNTAX = SyntaxTable(
    name="embedded",
    keywords=frozenset(
        """
        break case const continue default do else for if return sizeof
        static struct switch typedef void while
        """.split()
    ),
    types=re.compile(
        r"\b(?:(?:unsigned|signed)\s+)?(?:char|short|int|long|float|double)\b"
        r"|\bu?int(?:8|16|32|64)_t\b|\bsize_t\b"
    ),
    comment_prefix="//",
)

DEFAULT_TABLES: Mapping[LanguageMode, SyntaxTable] = {
    LanguageMode.HOST: HOST_SYNTAX,
    LanguageMode.EMBEDDED: EMBEDDED_SYNTAX,
}


class SyntaxClassifier:
    """Classify the tokens of a line with the table of the language governing it.

    Lines carrying a delimiter are host structure: they use the host table
    and report the markers themselves as ``delimiter`` spans.
    """

    def __init__(
        self,
        classifier: RegionClassifier,
        tables: Optional[Mapping[LanguageMode, SyntaxTable]] = None,
    ) -> None:
        self.classifier = classifier
        self.tables = dict(tables or DEFAULT_TABLES)

    def language_for_line(self, buffer: Buffer, row: int) -> LanguageMode:
        if self.classifier.scanner.line_has_delimiter(buffer.line(row)):
            return LanguageMode.HOST
        return self.classifier.classify_line(buffer, row)

    def highlight_line(self, buffer: Buffer, row: int) -> List[TokenSpan]:
        line = buffer.line(row)
        table = self.tables[self.language_for_line(buffer, row)]
        spans: List[TokenSpan] = []

        pair = self.classifier.pair
        for pattern in (pair.open, pair.close):
            spans.extend(
                TokenSpan(match.start(), match.end(), "delimiter")
                for match in pattern.finditer(line)
            )

        code_end = line.find(table.comment_prefix)
        if code_end == -1:
            code_end = len(line)
        else:
            spans.append(TokenSpan(code_end, len(line), "comment"))

        code = line[:code_end]
        for match in table.types.finditer(code):
            _add_free(spans, TokenSpan(match.start(), match.end(), "type"))
        for match in _WORD.finditer(code):
            if table.is_keyword(match.group()):
                _add_free(spans, TokenSpan(match.start(), match.end(), "keyword"))
        return sorted(spans)


def _add_free(spans: List[TokenSpan], candidate: TokenSpan) -> None:
    for span in spans:
        if candidate.start < span.end and span.start < candidate.end:
            return
    spans.append(candidate)


__all__ = [
    "DEFAULT_TABLES",
    "EMBEDDED_SYNTAX",
    "HOST_SYNTAX",
    "SyntaxClassifier",
    "SyntaxTable",
    "TokenSpan",
]
