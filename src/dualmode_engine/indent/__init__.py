"""Indentation: reference indenters, synthetic braces, and the coordinator."""

from .coordinator import IndentCoordinator
from .indenters import BlockKeywordIndenter, BraceIndenter, LineIndenter
from .synthetic import CLOSE_BRACE, OPEN_BRACE, SyntheticBraces, synthetic_braces

__all__ = [
    "BlockKeywordIndenter",
    "BraceIndenter",
    "CLOSE_BRACE",
    "IndentCoordinator",
    "LineIndenter",
    "OPEN_BRACE",
    "SyntheticBraces",
    "synthetic_braces",
]
