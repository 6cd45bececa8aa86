"""Region detection: delimiter scanning and language classification."""

from .classifier import LanguageMode, RegionClassifier
from .delimiters import (
    CLOSE_PATTERN,
    DEFAULT_DELIMITERS,
    OPEN_PATTERN,
    SECTION_PREFIXES,
    DelimiterIndex,
    DelimiterPair,
    DelimiterScanner,
    count_matches,
    is_inside,
)

__all__ = [
    "CLOSE_PATTERN",
    "DEFAULT_DELIMITERS",
    "OPEN_PATTERN",
    "SECTION_PREFIXES",
    "DelimiterIndex",
    "DelimiterPair",
    "DelimiterScanner",
    "LanguageMode",
    "RegionClassifier",
    "count_matches",
    "is_inside",
]
