"""Default host and embedded language profiles."""

from __future__ import annotations

from typing import Dict, Optional

from dualmode_engine.indent.indenters import BlockKeywordIndenter, BraceIndenter
from dualmode_engine.regions import LanguageMode
from dualmode_engine.syntax import EMBEDDED_SYNTAX, HOST_SYNTAX

from .base_mode import ModeProfile

ProfileMap = Dict[LanguageMode, ModeProfile]


def host_profile(*, width: int = 2, base_offset: int = 0) -> ModeProfile:
    return ModeProfile(
        mode=LanguageMode.HOST,
        display_name="HDL",
        indenter=BlockKeywordIndenter(width=width, base_offset=base_offset),
        syntax=HOST_SYNTAX,
        local_variables={
            "comment_start": "-- ",
            "comment_end": "",
            "indent_width": width,
        },
    )


def embedded_profile(*, width: int = 4) -> ModeProfile:
    return ModeProfile(
        mode=LanguageMode.EMBEDDED,
        display_name="C",
        indenter=BraceIndenter(width=width),
        syntax=EMBEDDED_SYNTAX,
        local_variables={
            "comment_start": "// ",
            "comment_end": "",
            "indent_width": width,
        },
    )


def default_profiles(
    *,
    host: Optional[ModeProfile] = None,
    embedded: Optional[ModeProfile] = None,
) -> ProfileMap:
    return {
        LanguageMode.HOST: host or host_profile(),
        LanguageMode.EMBEDDED: embedded or embedded_profile(),
    }


__all__ = ["ProfileMap", "default_profiles", "embedded_profile", "host_profile"]
