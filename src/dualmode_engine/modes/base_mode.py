"""Per-buffer session state and the language profiles modes switch between."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional

from dualmode_engine.buffer import Buffer
from dualmode_engine.indent.indenters import LineIndenter
from dualmode_engine.regions import LanguageMode
from dualmode_engine.runtime.config import EngineSettings
from dualmode_engine.syntax import SyntaxTable


class UnknownModeError(KeyError):
    """Raised when no profile is registered for a requested mode."""


@dataclass(slots=True)
class BufferSession:
    """Explicit per-buffer editing state owned by an ``EditorSession``."""

    buffer: Buffer
    settings: EngineSettings = field(default_factory=EngineSettings)
    active_mode: Optional[LanguageMode] = None
    pending_update: bool = False
    profile: Optional["ModeProfile"] = None
    indent_function: Optional[Callable[[int], object]] = None
    local_variables: Dict[str, object] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return self.buffer.name


@dataclass(frozen=True)
class ModeProfile:
    """Everything one language contributes when its mode becomes active.

    ``setup`` runs first during activation; if it raises, the session keeps
    its previous profile.
    """

    mode: LanguageMode
    display_name: str
    indenter: LineIndenter
    syntax: SyntaxTable
    local_variables: Mapping[str, object] = field(default_factory=dict)
    setup: Optional[Callable[[BufferSession], None]] = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "local_variables", MappingProxyType(dict(self.local_variables))
        )

    def activate(self, session: BufferSession) -> None:
        if self.setup is not None:
            self.setup(session)
        previous = session.profile
        if previous is not None:
            for key in previous.local_variables:
                if key not in self.local_variables:
                    session.local_variables.pop(key, None)
        session.profile = self
        session.local_variables.update(self.local_variables)
        session.local_variables["mode_name"] = self.display_name


__all__ = ["BufferSession", "ModeProfile", "UnknownModeError"]
