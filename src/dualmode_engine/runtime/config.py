"""Engine settings consumed by the dispatcher and indent coordinator."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Tuple

from .telemetry import env

ModeHook = Callable[..., None]

DEFAULT_IDLE_DELAY = 1 / 16


def _env_number(name: str, cast: Callable[[str], float], fallback: float) -> float:
    raw = env(name)
    if raw is None or not raw.strip():
        return fallback
    try:
        return cast(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be numeric, got {raw!r}") from exc


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Customization surface for one buffer type.

    ``embedded_indent_offset`` is the column of the synthetic braces wrapped
    around an embedded region while its indenter runs. Hooks are called with
    the buffer session after the corresponding mode switch completes.
    """

    embedded_indent_offset: int = 0
    host_base_offset: int = 0
    idle_delay: float = DEFAULT_IDLE_DELAY
    on_enter_embedded_hooks: Tuple[ModeHook, ...] = field(default=())
    on_enter_host_hooks: Tuple[ModeHook, ...] = field(default=())

    def __post_init__(self) -> None:
        if self.embedded_indent_offset < 0:
            raise ValueError("embedded_indent_offset must be >= 0")
        if self.host_base_offset < 0:
            raise ValueError("host_base_offset must be >= 0")
        if self.idle_delay <= 0:
            raise ValueError("idle_delay must be positive")
        object.__setattr__(
            self, "on_enter_embedded_hooks", tuple(self.on_enter_embedded_hooks)
        )
        object.__setattr__(self, "on_enter_host_hooks", tuple(self.on_enter_host_hooks))

    @classmethod
    def from_env(cls, *, base: Optional["EngineSettings"] = None) -> "EngineSettings":
        """Read ``DUALMODE_ENGINE_*`` overrides on top of ``base``."""

        base = base or cls()
        return replace(
            base,
            embedded_indent_offset=int(
                _env_number("EMBEDDED_INDENT_OFFSET", int, base.embedded_indent_offset)
            ),
            host_base_offset=int(
                _env_number("HOST_BASE_OFFSET", int, base.host_base_offset)
            ),
            idle_delay=_env_number("IDLE_DELAY", float, base.idle_delay),
        )

    def with_overrides(self, **changes: object) -> "EngineSettings":
        return replace(self, **changes)  # type: ignore[arg-type]

    def add_hook(self, mode: str, hook: ModeHook) -> "EngineSettings":
        if mode == "embedded":
            return replace(
                self, on_enter_embedded_hooks=self.on_enter_embedded_hooks + (hook,)
            )
        if mode == "host":
            return replace(self, on_enter_host_hooks=self.on_enter_host_hooks + (hook,))
        raise ValueError(f"Unknown mode '{mode}'")

    def hooks_for(self, mode: str) -> Tuple[ModeHook, ...]:
        if mode == "embedded":
            return self.on_enter_embedded_hooks
        return self.on_enter_host_hooks


__all__ = ["DEFAULT_IDLE_DELAY", "EngineSettings", "ModeHook"]
