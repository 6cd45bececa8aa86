"""Language profiles, per-buffer sessions, and the debounced mode dispatcher."""

from .base_mode import BufferSession, ModeProfile, UnknownModeError
from .dispatcher import IndentHook, ModeDispatcher
from .profiles import ProfileMap, default_profiles, embedded_profile, host_profile

__all__ = [
    "BufferSession",
    "IndentHook",
    "ModeDispatcher",
    "ModeProfile",
    "ProfileMap",
    "UnknownModeError",
    "default_profiles",
    "embedded_profile",
    "host_profile",
]
