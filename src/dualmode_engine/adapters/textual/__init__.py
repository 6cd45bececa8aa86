"""Textual host integration for the dual-mode engine."""

from .controller import TextualIdleScheduler, TextualModeAdapter, TextualUIHooks

__all__ = ["TextualIdleScheduler", "TextualModeAdapter", "TextualUIHooks"]
