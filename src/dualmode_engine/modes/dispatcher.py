"""Mode dispatcher: keeps each buffer's active language in sync with its cursor."""

from __future__ import annotations

from typing import Callable, Mapping, Optional

from dualmode_engine.regions import LanguageMode, RegionClassifier
from dualmode_engine.runtime import telemetry
from dualmode_engine.runtime.idle import IdleScheduler, ManualIdleScheduler

from .base_mode import BufferSession, ModeProfile, UnknownModeError

IndentHook = Callable[[BufferSession, int], object]


class ModeDispatcher:
    """Debounced two-state machine run once per idle period per buffer.

    Edits and cursor moves only raise ``pending_update`` and re-arm the idle
    timer; the classification and any switch happen when the timer fires,
    using the cursor position current at that moment.
    """

    def __init__(
        self,
        classifier: RegionClassifier,
        profiles: Mapping[LanguageMode, ModeProfile],
        *,
        scheduler: Optional[IdleScheduler] = None,
        indent_hook: Optional[IndentHook] = None,
    ) -> None:
        self.classifier = classifier
        self.profiles = dict(profiles)
        self.scheduler: IdleScheduler = scheduler or ManualIdleScheduler()
        self.indent_hook = indent_hook
        self.logger = telemetry.get_logger("dualmode_engine.modes")

    def profile_for(self, mode: LanguageMode) -> ModeProfile:
        try:
            return self.profiles[mode]
        except KeyError:
            raise UnknownModeError(
                f"No profile registered for mode '{mode.value}'"
            ) from None

    def open_buffer(self, session: BufferSession) -> LanguageMode:
        mode = self.classifier.classify_cursor(session.buffer)
        self.switch_mode(session, mode)
        session.pending_update = False
        return mode

    def close_buffer(self, session: BufferSession) -> None:
        self.scheduler.cancel(session.key)
        session.pending_update = False

    def note_activity(self, session: BufferSession) -> None:
        session.pending_update = True
        self.scheduler.schedule(
            session.key, session.settings.idle_delay, lambda: self.dispatch(session)
        )

    def dispatch(self, session: BufferSession) -> bool:
        """Run one pending classification; returns whether the mode changed."""

        if not session.pending_update:
            return False
        session.pending_update = False
        with telemetry.span(
            "mode::dispatch",
            component="modes",
            metadata={"buffer": session.key},
        ) as handle:
            desired = self.classifier.classify_cursor(session.buffer)
            handle.add_metadata("desired", desired.value)
            telemetry.record_event(
                "mode.dispatch",
                level="debug",
                data={"buffer": session.key, "desired": desired.value},
            )
            if desired == session.active_mode:
                return False
            self.switch_mode(session, desired)
            return True

    def switch_mode(self, session: BufferSession, target: LanguageMode) -> None:
        profile = self.profile_for(target)
        previous = session.active_mode
        with telemetry.span(
            f"mode::switch::{target.value}",
            component="modes",
            metadata={"buffer": session.key, "mode": target.value},
        ):
            profile.activate(session)
            self._reassert_indent_hook(session)
            session.active_mode = target
        telemetry.record_event(
            "mode.switch",
            data={
                "buffer": session.key,
                "from": previous.value if previous else None,
                "to": target.value,
            },
        )
        for hook in session.settings.hooks_for(target.value):
            hook(session)

    def _reassert_indent_hook(self, session: BufferSession) -> None:
        hook = self.indent_hook
        if hook is None:
            session.indent_function = None
            return
        session.indent_function = lambda row: hook(session, row)


__all__ = ["IndentHook", "ModeDispatcher"]
