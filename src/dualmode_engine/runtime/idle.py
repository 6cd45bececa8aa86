"""Idle-timer schedulers feeding the mode dispatcher.

Every scheduler keeps at most one pending timer per key; scheduling again
replaces the earlier timer, so a burst of activity collapses into a single
callback once input goes quiet.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol

IdleCallback = Callable[[], object]


class IdleScheduler(Protocol):
    def schedule(self, key: str, delay: float, callback: IdleCallback) -> None:
        ...

    def cancel(self, key: str) -> None:
        ...

    def pending(self, key: str) -> bool:
        ...


@dataclass
class PendingTimer:
    deadline: float
    delay: float
    generation: int
    callback: IdleCallback


class ManualIdleScheduler:
    """Deterministic scheduler driven by explicit clock ticks.

    Without a ``clock`` the scheduler keeps its own virtual time that only
    moves through :meth:`advance`; hosts with a real event loop pass
    ``time.monotonic`` and call :meth:`process_due` periodically.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self._clock = clock
        self._virtual_now = 0.0
        self._timers: Dict[str, PendingTimer] = {}
        self._generation = 0

    def now(self) -> float:
        return self._clock() if self._clock is not None else self._virtual_now

    def schedule(self, key: str, delay: float, callback: IdleCallback) -> None:
        self._generation += 1
        self._timers[key] = PendingTimer(
            deadline=self.now() + delay,
            delay=delay,
            generation=self._generation,
            callback=callback,
        )

    def cancel(self, key: str) -> None:
        self._timers.pop(key, None)

    def pending(self, key: str) -> bool:
        return key in self._timers

    def advance(self, seconds: float) -> List[str]:
        if self._clock is not None:
            raise RuntimeError("advance() requires the virtual clock")
        self._virtual_now += seconds
        return self.process_due()

    def process_due(self) -> List[str]:
        """Fire every expired timer; returns the keys that fired."""

        now = self.now()
        expired = [
            (key, timer.generation)
            for key, timer in self._timers.items()
            if timer.deadline <= now
        ]
        return [key for key, generation in expired if self._trigger(key, generation)]

    def fire(self, key: str) -> bool:
        timer = self._timers.get(key)
        if timer is None:
            return False
        return self._trigger(key, timer.generation)

    def _trigger(self, key: str, generation: int) -> bool:
        timer = self._timers.get(key)
        if timer is None or timer.generation != generation:
            return False
        del self._timers[key]
        timer.callback()
        return True


class AsyncioIdleScheduler:
    """Scheduler backed by ``loop.call_later`` handles."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop
        self._handles: Dict[str, asyncio.TimerHandle] = {}

    def schedule(self, key: str, delay: float, callback: IdleCallback) -> None:
        self.cancel(key)
        loop = self._loop or asyncio.get_running_loop()
        self._handles[key] = loop.call_later(delay, self._run, key, callback)

    def cancel(self, key: str) -> None:
        handle = self._handles.pop(key, None)
        if handle is not None:
            handle.cancel()

    def pending(self, key: str) -> bool:
        return key in self._handles

    def _run(self, key: str, callback: IdleCallback) -> None:
        self._handles.pop(key, None)
        callback()


__all__ = [
    "AsyncioIdleScheduler",
    "IdleCallback",
    "IdleScheduler",
    "ManualIdleScheduler",
    "PendingTimer",
]
