from __future__ import annotations

import asyncio
from typing import List

import pytest

from dualmode_engine.runtime.config import DEFAULT_IDLE_DELAY, EngineSettings
from dualmode_engine.runtime.idle import AsyncioIdleScheduler, ManualIdleScheduler


def test_manual_scheduler_replaces_pending_timer() -> None:
    scheduler = ManualIdleScheduler()
    fired: List[str] = []

    scheduler.schedule("buf", 1.0, lambda: fired.append("first"))
    scheduler.advance(0.5)
    scheduler.schedule("buf", 1.0, lambda: fired.append("second"))
    scheduler.advance(0.6)
    assert fired == []

    assert scheduler.advance(0.5) == ["buf"]
    assert fired == ["second"]
    assert not scheduler.pending("buf")


def test_manual_scheduler_cancel_and_fire() -> None:
    scheduler = ManualIdleScheduler()
    fired: List[str] = []
    scheduler.schedule("a", 1.0, lambda: fired.append("a"))
    scheduler.schedule("b", 1.0, lambda: fired.append("b"))

    scheduler.cancel("a")
    assert scheduler.fire("a") is False
    assert scheduler.fire("b") is True
    assert fired == ["b"]


def test_manual_scheduler_with_real_clock_rejects_advance() -> None:
    now = [10.0]
    scheduler = ManualIdleScheduler(clock=lambda: now[0])
    fired: List[str] = []
    scheduler.schedule("buf", 0.5, lambda: fired.append("buf"))

    with pytest.raises(RuntimeError):
        scheduler.advance(1)
    assert scheduler.process_due() == []
    now[0] = 10.5
    assert scheduler.process_due() == ["buf"]


def test_asyncio_scheduler_debounces() -> None:
    fired: List[str] = []

    async def scenario() -> None:
        scheduler = AsyncioIdleScheduler()
        scheduler.schedule("buf", 0.01, lambda: fired.append("first"))
        scheduler.schedule("buf", 0.01, lambda: fired.append("second"))
        assert scheduler.pending("buf")
        await asyncio.sleep(0.05)
        assert not scheduler.pending("buf")

    asyncio.run(scenario())

    assert fired == ["second"]


def test_settings_defaults_and_validation() -> None:
    settings = EngineSettings()

    assert settings.embedded_indent_offset == 0
    assert settings.idle_delay == DEFAULT_IDLE_DELAY
    with pytest.raises(ValueError):
        EngineSettings(embedded_indent_offset=-1)
    with pytest.raises(ValueError):
        EngineSettings(idle_delay=0)


def test_settings_hooks_are_per_mode() -> None:
    def hook(session: object) -> None:
        return None

    settings = EngineSettings().add_hook("embedded", hook)

    assert settings.hooks_for("embedded") == (hook,)
    assert settings.hooks_for("host") == ()
    assert EngineSettings().hooks_for("embedded") == ()
    with pytest.raises(ValueError):
        settings.add_hook("visual", hook)


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DUALMODE_ENGINE_EMBEDDED_INDENT_OFFSET", "4")
    monkeypatch.setenv("DUALMODE_ENGINE_IDLE_DELAY", "0.25")
    monkeypatch.delenv("DUALMODE_ENGINE_HOST_BASE_OFFSET", raising=False)

    settings = EngineSettings.from_env(base=EngineSettings(host_base_offset=2))

    assert settings.embedded_indent_offset == 4
    assert settings.idle_delay == 0.25
    assert settings.host_base_offset == 2


def test_settings_from_env_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DUALMODE_ENGINE_EMBEDDED_INDENT_OFFSET", "wide")

    with pytest.raises(ValueError):
        EngineSettings.from_env()
