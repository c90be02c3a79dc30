import asyncio
from datetime import date

import pytest

from sitelog.core.drafts.autosave import AutosaveTimer
from sitelog.core.drafts.controller import ReportFormController
from sitelog.core.notifications.service import Notifier
from sitelog.integrations.local_drafts import MemoryDraftStore


@pytest.mark.asyncio
async def test_timer_fires_repeatedly_until_stopped():
    calls = []
    timer = AutosaveTimer(0.01, lambda: calls.append(1))

    timer.start()
    await asyncio.sleep(0.06)
    await timer.stop()
    fired = len(calls)
    await asyncio.sleep(0.03)

    assert fired >= 2
    assert len(calls) == fired
    assert timer.running is False


@pytest.mark.asyncio
async def test_failing_tick_does_not_stop_timer():
    calls = []

    def flaky():
        calls.append(1)
        raise RuntimeError("boom")

    timer = AutosaveTimer(0.01, flaky)
    timer.start()
    await asyncio.sleep(0.05)
    await timer.stop()

    assert len(calls) >= 2


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        AutosaveTimer(0, lambda: None)


@pytest.mark.asyncio
async def test_controller_autosaves_silently(remote, exporter):
    store = MemoryDraftStore()
    notifier = Notifier()
    form = ReportFormController(store, remote, exporter, notifier, autosave_interval=0.01)

    async with form:
        assert form.autosave_running is True
        await form.set_report_date(date(2024, 1, 10))
        form.activity_today = "Typed, never saved by hand"
        await asyncio.sleep(0.05)

    assert form.autosave_running is False
    assert store.load(date(2024, 1, 10)).activity_today == "Typed, never saved by hand"
    assert notifier.history == []


@pytest.mark.asyncio
async def test_controllers_own_independent_timers(remote, exporter):
    first = ReportFormController(MemoryDraftStore(), remote, exporter, autosave_interval=0.01)
    second = ReportFormController(MemoryDraftStore(), remote, exporter, autosave_interval=0.01)
    first.start()
    second.start()

    await first.close()

    assert first.autosave_running is False
    assert second.autosave_running is True
    await second.close()


@pytest.mark.asyncio
async def test_closed_controller_cannot_restart(remote, exporter):
    form = ReportFormController(MemoryDraftStore(), remote, exporter)
    await form.close()

    with pytest.raises(RuntimeError):
        form.start()
