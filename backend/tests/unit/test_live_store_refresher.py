"""Unit tests for the post-restore refresh policy and the process restarter."""

import os
import signal

import pytest

from shopfloor.application.interfaces import ProcessRestarter
from shopfloor.application.services import LiveStoreRefresher
from shopfloor.infrastructure.lifecycle import SignalProcessRestarter


class RecordingRestarter(ProcessRestarter):

    def __init__(self):
        self.reasons: list[str] = []

    async def restart(self, reason: str) -> None:
        self.reasons.append(reason)


class ReloadCounter:

    def __init__(self):
        self.calls = 0

    async def __call__(self) -> None:
        self.calls += 1


@pytest.mark.asyncio
async def test_restart_mode_defers_to_restarter():
    reload, restarter = ReloadCounter(), RecordingRestarter()
    refresher = LiveStoreRefresher("restart", reload, restarter)

    assert await refresher.refresh() == "restart"
    assert refresher.restart_required
    assert reload.calls == 0

    await refresher.restart("restore of DB_v002")
    assert restarter.reasons == ["restore of DB_v002"]


@pytest.mark.asyncio
async def test_reload_mode_reloads_in_place():
    reload, restarter = ReloadCounter(), RecordingRestarter()
    refresher = LiveStoreRefresher("reload", reload, restarter)

    assert await refresher.refresh() == "reload"
    assert not refresher.restart_required
    assert reload.calls == 1
    assert restarter.reasons == []


@pytest.mark.asyncio
async def test_signal_restarter_sends_sigterm_to_itself():
    sent: list[tuple[int, int]] = []
    restarter = SignalProcessRestarter(
        delay_seconds=0, send_signal=lambda pid, sig: sent.append((pid, sig))
    )

    await restarter.restart("test")

    assert sent == [(os.getpid(), signal.SIGTERM)]
