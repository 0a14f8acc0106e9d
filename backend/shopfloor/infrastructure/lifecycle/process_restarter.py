"""Ends the server process with SIGTERM so uvicorn shuts down cleanly.

A supervisor (systemd, docker ``restart: always``, pm2, ...) is expected
to start it again; the new process reloads every collection from disk.
"""

import asyncio
import logging
import os
import signal
from collections.abc import Callable

from shopfloor.application.interfaces import ProcessRestarter

logger = logging.getLogger(__name__)


class SignalProcessRestarter(ProcessRestarter):

    def __init__(
        self,
        delay_seconds: float = 1.0,
        send_signal: Callable[[int, int], None] = os.kill,
    ):
        self._delay = delay_seconds
        self._send_signal = send_signal

    async def restart(self, reason: str) -> None:
        logger.warning("Restarting in %.1fs: %s", self._delay, reason)
        await asyncio.sleep(self._delay)
        self._send_signal(os.getpid(), signal.SIGTERM)
