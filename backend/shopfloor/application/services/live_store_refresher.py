"""Brings the in-memory store cache back in line after live files were overwritten.

Two modes:
    restart — the process exits shortly after the response is sent and the
              supervisor starts a fresh one, which loads the new files.
    reload  — every collection is re-read in place before responding.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Literal

from shopfloor.application.interfaces import ProcessRestarter

logger = logging.getLogger(__name__)

RefreshMode = Literal["restart", "reload"]


class LiveStoreRefresher:

    def __init__(
        self,
        mode: RefreshMode,
        reload_stores: Callable[[], Awaitable[None]],
        restarter: ProcessRestarter,
    ):
        self._mode = mode
        self._reload_stores = reload_stores
        self._restarter = restarter

    @property
    def mode(self) -> RefreshMode:
        return self._mode

    @property
    def restart_required(self) -> bool:
        """True when the caller must schedule :meth:`restart` after responding."""
        return self._mode == "restart"

    async def refresh(self) -> RefreshMode:
        """Reload in place when configured to; otherwise leave it to :meth:`restart`."""
        if self._mode == "reload":
            await self._reload_stores()
            logger.info("Live store reloaded in place")
        return self._mode

    async def restart(self, reason: str) -> None:
        await self._restarter.restart(reason)
