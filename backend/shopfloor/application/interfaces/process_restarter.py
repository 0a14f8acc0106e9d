"""Port for ending the current process so a supervisor starts a fresh one."""

from abc import ABC, abstractmethod


class ProcessRestarter(ABC):

    @abstractmethod
    async def restart(self, reason: str) -> None:
        """Shut the process down after a short delay. Returns once the signal is sent."""
        ...
