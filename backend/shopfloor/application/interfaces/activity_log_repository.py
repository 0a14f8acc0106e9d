"""Abstract repository interface (port) for the activity log."""

from abc import ABC, abstractmethod

from shopfloor.domain.entities import LogEntry


class ActivityLogRepository(ABC):
    """Append-only log of mutating requests."""

    @abstractmethod
    async def append(self, entry: LogEntry) -> LogEntry:
        """Persist one entry and return it with its generated ID."""
        ...

    @abstractmethod
    async def get_recent(self, limit: int = 100) -> list[LogEntry]:
        """Return up to ``limit`` entries, newest first."""
        ...
