"""Application service for the audit trail of mutating requests."""

from typing import Any

from shopfloor.application.interfaces import ActivityLogRepository
from shopfloor.domain.entities import LogEntry

AUDITED_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class ActivityLogService:

    def __init__(self, repository: ActivityLogRepository):
        self._repository = repository

    @staticmethod
    def should_record(method: str, status: int) -> bool:
        return method.upper() in AUDITED_METHODS and status < 400

    async def record(self, method: str, path: str, payload: Any, status: int) -> LogEntry | None:
        """Append one entry if the request qualifies; auth payloads are redacted."""
        if not self.should_record(method, status):
            return None
        entry = LogEntry.for_request(method=method.upper(), path=path, payload=payload, status=status)
        return await self._repository.append(entry)

    async def list_recent(self, limit: int = 100) -> list[LogEntry]:
        return await self._repository.get_recent(limit)
