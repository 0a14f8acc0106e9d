"""Concrete activity log repository backed by the logs document store."""

from datetime import datetime

from shopfloor.application.interfaces import ID_FIELD, ActivityLogRepository, DocumentStore, Record
from shopfloor.domain.entities import LogEntry


class DocumentActivityLogRepository(ActivityLogRepository):
    """Implements the ActivityLogRepository port on top of a DocumentStore."""

    def __init__(self, store: DocumentStore):
        self._store = store

    def _to_entity(self, doc: Record) -> LogEntry:
        return LogEntry(
            id=doc.get(ID_FIELD),
            timestamp=datetime.fromisoformat(doc["timestamp"]),
            method=doc.get("method", ""),
            path=doc.get("path", ""),
            payload=doc.get("payload"),
            status=int(doc.get("status", 0)),
        )

    async def append(self, entry: LogEntry) -> LogEntry:
        doc = await self._store.insert(
            {
                "timestamp": entry.timestamp.isoformat(),
                "method": entry.method,
                "path": entry.path,
                "payload": entry.payload,
                "status": entry.status,
            }
        )
        return self._to_entity(doc)

    async def get_recent(self, limit: int = 100) -> list[LogEntry]:
        docs = [doc for doc in await self._store.find_all() if "timestamp" in doc]
        docs.sort(key=lambda d: d["timestamp"], reverse=True)
        return [self._to_entity(doc) for doc in docs[:limit]]
