"""Pydantic DTOs for resource records and the activity log."""

from datetime import datetime
from typing import Any

from pydantic import Field

from shopfloor.application.schemas.common import CamelModel, StatusResponse
from shopfloor.domain.entities import LogEntry


class RecordResponse(StatusResponse):
    data: dict[str, Any]


class RecordListResponse(StatusResponse):
    data: list[dict[str, Any]]


class LogEntrySchema(CamelModel):
    id: str | None = Field(None, alias="_id")
    timestamp: datetime
    method: str
    path: str
    payload: Any = None
    status: int

    @classmethod
    def from_entity(cls, entry: LogEntry) -> "LogEntrySchema":
        return cls(
            id=entry.id,
            timestamp=entry.timestamp,
            method=entry.method,
            path=entry.path,
            payload=entry.payload,
            status=entry.status,
        )


class LogListResponse(StatusResponse):
    data: list[LogEntrySchema]
