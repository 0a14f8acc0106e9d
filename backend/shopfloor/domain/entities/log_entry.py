"""Domain entity — one audited mutating request."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

REDACTED = "REDACTED"


@dataclass(frozen=True)
class LogEntry:
    """Immutable record of a mutating request that completed without error."""

    method: str
    path: str
    payload: Any
    status: int
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: str | None = None

    @classmethod
    def for_request(cls, method: str, path: str, payload: Any, status: int) -> "LogEntry":
        """Build an entry, hiding the payload of anything under an auth path."""
        if "auth" in path:
            payload = REDACTED
        return cls(method=method, path=path, payload=payload, status=status)
