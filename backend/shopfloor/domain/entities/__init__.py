from .backup import (
    BackupVersion,
    CollectionFileContents,
    CollectionFileInfo,
    ImportResult,
    RestoreResult,
    SnapshotResult,
)
from .log_entry import REDACTED, LogEntry
from .user import User

__all__ = [
    "BackupVersion",
    "CollectionFileContents",
    "CollectionFileInfo",
    "ImportResult",
    "RestoreResult",
    "SnapshotResult",
    "REDACTED",
    "LogEntry",
    "User",
]
