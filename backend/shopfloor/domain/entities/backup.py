"""Domain entities for versioned snapshots of the live store."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class BackupVersion:
    """One snapshot directory, e.g. ``DB_v007``.

    ``files`` never contains a protected collection file.
    """

    version_name: str
    version_number: int
    created_at: datetime
    files: list[str] = field(default_factory=list)
    size_bytes: int = 0

    @property
    def file_count(self) -> int:
        return len(self.files)


@dataclass(frozen=True)
class SnapshotResult:
    """Outcome of a completed snapshot + rotation."""

    version_name: str
    total_kept: int
    active_versions: list[str]
    files_copied: list[str] = field(default_factory=list)
    purged_versions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RestoreResult:
    """Files copied back over the live store from a snapshot."""

    version_name: str
    files_restored: list[str]


@dataclass(frozen=True)
class ImportResult:
    """Files extracted from an uploaded archive into the live store."""

    files_restored: list[str]
    skipped: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CollectionFileContents:
    """Parsed records of one collection file (snapshot or live)."""

    file_name: str
    records: list[dict[str, Any]]
    total_lines: int = 0
    showing_last: int = 0
    truncated: bool = False


@dataclass(frozen=True)
class CollectionFileInfo:
    """Size and modification time of one live collection file."""

    name: str
    size_bytes: int
    last_modified: datetime
