"""Pydantic DTOs for snapshot maintenance and live database inspection."""

from datetime import datetime
from typing import Any

from pydantic import Field

from shopfloor.application.schemas.common import (
    CamelModel,
    MessageResponse,
    StatusResponse,
    format_size,
)
from shopfloor.domain.entities import (
    BackupVersion,
    CollectionFileContents,
    CollectionFileInfo,
    SnapshotResult,
)


class BackupVersionSchema(CamelModel):
    version_name: str
    version_number: int
    created_at: datetime
    file_count: int
    size_in_bytes: int
    size_formatted: str
    files: list[str]

    @classmethod
    def from_entity(cls, version: BackupVersion) -> "BackupVersionSchema":
        return cls(
            version_name=version.version_name,
            version_number=version.version_number,
            created_at=version.created_at,
            file_count=version.file_count,
            size_in_bytes=version.size_bytes,
            size_formatted=format_size(version.size_bytes),
            files=list(version.files),
        )


class BackupConfigSchema(CamelModel):
    prefix: str
    max_backups: int


class BackupListResponse(StatusResponse):
    data: list[BackupVersionSchema]
    config: BackupConfigSchema


class SnapshotDetailsSchema(CamelModel):
    version_name: str
    total_kept: int
    active_versions: list[str]
    files_copied: list[str]
    purged_versions: list[str]

    @classmethod
    def from_entity(cls, result: SnapshotResult) -> "SnapshotDetailsSchema":
        return cls(
            version_name=result.version_name,
            total_kept=result.total_kept,
            active_versions=list(result.active_versions),
            files_copied=list(result.files_copied),
            purged_versions=list(result.purged_versions),
        )


class SnapshotTriggerResponse(MessageResponse):
    details: SnapshotDetailsSchema


class RestoreResponse(MessageResponse):
    """``refresh`` tells the client whether the server is about to restart."""

    refresh: str
    files_restored: list[str]


class ImportResponse(RestoreResponse):
    skipped: list[str] = Field(default_factory=list)


class FileMetaSchema(CamelModel):
    total_lines: int
    showing_last: int
    truncated: bool


class FileContentsResponse(StatusResponse):
    file_name: str
    data: list[dict[str, Any]]
    meta: FileMetaSchema

    @classmethod
    def from_entity(cls, contents: CollectionFileContents) -> "FileContentsResponse":
        return cls(
            file_name=contents.file_name,
            data=contents.records,
            meta=FileMetaSchema(
                total_lines=contents.total_lines,
                showing_last=contents.showing_last,
                truncated=contents.truncated,
            ),
        )


class LiveFileSchema(CamelModel):
    name: str
    size_in_bytes: int
    size: str
    last_modified: datetime

    @classmethod
    def from_entity(cls, info: CollectionFileInfo) -> "LiveFileSchema":
        return cls(
            name=info.name,
            size_in_bytes=info.size_bytes,
            size=format_size(info.size_bytes),
            last_modified=info.last_modified,
        )


class LiveFileListResponse(StatusResponse):
    data: list[LiveFileSchema]


class FactoryResetRequest(CamelModel):
    key: str | None = None


class FactoryResetResponse(MessageResponse):
    collections_cleared: int
