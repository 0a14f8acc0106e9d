from .auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UpdatePersonnelRequest,
    UpdatePersonnelResponse,
    UsernameSchema,
    UserSummarySchema,
)
from .common import MessageResponse, StatusResponse, format_size
from .maintenance import (
    BackupConfigSchema,
    BackupListResponse,
    BackupVersionSchema,
    FactoryResetRequest,
    FactoryResetResponse,
    FileContentsResponse,
    ImportResponse,
    LiveFileListResponse,
    LiveFileSchema,
    RestoreResponse,
    SnapshotDetailsSchema,
    SnapshotTriggerResponse,
)
from .records import LogEntrySchema, LogListResponse, RecordListResponse, RecordResponse

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RegisterResponse",
    "UpdatePersonnelRequest",
    "UpdatePersonnelResponse",
    "UsernameSchema",
    "UserSummarySchema",
    "MessageResponse",
    "StatusResponse",
    "format_size",
    "BackupConfigSchema",
    "BackupListResponse",
    "BackupVersionSchema",
    "FactoryResetRequest",
    "FactoryResetResponse",
    "FileContentsResponse",
    "ImportResponse",
    "LiveFileListResponse",
    "LiveFileSchema",
    "RestoreResponse",
    "SnapshotDetailsSchema",
    "SnapshotTriggerResponse",
    "LogEntrySchema",
    "LogListResponse",
    "RecordListResponse",
    "RecordResponse",
]
