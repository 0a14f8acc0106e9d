from .access_guard import AccessGuard
from .activity_log_service import ActivityLogService
from .archive_transfer import ArchiveTransfer, SnapshotArchive
from .auth_service import AuthService
from .backup_engine import BackupEngine
from .collection_files import CollectionFiles
from .collection_service import CollectionService
from .database_inspector import DatabaseInspector
from .live_store_refresher import LiveStoreRefresher

__all__ = [
    "AccessGuard",
    "ActivityLogService",
    "ArchiveTransfer",
    "SnapshotArchive",
    "AuthService",
    "BackupEngine",
    "CollectionFiles",
    "CollectionService",
    "DatabaseInspector",
    "LiveStoreRefresher",
]
