from .activity_log_repository import DocumentActivityLogRepository
from .json_lines_store import JsonLinesDocumentStore
from .store_registry import DocumentStoreRegistry
from .user_repository import DocumentUserRepository

__all__ = [
    "DocumentActivityLogRepository",
    "JsonLinesDocumentStore",
    "DocumentStoreRegistry",
    "DocumentUserRepository",
]
