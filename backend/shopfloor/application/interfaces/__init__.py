from .access_policy import AccessPolicy, AccessScope
from .activity_log_repository import ActivityLogRepository
from .document_store import ID_FIELD, DocumentStore, Record
from .password_hasher import PasswordHasher
from .process_restarter import ProcessRestarter
from .user_repository import UserRepository

__all__ = [
    "AccessPolicy",
    "AccessScope",
    "ActivityLogRepository",
    "ID_FIELD",
    "DocumentStore",
    "Record",
    "PasswordHasher",
    "ProcessRestarter",
    "UserRepository",
]
