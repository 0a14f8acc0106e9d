"""FastAPI dependency injection — hands out the services built at app creation."""

from collections.abc import Callable

from fastapi import Depends, Request

from shopfloor.application.services import (
    AccessGuard,
    ActivityLogService,
    ArchiveTransfer,
    AuthService,
    BackupEngine,
    CollectionService,
    DatabaseInspector,
    LiveStoreRefresher,
)
from shopfloor.config import Settings
from shopfloor.infrastructure.container import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_app_settings(container: ServiceContainer = Depends(get_container)) -> Settings:
    return container.settings


def get_backup_engine(container: ServiceContainer = Depends(get_container)) -> BackupEngine:
    return container.engine


def get_archive_transfer(container: ServiceContainer = Depends(get_container)) -> ArchiveTransfer:
    return container.archives


def get_access_guard(container: ServiceContainer = Depends(get_container)) -> AccessGuard:
    return container.guard


def get_database_inspector(
    container: ServiceContainer = Depends(get_container),
) -> DatabaseInspector:
    return container.inspector


def get_auth_service(container: ServiceContainer = Depends(get_container)) -> AuthService:
    return container.auth


def get_activity_log_service(
    container: ServiceContainer = Depends(get_container),
) -> ActivityLogService:
    return container.activity_log


def get_refresher(container: ServiceContainer = Depends(get_container)) -> LiveStoreRefresher:
    return container.refresher


def collection_service_provider(name: str) -> Callable[[ServiceContainer], CollectionService]:
    """Dependency that resolves the CollectionService for resource ``name``."""

    def get_collection_service(
        container: ServiceContainer = Depends(get_container),
    ) -> CollectionService:
        return container.collections[name]

    return get_collection_service
