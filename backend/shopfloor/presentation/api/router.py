"""Top-level API router — every route is mounted at the root."""

from fastapi import APIRouter

from shopfloor.presentation.api.endpoints.auth import router as auth_router
from shopfloor.presentation.api.endpoints.health import router as health_router
from shopfloor.presentation.api.endpoints.logs import router as logs_router
from shopfloor.presentation.api.endpoints.records import build_collection_router
from shopfloor.presentation.api.maintenance_backups_controller import router as backups_router
from shopfloor.presentation.api.maintenance_database_controller import router as database_router


def build_api_router(resource_collections: tuple[str, ...]) -> APIRouter:
    router = APIRouter()
    router.include_router(health_router)
    router.include_router(auth_router)
    router.include_router(backups_router)
    router.include_router(database_router)
    for name in resource_collections:
        router.include_router(build_collection_router(name))
    router.include_router(logs_router)
    return router
