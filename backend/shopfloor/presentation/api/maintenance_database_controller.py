"""Live database API — list and inspect collection files, factory reset."""

from fastapi import APIRouter, Depends, Header, HTTPException, status

from shopfloor.application.interfaces import AccessScope
from shopfloor.application.schemas import (
    FactoryResetRequest,
    FactoryResetResponse,
    FileContentsResponse,
    LiveFileListResponse,
    LiveFileSchema,
)
from shopfloor.application.services import AccessGuard, BackupEngine, DatabaseInspector
from shopfloor.domain.exceptions import (
    AccessDeniedError,
    EntityNotFoundError,
    MaintenanceError,
    ProtectedResourceError,
)
from shopfloor.infrastructure.dependencies import (
    get_access_guard,
    get_backup_engine,
    get_database_inspector,
)

router = APIRouter(prefix="/maintenance/database", tags=["Maintenance"])


@router.get("", response_model=LiveFileListResponse)
async def list_live_files(
    inspector: DatabaseInspector = Depends(get_database_inspector),
) -> LiveFileListResponse:
    files = await inspector.list_live_files()
    return LiveFileListResponse(data=[LiveFileSchema.from_entity(f) for f in files])


@router.post("/factory-reset", response_model=FactoryResetResponse)
async def factory_reset(
    data: FactoryResetRequest | None = None,
    x_admin_key: str | None = Header(None),
    guard: AccessGuard = Depends(get_access_guard),
    engine: BackupEngine = Depends(get_backup_engine),
) -> FactoryResetResponse:
    """Empty every business collection. Personnel accounts are kept."""
    try:
        body_key = data.key if data else None
        guard.require(body_key or x_admin_key, AccessScope.ADMIN)
        cleared = await engine.factory_reset()
    except AccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except MaintenanceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return FactoryResetResponse(
        message="Factory reset complete",
        collections_cleared=cleared,
    )


@router.get("/{file_name}", response_model=FileContentsResponse)
async def inspect_live_file(
    file_name: str,
    inspector: DatabaseInspector = Depends(get_database_inspector),
) -> FileContentsResponse:
    """The most recent records of one live file."""
    try:
        contents = await inspector.inspect_live_file(file_name)
    except ProtectedResourceError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="ACCESS DENIED: System configuration files are restricted.",
        )
    except EntityNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return FileContentsResponse.from_entity(contents)
