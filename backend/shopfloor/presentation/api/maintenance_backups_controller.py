"""Snapshot maintenance API — list, trigger, download, inspect, restore and prune versions."""

import logging

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    File,
    Header,
    HTTPException,
    UploadFile,
    status,
)
from fastapi.responses import StreamingResponse

from shopfloor.application.interfaces import AccessScope
from shopfloor.application.schemas import (
    BackupConfigSchema,
    BackupListResponse,
    BackupVersionSchema,
    FileContentsResponse,
    ImportResponse,
    MessageResponse,
    RestoreResponse,
    SnapshotDetailsSchema,
    SnapshotTriggerResponse,
)
from shopfloor.application.services import (
    AccessGuard,
    ArchiveTransfer,
    BackupEngine,
    LiveStoreRefresher,
)
from shopfloor.domain.exceptions import (
    AccessDeniedError,
    EntityNotFoundError,
    InvalidArchiveError,
    MaintenanceError,
    ProtectedResourceError,
)
from shopfloor.infrastructure.dependencies import (
    get_access_guard,
    get_archive_transfer,
    get_backup_engine,
    get_refresher,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/maintenance/backups", tags=["Maintenance"])


def _refresh_message(mode: str) -> str:
    return "Restarting to load restored data" if mode == "restart" else "Live store reloaded"


@router.get("", response_model=BackupListResponse)
async def list_backups(
    engine: BackupEngine = Depends(get_backup_engine),
) -> BackupListResponse:
    """Every snapshot version, highest number first, without protected files."""
    try:
        versions = await engine.list_snapshots()
    except MaintenanceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return BackupListResponse(
        data=[BackupVersionSchema.from_entity(v) for v in versions],
        config=BackupConfigSchema(prefix=engine.prefix, max_backups=engine.max_backups),
    )


@router.post("/trigger", response_model=SnapshotTriggerResponse)
async def trigger_backup(
    engine: BackupEngine = Depends(get_backup_engine),
) -> SnapshotTriggerResponse:
    """Take a snapshot now and rotate old versions."""
    try:
        result = await engine.create_snapshot()
    except MaintenanceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return SnapshotTriggerResponse(
        message="Backup completed",
        details=SnapshotDetailsSchema.from_entity(result),
    )


@router.post("/restore-from-zip", response_model=ImportResponse)
async def restore_from_zip(
    background_tasks: BackgroundTasks,
    backup_zip: UploadFile | None = File(None, alias="backupZip"),
    x_admin_key: str | None = Header(None),
    guard: AccessGuard = Depends(get_access_guard),
    archives: ArchiveTransfer = Depends(get_archive_transfer),
    refresher: LiveStoreRefresher = Depends(get_refresher),
) -> ImportResponse:
    """Install the collection files of an uploaded ZIP over the live store."""
    try:
        guard.require(x_admin_key, AccessScope.ADMIN)
    except AccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    if backup_zip is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    content = await backup_zip.read()
    try:
        result = await archives.import_archive(content)
        mode = await refresher.refresh()
    except InvalidArchiveError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except MaintenanceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    if refresher.restart_required:
        background_tasks.add_task(refresher.restart, f"import of {backup_zip.filename}")
    return ImportResponse(
        message=f"External ZIP restored. {_refresh_message(mode)}",
        refresh=mode,
        files_restored=result.files_restored,
        skipped=result.skipped,
    )


@router.get("/{version}/download")
async def download_backup(
    version: str,
    archives: ArchiveTransfer = Depends(get_archive_transfer),
) -> StreamingResponse:
    """Stream one version as a ZIP built on the fly."""
    try:
        archive = await archives.export_snapshot(version)
    except EntityNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Backup version not found")
    return StreamingResponse(
        archive.chunks,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{archive.filename}"'},
    )


@router.get("/{version}/files/{file_name}", response_model=FileContentsResponse)
async def inspect_backup_file(
    version: str,
    file_name: str,
    engine: BackupEngine = Depends(get_backup_engine),
) -> FileContentsResponse:
    """Parsed records of one file inside a version."""
    try:
        contents = await engine.inspect_snapshot_file(version, file_name)
    except ProtectedResourceError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except EntityNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    except MaintenanceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return FileContentsResponse.from_entity(contents)


@router.post("/{version}/restore", response_model=RestoreResponse)
async def restore_backup(
    version: str,
    background_tasks: BackgroundTasks,
    x_admin_key: str | None = Header(None),
    guard: AccessGuard = Depends(get_access_guard),
    engine: BackupEngine = Depends(get_backup_engine),
    refresher: LiveStoreRefresher = Depends(get_refresher),
) -> RestoreResponse:
    """Roll the live store back to ``version``. Requires the admin key."""
    try:
        guard.require(x_admin_key, AccessScope.ADMIN)
        result = await engine.restore_snapshot(version)
        mode = await refresher.refresh()
    except AccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except EntityNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Source not found")
    except MaintenanceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    if refresher.restart_required:
        background_tasks.add_task(refresher.restart, f"restore of {version}")
    return RestoreResponse(
        message=f"System rolled back to {version}. {_refresh_message(mode)}",
        refresh=mode,
        files_restored=result.files_restored,
    )


@router.delete("/{version}", response_model=MessageResponse)
async def delete_backup(
    version: str,
    engine: BackupEngine = Depends(get_backup_engine),
) -> MessageResponse:
    """Permanently delete one version."""
    try:
        await engine.prune_snapshot(version)
    except EntityNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    except MaintenanceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return MessageResponse(message=f"Version {version} purged.")
