"""Activity log endpoint."""

from fastapi import APIRouter, Depends

from shopfloor.application.schemas import LogEntrySchema, LogListResponse
from shopfloor.application.services import ActivityLogService
from shopfloor.infrastructure.dependencies import get_activity_log_service

router = APIRouter(tags=["Logs"])


@router.get("/logs", response_model=LogListResponse)
async def list_logs(
    service: ActivityLogService = Depends(get_activity_log_service),
) -> LogListResponse:
    """The 100 most recent mutating requests, newest first."""
    entries = await service.list_recent(limit=100)
    return LogListResponse(data=[LogEntrySchema.from_entity(e) for e in entries])
