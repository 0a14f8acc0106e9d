"""Generic CRUD endpoints, one router per resource collection."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from shopfloor.application.schemas import RecordListResponse, RecordResponse, StatusResponse
from shopfloor.application.services import CollectionService
from shopfloor.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidRecordError,
)
from shopfloor.infrastructure.dependencies import collection_service_provider


def build_collection_router(name: str) -> APIRouter:
    """Create the ``/<name>`` router backed by that collection's store."""
    router = APIRouter(prefix=f"/{name}", tags=["Records"])
    get_service = collection_service_provider(name)

    @router.post("", response_model=RecordResponse, status_code=status.HTTP_201_CREATED)
    async def create_record(
        data: dict[str, Any] = Body(...),
        service: CollectionService = Depends(get_service),
    ) -> RecordResponse:
        try:
            record = await service.create_record(data)
        except (DuplicateEntityError, InvalidRecordError) as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        return RecordResponse(data=record)

    @router.get("", response_model=RecordListResponse)
    async def list_records(
        service: CollectionService = Depends(get_service),
    ) -> RecordListResponse:
        return RecordListResponse(data=await service.list_records())

    @router.get("/{record_id}", response_model=RecordResponse)
    async def get_record(
        record_id: str,
        service: CollectionService = Depends(get_service),
    ) -> RecordResponse:
        try:
            record = await service.get_record(record_id)
        except EntityNotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
        return RecordResponse(data=record)

    @router.put("/{record_id}", response_model=RecordResponse)
    async def update_record(
        record_id: str,
        data: dict[str, Any] = Body(...),
        service: CollectionService = Depends(get_service),
    ) -> RecordResponse:
        """Merge the given fields into the record."""
        try:
            record = await service.update_record(record_id, data)
        except EntityNotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
        except (DuplicateEntityError, InvalidRecordError) as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        return RecordResponse(data=record)

    @router.delete("/{record_id}", response_model=StatusResponse)
    async def delete_record(
        record_id: str,
        service: CollectionService = Depends(get_service),
    ) -> StatusResponse:
        try:
            await service.delete_record(record_id)
        except EntityNotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
        return StatusResponse()

    return router
