"""Application service (use case) for CRUD over one resource collection."""

from typing import Any

from shopfloor.application.interfaces import DocumentStore, Record
from shopfloor.domain.exceptions import EntityNotFoundError


class CollectionService:
    """Create/read/update/delete for free-form records of one collection."""

    def __init__(self, store: DocumentStore):
        self._store = store

    @property
    def name(self) -> str:
        return self._store.name

    async def list_records(self) -> list[Record]:
        return await self._store.find_all()

    async def get_record(self, record_id: str) -> Record:
        record = await self._store.find_by_id(record_id)
        if record is None:
            raise EntityNotFoundError("Record", record_id)
        return record

    async def create_record(self, data: dict[str, Any]) -> Record:
        return await self._store.insert(data)

    async def update_record(self, record_id: str, data: dict[str, Any]) -> Record:
        record = await self._store.update_by_id(record_id, data)
        if record is None:
            raise EntityNotFoundError("Record", record_id)
        return record

    async def delete_record(self, record_id: str) -> None:
        if not await self._store.delete_by_id(record_id):
            raise EntityNotFoundError("Record", record_id)
