"""Abstract document store interface (port) — one named collection of JSON records."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

Record = dict[str, Any]

ID_FIELD = "_id"


class DocumentStore(ABC):
    """Port for a single collection persisted as exactly one file.

    Every record returned carries a unique, store-assigned ``_id``. Records
    handed out are copies; mutating them does not touch the store.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Collection name, e.g. ``pallets``."""
        ...

    @property
    @abstractmethod
    def file_path(self) -> Path:
        """The on-disk file backing this collection."""
        ...

    @abstractmethod
    async def load(self) -> None:
        """Load the collection from disk, creating an empty file if missing."""
        ...

    @abstractmethod
    async def reload(self) -> None:
        """Discard the in-memory state and re-read the file."""
        ...

    @abstractmethod
    async def insert(self, record: Record) -> Record:
        """Persist a new record and return it with its generated ``_id``."""
        ...

    @abstractmethod
    async def find_all(self) -> list[Record]:
        """Return every record in insertion order."""
        ...

    @abstractmethod
    async def find_by_id(self, record_id: str) -> Record | None:
        """Retrieve a single record by ``_id``."""
        ...

    @abstractmethod
    async def find_one(self, **criteria: Any) -> Record | None:
        """Return the first record whose fields equal all of ``criteria``."""
        ...

    @abstractmethod
    async def update_by_id(self, record_id: str, fields: Record) -> Record | None:
        """Merge ``fields`` into a record. Returns None if not found."""
        ...

    @abstractmethod
    async def delete_by_id(self, record_id: str) -> bool:
        """Delete a record. Returns True if deleted, False if not found."""
        ...

    @abstractmethod
    async def truncate(self) -> None:
        """Empty the collection in place, keeping its file."""
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    @abstractmethod
    async def compact(self) -> bool:
        """Drop superseded lines from the file. Returns True if it was rewritten."""
        ...
