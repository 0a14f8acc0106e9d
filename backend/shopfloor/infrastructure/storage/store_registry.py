"""Registry of live collections — one document store per configured collection."""

import asyncio
import logging
from collections.abc import Iterator
from pathlib import Path

from shopfloor.application.interfaces import DocumentStore
from shopfloor.config import Settings
from shopfloor.domain.exceptions import EntityNotFoundError
from shopfloor.infrastructure.storage.json_lines_store import JsonLinesDocumentStore

logger = logging.getLogger(__name__)


class DocumentStoreRegistry:
    """Owns the live store: every configured collection has exactly one instance.

    Construction does no I/O; ``load_all()`` creates missing files and fills
    the in-memory caches at startup.
    """

    def __init__(self, settings: Settings):
        self._storage_dir = Path(settings.storage_dir)
        unique = {settings.users_collection: ("username",)}
        self._stores: dict[str, DocumentStore] = {
            name: JsonLinesDocumentStore(
                name=name,
                file_path=self._storage_dir / f"{name}{settings.store_extension}",
                unique_fields=unique.get(name, ()),
            )
            for name in settings.collections
        }

    @property
    def storage_dir(self) -> Path:
        return self._storage_dir

    @property
    def names(self) -> list[str]:
        return list(self._stores)

    def get(self, name: str) -> DocumentStore:
        try:
            return self._stores[name]
        except KeyError:
            raise EntityNotFoundError("Collection", name) from None

    def __iter__(self) -> Iterator[DocumentStore]:
        return iter(self._stores.values())

    async def load_all(self) -> None:
        """Create the storage directory and load every collection."""
        self._storage_dir.mkdir(parents=True, exist_ok=True)
        await asyncio.gather(*(store.load() for store in self._stores.values()))
        logger.info(
            "Live store ready: %d collections in %s", len(self._stores), self._storage_dir
        )

    async def reload_all(self) -> None:
        """Re-read every collection from disk (in-place cache invalidation)."""
        await asyncio.gather(*(store.reload() for store in self._stores.values()))

    async def compact_all(self) -> int:
        """Compact every collection; returns how many files were rewritten."""
        results = await asyncio.gather(
            *(store.compact() for store in self._stores.values()), return_exceptions=True
        )
        rewritten = 0
        for store, result in zip(self._stores.values(), results):
            if isinstance(result, OSError):
                logger.error("Compaction of '%s' failed: %s", store.name, result)
            elif isinstance(result, BaseException):
                raise result
            elif result:
                rewritten += 1
        return rewritten

    async def run_compaction(self, interval_seconds: float) -> None:
        """Compact every ``interval_seconds`` until cancelled."""
        while True:
            await asyncio.sleep(interval_seconds)
            rewritten = await self.compact_all()
            logger.debug("Periodic compaction rewrote %d collection file(s)", rewritten)
