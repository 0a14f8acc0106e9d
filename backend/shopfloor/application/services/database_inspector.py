"""Read-only view of the live collection files."""

import asyncio
from datetime import datetime, timezone
from pathlib import Path

import aiofiles
import aiofiles.os

from shopfloor.application.services.collection_files import CollectionFiles
from shopfloor.config import Settings
from shopfloor.domain.entities import CollectionFileContents, CollectionFileInfo
from shopfloor.domain.exceptions import EntityNotFoundError, ProtectedResourceError
from shopfloor.domain.record_lines import parse_line, split_lines


class DatabaseInspector:
    """Lists and reads live collection files, hiding protected ones."""

    def __init__(self, settings: Settings):
        self._storage_dir = Path(settings.storage_dir)
        self._limit = settings.inspect_record_limit
        self._files = CollectionFiles(settings)

    async def list_live_files(self) -> list[CollectionFileInfo]:
        if not await aiofiles.os.path.isdir(self._storage_dir):
            return []
        names = sorted(
            name
            for name in await aiofiles.os.listdir(self._storage_dir)
            if self._files.is_collection_file(name) and not self._files.is_protected(name)
        )
        stats = await asyncio.gather(
            *(aiofiles.os.stat(self._storage_dir / name) for name in names),
            return_exceptions=True,
        )
        infos: list[CollectionFileInfo] = []
        for name, stat in zip(names, stats):
            if isinstance(stat, FileNotFoundError):
                continue
            if isinstance(stat, BaseException):
                raise stat
            infos.append(
                CollectionFileInfo(
                    name=name,
                    size_bytes=stat.st_size,
                    last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                )
            )
        return infos

    async def inspect_live_file(self, file_name: str) -> CollectionFileContents:
        """The newest ``inspect_record_limit`` records of one live file.

        Unparseable lines come back as parse-error markers.
        """
        if self._files.is_protected(file_name):
            raise ProtectedResourceError(file_name)
        if not self._files.is_plain_name(file_name):
            raise EntityNotFoundError("Database file", file_name)

        path = self._storage_dir / file_name
        if not await aiofiles.os.path.isfile(path):
            raise EntityNotFoundError("Database file", file_name)

        async with aiofiles.open(path, "r", encoding="utf-8", errors="replace") as f:
            lines = split_lines(await f.read())

        shown = lines[-self._limit :]
        return CollectionFileContents(
            file_name=file_name,
            records=[parse_line(line) for line in shown],
            total_lines=len(lines),
            showing_last=len(shown),
            truncated=len(lines) > len(shown),
        )
