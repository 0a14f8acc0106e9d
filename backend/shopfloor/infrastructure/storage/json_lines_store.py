"""Append-style document store — one newline-delimited JSON file per collection.

File layout (replayed top to bottom on load):
    {"_id": "...", ...}                 — an insert, or the newest version after an update
    {"$$deleted": true, "_id": "..."}   — a tombstone left by a delete

The whole collection is cached in memory for the process lifetime. Loading
replays the file and then compacts it to one line per live record; a
running process compacts again on a timer (see ``compact``).

Field names starting with ``$`` and the parse-error marker are reserved,
so a stored record can never be mistaken for a tombstone or a bad line.
"""

import asyncio
import copy
import logging
import os
import secrets
from pathlib import Path
from typing import Any

import aiofiles

from shopfloor.application.interfaces import ID_FIELD, DocumentStore, Record
from shopfloor.domain.exceptions import DuplicateEntityError, InvalidRecordError
from shopfloor.domain.record_lines import (
    DELETED_FIELD,
    PARSE_ERROR_FIELD,
    encode_record,
    parse_line,
    split_lines,
)

logger = logging.getLogger(__name__)


def _file_signature(path: Path) -> tuple[int, int, int] | None:
    try:
        stat = path.stat()
    except FileNotFoundError:
        return None
    return (stat.st_ino, stat.st_size, stat.st_mtime_ns)


class JsonLinesDocumentStore(DocumentStore):
    """Infrastructure adapter implementing the DocumentStore port on a local file."""

    def __init__(
        self,
        name: str,
        file_path: Path,
        unique_fields: tuple[str, ...] = (),
    ):
        self._name = name
        self._file_path = Path(file_path)
        self._unique_fields = tuple(unique_fields)
        self._records: dict[str, Record] = {}
        self._stale_lines = 0
        # What the file looked like after our own last write
        self._signature: tuple[int, int, int] | None = None
        self._lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def stale_lines(self) -> int:
        """Lines in the file that no longer describe a live record."""
        return self._stale_lines

    # ── Lifecycle ───────────────────────────────────────────────────

    async def load(self) -> None:
        async with self._lock:
            await self._load_unlocked()

    async def reload(self) -> None:
        async with self._lock:
            await self._load_unlocked()
        logger.info("Reloaded collection '%s' (%d records)", self._name, len(self._records))

    async def _load_unlocked(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        if not self._file_path.exists():
            self._file_path.touch()
            logger.info("Created database file: %s", self._file_path.name)

        # Undecodable bytes only spoil the line they sit on
        async with aiofiles.open(self._file_path, "r", encoding="utf-8", errors="replace") as f:
            text = await f.read()

        records: dict[str, Record] = {}
        corrupt = 0
        for line in split_lines(text):
            doc = parse_line(line)
            record_id = doc.get(ID_FIELD)
            if doc.get(PARSE_ERROR_FIELD) or not isinstance(record_id, str) or not record_id:
                corrupt += 1
                continue
            if doc.get(DELETED_FIELD):
                records.pop(record_id, None)
                continue
            records[record_id] = doc

        if corrupt:
            logger.warning(
                "Collection '%s': skipped %d unreadable line(s) while loading",
                self._name,
                corrupt,
            )

        self._records = records
        await self._compact_unlocked()

    async def compact(self) -> bool:
        """Rewrite the file down to the live records.

        Skipped when nothing is stale, or when the file was replaced behind
        the store's back (a restore waiting for its reload or restart); the
        cache must not overwrite newer data. Returns True if rewritten.
        """
        async with self._lock:
            if self._stale_lines == 0:
                return False
            if _file_signature(self._file_path) != self._signature:
                logger.warning(
                    "Collection '%s' changed on disk since it was loaded; not compacting",
                    self._name,
                )
                return False
            dropped = self._stale_lines
            await self._compact_unlocked()
        logger.info("Compacted collection '%s' (%d stale lines dropped)", self._name, dropped)
        return True

    async def _compact_unlocked(self) -> None:
        """Rewrite the file so it holds exactly the live records."""
        tmp_path = self._file_path.with_name(f".{self._file_path.name}.compact")
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write("".join(encode_record(doc) + "\n" for doc in self._records.values()))
        os.replace(tmp_path, self._file_path)
        self._stale_lines = 0
        self._signature = _file_signature(self._file_path)

    # ── CRUD ────────────────────────────────────────────────────────

    async def insert(self, record: Record) -> Record:
        _check_field_names(record)
        async with self._lock:
            doc = copy.deepcopy(record)
            record_id = str(doc.get(ID_FIELD) or self._new_id())
            if record_id in self._records:
                raise DuplicateEntityError(self._name, ID_FIELD, record_id)
            doc[ID_FIELD] = record_id
            self._check_unique(doc, record_id)

            await self._append(doc)
            self._records[record_id] = doc
            return copy.deepcopy(doc)

    async def find_all(self) -> list[Record]:
        return [copy.deepcopy(doc) for doc in self._records.values()]

    async def find_by_id(self, record_id: str) -> Record | None:
        doc = self._records.get(record_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def find_one(self, **criteria: Any) -> Record | None:
        for doc in self._records.values():
            if all(doc.get(key) == value for key, value in criteria.items()):
                return copy.deepcopy(doc)
        return None

    async def update_by_id(self, record_id: str, fields: Record) -> Record | None:
        _check_field_names(fields)
        async with self._lock:
            existing = self._records.get(record_id)
            if existing is None:
                return None

            changes = {k: v for k, v in copy.deepcopy(fields).items() if k != ID_FIELD}
            merged = {**existing, **changes}
            self._check_unique(merged, record_id)

            await self._append(merged)
            self._records[record_id] = merged
            self._stale_lines += 1
            return copy.deepcopy(merged)

    async def delete_by_id(self, record_id: str) -> bool:
        async with self._lock:
            if record_id not in self._records:
                return False
            await self._append({DELETED_FIELD: True, ID_FIELD: record_id})
            del self._records[record_id]
            # The record's last version and its tombstone
            self._stale_lines += 2
            return True

    async def truncate(self) -> None:
        async with self._lock:
            # Truncated in place: the file keeps its inode for open handles.
            async with aiofiles.open(self._file_path, "w", encoding="utf-8") as f:
                await f.write("")
            self._records = {}
            self._stale_lines = 0
            self._signature = _file_signature(self._file_path)
        logger.info("Truncated collection '%s'", self._name)

    async def count(self) -> int:
        return len(self._records)

    # ── Helpers ─────────────────────────────────────────────────────

    async def _append(self, doc: Record) -> None:
        # A file replaced since our last write stays "changed" after the append
        unchanged = _file_signature(self._file_path) == self._signature
        async with aiofiles.open(self._file_path, "a", encoding="utf-8") as f:
            await f.write(encode_record(doc) + "\n")
        if unchanged:
            self._signature = _file_signature(self._file_path)

    def _new_id(self) -> str:
        while True:
            candidate = secrets.token_hex(8)
            if candidate not in self._records:
                return candidate

    def _check_unique(self, doc: Record, record_id: str) -> None:
        for field in self._unique_fields:
            value = doc.get(field)
            if value is None:
                continue
            for other_id, other in self._records.items():
                if other_id != record_id and other.get(field) == value:
                    raise DuplicateEntityError(self._name, field, str(value))


def _check_field_names(record: Record) -> None:
    for key in record:
        if not isinstance(key, str) or key.startswith("$") or key == PARSE_ERROR_FIELD:
            raise InvalidRecordError(str(key))
