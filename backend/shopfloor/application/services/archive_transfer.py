"""ZIP export of snapshot versions and import of uploaded archives.

Exports are generated on the fly: the archive is written into an
in-memory, non-seekable buffer (zipfile then uses data descriptors) and
handed out chunk by chunk, so nothing is staged on disk.

Imports are validated in full before a single byte reaches the live store.
"""

import asyncio
import io
import logging
import shutil
import tempfile
import zipfile
import zlib
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path, PurePosixPath, PureWindowsPath

import aiofiles

from shopfloor.application.services.backup_engine import BackupEngine
from shopfloor.application.services.collection_files import CollectionFiles
from shopfloor.config import Settings
from shopfloor.domain.entities import ImportResult
from shopfloor.domain.exceptions import InvalidArchiveError, MaintenanceError
from shopfloor.infrastructure.logging.colored_logger import MaintenanceLogger, MaintenanceStage

logger = logging.getLogger(__name__)
_log = MaintenanceLogger("Maintenance")

_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class SnapshotArchive:
    """A ready-to-stream ZIP of one snapshot version."""

    filename: str
    chunks: Iterator[bytes]


class _ChunkBuffer(io.RawIOBase):
    """Write-only sink that collects what zipfile writes until drained."""

    def __init__(self) -> None:
        super().__init__()
        self._chunks: list[bytes] = []

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        self._chunks.append(bytes(data))
        return len(data)

    def drain(self) -> bytes:
        data = b"".join(self._chunks)
        self._chunks.clear()
        return data


def _stream_zip(files: list[Path]) -> Iterator[bytes]:
    buffer = _ChunkBuffer()
    with zipfile.ZipFile(
        buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9
    ) as archive:
        for path in files:
            with path.open("rb") as source, archive.open(path.name, "w") as target:
                while True:
                    block = source.read(_CHUNK_SIZE)
                    if not block:
                        break
                    target.write(block)
                    data = buffer.drain()
                    if data:
                        yield data
            data = buffer.drain()
            if data:
                yield data
    # Central directory
    yield buffer.drain()


def is_unsafe_entry(name: str) -> bool:
    """True for entry names that could land outside the extraction directory."""
    if not name or "\x00" in name:
        return True
    posix = PurePosixPath(name.replace("\\", "/"))
    if posix.is_absolute() or PureWindowsPath(name).drive:
        return True
    return ".." in posix.parts


class ArchiveTransfer:
    """Streams snapshot versions out as ZIPs and installs uploaded ZIPs into the live store."""

    def __init__(self, settings: Settings, engine: BackupEngine):
        self._engine = engine
        self._files = CollectionFiles(settings)

    async def export_snapshot(self, version: str) -> SnapshotArchive:
        """Validate ``version`` now and return a lazily generated archive.

        Raises EntityNotFoundError for an unknown or unsafe version name.
        """
        files = await self._engine.snapshot_files(version)
        _log.step_start(MaintenanceStage.EXPORT, f"Streaming {version}.zip", files=len(files))
        return SnapshotArchive(filename=f"{version}.zip", chunks=_stream_zip(files))

    async def import_archive(self, content: bytes) -> ImportResult:
        """Install the collection files of an uploaded ZIP into the live store.

        The whole archive is refused if any entry name is unsafe. Protected,
        hidden, nested and non-collection entries are skipped. The in-memory
        store cache is stale afterwards; callers must refresh it.
        """
        work_dir = Path(tempfile.mkdtemp(prefix="shopfloor-import-"))
        archive_path = work_dir / "upload.zip"
        try:
            async with aiofiles.open(archive_path, "wb") as f:
                await f.write(content)

            accepted, skipped = await asyncio.to_thread(self._plan_import, archive_path)

            async with self._engine.lock:
                with _log.timed_step(MaintenanceStage.IMPORT, "Restoring from uploaded archive"):
                    extracted = await asyncio.to_thread(
                        self._extract, archive_path, accepted, work_dir / "entries"
                    )
                    await self._engine.install_live_files(extracted)
        except OSError as exc:
            raise MaintenanceError("Import") from exc
        finally:
            await asyncio.to_thread(shutil.rmtree, work_dir, True)

        for name in skipped:
            _log.warning(f"Skipped archive entry: {name}")
        return ImportResult(files_restored=sorted(extracted), skipped=skipped)

    def _plan_import(self, archive_path: Path) -> tuple[list[str], list[str]]:
        try:
            with zipfile.ZipFile(archive_path) as archive:
                entries = archive.infolist()
        except zipfile.BadZipFile as exc:
            raise InvalidArchiveError("Uploaded file is not a valid ZIP archive") from exc

        unsafe = [entry.filename for entry in entries if is_unsafe_entry(entry.filename)]
        if unsafe:
            _log.step_error(MaintenanceStage.IMPORT, f"Rejected archive with unsafe entries: {unsafe}")
            raise InvalidArchiveError(f"Archive entry escapes the store directory: {unsafe[0]}")

        accepted: list[str] = []
        skipped: list[str] = []
        for entry in entries:
            name = entry.filename
            if (
                entry.is_dir()
                or not self._files.is_collection_file(name)
                or self._files.is_protected(name)
            ):
                skipped.append(name)
            else:
                accepted.append(name)
        return accepted, skipped

    @staticmethod
    def _extract(archive_path: Path, names: list[str], target_dir: Path) -> dict[str, Path]:
        target_dir.mkdir()
        extracted: dict[str, Path] = {}
        with zipfile.ZipFile(archive_path) as archive:
            for name in names:
                destination = target_dir / name
                try:
                    with archive.open(name) as source, destination.open("wb") as target:
                        shutil.copyfileobj(source, target, _CHUNK_SIZE)
                except (zipfile.BadZipFile, zlib.error) as exc:
                    logger.warning("Corrupt archive entry %s: %s", name, exc)
                    raise InvalidArchiveError(f"Archive entry is corrupt: {name}") from exc
                extracted[name] = destination
        return extracted
