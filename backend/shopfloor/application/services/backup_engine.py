"""Backup engine — versioned snapshots of the live store, with rotation.

Snapshot layout:
    <backup_dir>/<prefix><NNN>/<collection>.db

The next version number is ``max(existing) + 1``, found by scanning the
directory names; there is no stored counter. Numbers are zero-padded to
three digits and simply widen past 999 (``DB_v1000``).

Every operation that changes the backup root or overwrites the live store
runs under one ``asyncio.Lock``. Protected collections never enter a
snapshot, a listing, an inspection or a restore.
"""

import asyncio
import logging
import os
import re
import shutil
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

import aiofiles
import aiofiles.os

from shopfloor.application.interfaces import DocumentStore
from shopfloor.application.services.collection_files import CollectionFiles
from shopfloor.config import Settings
from shopfloor.domain.entities import (
    BackupVersion,
    CollectionFileContents,
    RestoreResult,
    SnapshotResult,
)
from shopfloor.domain.exceptions import (
    EntityNotFoundError,
    MaintenanceError,
    ProtectedResourceError,
)
from shopfloor.domain.record_lines import parse_collection_text
from shopfloor.infrastructure.logging.colored_logger import MaintenanceLogger, MaintenanceStage

logger = logging.getLogger(__name__)
_log = MaintenanceLogger("Maintenance")


class BackupEngine:
    """Creates, lists, inspects, restores and prunes snapshot versions.

    The engine is the only component that writes inside the backup root.
    """

    def __init__(self, settings: Settings, stores: Iterable[DocumentStore]):
        self._storage_dir = Path(settings.storage_dir)
        self._backup_dir = Path(settings.backup_dir)
        self._prefix = settings.backup_prefix
        self._max_backups = settings.max_backups
        self._stores = stores
        self._files = CollectionFiles(settings)
        self._version_pattern = re.compile(re.escape(self._prefix) + r"(\d+)")
        self._lock = asyncio.Lock()

    @property
    def lock(self) -> asyncio.Lock:
        """Mutual-exclusion region for anything touching the backup root or live files."""
        return self._lock

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def max_backups(self) -> int:
        return self._max_backups

    # ── Version naming ──────────────────────────────────────────────

    def parse_version(self, name: str) -> int | None:
        """Version number of ``name``, or None unless it is prefix + digits."""
        match = self._version_pattern.fullmatch(name)
        return int(match.group(1)) if match else None

    def format_version(self, number: int) -> str:
        return f"{self._prefix}{number:03d}"

    async def _scan_versions(self, directories_only: bool = True) -> list[tuple[int, str]]:
        """Versions in the backup root, highest number first."""
        if not await aiofiles.os.path.isdir(self._backup_dir):
            return []

        versions: list[tuple[int, str]] = []
        for name in await aiofiles.os.listdir(self._backup_dir):
            number = self.parse_version(name)
            if number is None:
                continue
            if directories_only and not await aiofiles.os.path.isdir(self._backup_dir / name):
                continue
            versions.append((number, name))

        versions.sort(reverse=True)
        return versions

    async def _version_dir(self, version: str) -> Path:
        """Resolve a caller-supplied version name, refusing anything outside the root."""
        if not self._files.is_plain_name(version) or not version.startswith(self._prefix):
            raise EntityNotFoundError("Backup version", version)
        path = self._backup_dir / version
        if not await aiofiles.os.path.isdir(path):
            raise EntityNotFoundError("Backup version", version)
        return path

    # ── Snapshot + rotation ─────────────────────────────────────────

    async def create_snapshot(self) -> SnapshotResult:
        """Copy every unprotected collection file into a new version, then rotate.

        Raises MaintenanceError when scanning, copying or deleting fails.
        """
        async with self._lock:
            try:
                with _log.timed_step(MaintenanceStage.SNAPSHOT, "Backup sequence"):
                    return await self._create_snapshot_unlocked()
            except OSError as exc:
                raise MaintenanceError("Snapshot") from exc

    async def _create_snapshot_unlocked(self) -> SnapshotResult:
        if not await aiofiles.os.path.isdir(self._backup_dir):
            await aiofiles.os.makedirs(self._backup_dir, exist_ok=True)
            _log.detail(f"Created root backup directory: {self._backup_dir}")

        existing = await self._scan_versions(directories_only=False)
        next_number = existing[0][0] + 1 if existing else 1
        version_name = self.format_version(next_number)

        # Filled under a hidden name and renamed into place, so a failed
        # copy never leaves a half-written version behind.
        staging = self._backup_dir / f".{version_name}.partial"
        if await aiofiles.os.path.exists(staging):
            await asyncio.to_thread(shutil.rmtree, staging)
        await aiofiles.os.makedirs(staging)

        try:
            copied = await self._copy_collections(staging)
            await aiofiles.os.rename(staging, self._backup_dir / version_name)
        except BaseException:
            await asyncio.to_thread(shutil.rmtree, staging, True)
            raise

        _log.step_complete(
            MaintenanceStage.SNAPSHOT,
            f"Successfully archived to: {version_name}",
            files=len(copied),
        )

        retained, purged = await self._rotate()
        return SnapshotResult(
            version_name=version_name,
            total_kept=len(retained),
            active_versions=retained,
            files_copied=copied,
            purged_versions=purged,
        )

    async def _copy_collections(self, target: Path) -> list[str]:
        """Copy the unprotected collection files that exist; copies run concurrently."""
        names: list[str] = []
        for collection in self._files.unprotected_collections():
            file_name = self._files.file_name(collection)
            if await aiofiles.os.path.isfile(self._storage_dir / file_name):
                names.append(file_name)

        await asyncio.gather(
            *(
                asyncio.to_thread(shutil.copy2, self._storage_dir / name, target / name)
                for name in names
            )
        )
        return names

    async def _rotate(self) -> tuple[list[str], list[str]]:
        """Keep the ``max_backups`` highest-numbered versions, delete the rest."""
        versions = await self._scan_versions()
        retained = [name for _, name in versions[: self._max_backups]]
        purged = [name for _, name in versions[self._max_backups :]]

        for name in purged:
            await asyncio.to_thread(shutil.rmtree, self._backup_dir / name)
            _log.step_complete(MaintenanceStage.ROTATION, f"Purged old version: {name}")

        return retained, purged

    # ── Listing & inspection ────────────────────────────────────────

    async def list_snapshots(self) -> list[BackupVersion]:
        """Every version, highest number first. Empty if the root does not exist."""
        try:
            versions = await self._scan_versions()
            described = await asyncio.gather(
                *(self._describe(number, name) for number, name in versions)
            )
        except OSError as exc:
            logger.exception("Listing snapshots failed")
            raise MaintenanceError("Listing snapshots") from exc
        return [version for version in described if version is not None]

    async def _describe(self, number: int, name: str) -> BackupVersion | None:
        path = self._backup_dir / name
        try:
            dir_stat = await aiofiles.os.stat(path)
            files = sorted(
                f
                for f in await aiofiles.os.listdir(path)
                if self._files.is_plain_name(f) and not self._files.is_protected(f)
            )
            file_stats = await asyncio.gather(*(aiofiles.os.stat(path / f) for f in files))
        except FileNotFoundError:
            # Pruned while we were listing
            return None

        return BackupVersion(
            version_name=name,
            version_number=number,
            created_at=datetime.fromtimestamp(dir_stat.st_mtime, tz=timezone.utc),
            files=files,
            size_bytes=sum(s.st_size for s in file_stats),
        )

    async def snapshot_files(self, version: str) -> list[Path]:
        """Paths of the unprotected files in ``version``, sorted by name."""
        version_dir = await self._version_dir(version)
        files: list[Path] = []
        for name in sorted(await aiofiles.os.listdir(version_dir)):
            if not self._files.is_plain_name(name) or self._files.is_protected(name):
                continue
            if await aiofiles.os.path.isfile(version_dir / name):
                files.append(version_dir / name)
        return files

    async def inspect_snapshot_file(self, version: str, file_name: str) -> CollectionFileContents:
        """Parsed records of one collection file inside one version.

        Protected names are refused before anything touches the disk.
        """
        if self._files.is_protected(file_name):
            raise ProtectedResourceError(file_name)

        version_dir = await self._version_dir(version)
        if not self._files.is_plain_name(file_name):
            raise EntityNotFoundError("Backup file", file_name)

        path = version_dir / file_name
        if not await aiofiles.os.path.isfile(path):
            raise EntityNotFoundError("Backup file", f"{version}/{file_name}")

        try:
            async with aiofiles.open(path, "r", encoding="utf-8", errors="replace") as f:
                text = await f.read()
        except OSError as exc:
            logger.exception("Reading %s failed", path)
            raise MaintenanceError("Reading backup file") from exc

        records = parse_collection_text(text)
        return CollectionFileContents(
            file_name=file_name,
            records=records,
            total_lines=len(records),
            showing_last=len(records),
        )

    # ── Restore / reset / prune ─────────────────────────────────────

    async def restore_snapshot(self, version: str) -> RestoreResult:
        """Copy every unprotected collection file of ``version`` over the live store.

        The in-memory store cache is stale afterwards; callers must refresh it.
        """
        async with self._lock:
            source_dir = await self._version_dir(version)
            try:
                with _log.timed_step(MaintenanceStage.RESTORE, f"Rolling back to {version}"):
                    names = sorted(
                        name
                        for name in await aiofiles.os.listdir(source_dir)
                        if self._files.is_collection_file(name)
                        and not self._files.is_protected(name)
                    )
                    await self.install_live_files({name: source_dir / name for name in names})
            except OSError as exc:
                raise MaintenanceError("Restore") from exc

        return RestoreResult(version_name=version, files_restored=names)

    async def install_live_files(self, sources: dict[str, Path]) -> None:
        """Overwrite live collection files with ``sources`` (live name → source path).

        Every source is first copied next to its target under a hidden name;
        only when all copies succeeded are they swapped in with ``os.replace``.
        The caller must hold :attr:`lock`.
        """
        staged: list[tuple[Path, Path]] = []
        try:
            for name, source in sources.items():
                if self._files.is_protected(name) or not self._files.is_collection_file(name):
                    raise ValueError(f"Refusing to install {name!r} into the live store")
                target = self._storage_dir / name
                incoming = self._storage_dir / f".{name}.incoming"
                await asyncio.to_thread(shutil.copyfile, source, incoming)
                staged.append((incoming, target))
        except BaseException:
            for incoming, _ in staged:
                incoming.unlink(missing_ok=True)
            raise

        for incoming, target in staged:
            os.replace(incoming, target)
            _log.detail(f"Restored {target.name}")

    async def factory_reset(self) -> int:
        """Empty every unprotected collection in place. Returns how many were cleared."""
        cleared = 0
        async with self._lock:
            try:
                with _log.timed_step(MaintenanceStage.RESET, "Factory reset"):
                    for store in self._stores:
                        if self._files.is_protected(store.name):
                            continue
                        await store.truncate()
                        cleared += 1
            except OSError as exc:
                raise MaintenanceError("Factory reset") from exc
        return cleared

    async def prune_snapshot(self, version: str) -> None:
        """Delete one version. Anything not a prefixed directory in the root is NotFound."""
        async with self._lock:
            path = await self._version_dir(version)
            try:
                await asyncio.to_thread(shutil.rmtree, path)
            except OSError as exc:
                _log.step_error(MaintenanceStage.ROTATION, f"Delete of {version} failed", exc)
                raise MaintenanceError("Delete") from exc
        _log.step_complete(MaintenanceStage.ROTATION, f"Version {version} purged")
