"""Composition root — builds every service once per application instance."""

import logging
from dataclasses import dataclass, field

from shopfloor.application.interfaces import ProcessRestarter
from shopfloor.application.services import (
    AccessGuard,
    ActivityLogService,
    ArchiveTransfer,
    AuthService,
    BackupEngine,
    CollectionService,
    DatabaseInspector,
    LiveStoreRefresher,
)
from shopfloor.config import Settings
from shopfloor.domain.exceptions import MaintenanceError
from shopfloor.infrastructure.lifecycle import SignalProcessRestarter
from shopfloor.infrastructure.security import BcryptPasswordHasher, SharedSecretAccessPolicy
from shopfloor.infrastructure.storage import (
    DocumentActivityLogRepository,
    DocumentStoreRegistry,
    DocumentUserRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Everything the API layer needs, wired to one Settings instance."""

    settings: Settings
    registry: DocumentStoreRegistry
    engine: BackupEngine
    archives: ArchiveTransfer
    guard: AccessGuard
    inspector: DatabaseInspector
    auth: AuthService
    activity_log: ActivityLogService
    refresher: LiveStoreRefresher
    restarter: ProcessRestarter
    collections: dict[str, CollectionService] = field(default_factory=dict)

    async def startup(self) -> None:
        """Load the live store, then take the boot snapshot.

        A failed boot snapshot is logged and the server starts anyway.
        """
        await self.registry.load_all()
        if not self.settings.backup_on_startup:
            return
        try:
            result = await self.engine.create_snapshot()
            logger.info(
                "Startup snapshot %s (%d versions kept)", result.version_name, result.total_kept
            )
        except MaintenanceError:
            logger.exception("Startup backup failed, but server will proceed")


def build_container(
    settings: Settings,
    restarter: ProcessRestarter | None = None,
) -> ServiceContainer:
    registry = DocumentStoreRegistry(settings)
    engine = BackupEngine(settings, registry)
    guard = AccessGuard(SharedSecretAccessPolicy.from_settings(settings))

    if restarter is None:
        restarter = SignalProcessRestarter(delay_seconds=settings.restart_delay_seconds)

    return ServiceContainer(
        settings=settings,
        registry=registry,
        engine=engine,
        archives=ArchiveTransfer(settings, engine),
        guard=guard,
        inspector=DatabaseInspector(settings),
        auth=AuthService(
            users=DocumentUserRepository(registry.get(settings.users_collection)),
            hasher=BcryptPasswordHasher(rounds=settings.bcrypt_rounds),
            guard=guard,
        ),
        activity_log=ActivityLogService(
            DocumentActivityLogRepository(registry.get(settings.logs_collection))
        ),
        refresher=LiveStoreRefresher(
            mode=settings.refresh_mode,
            reload_stores=registry.reload_all,
            restarter=restarter,
        ),
        restarter=restarter,
        collections={
            name: CollectionService(registry.get(name))
            for name in settings.resource_collections
        },
    )
