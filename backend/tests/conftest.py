"""Shared fixtures: isolated storage/backup directories per test."""

from collections.abc import Callable
from pathlib import Path

import pytest

from shopfloor.config import Settings
from shopfloor.infrastructure.storage import DocumentStoreRegistry

ADMIN_KEY = "admin-test-key"
SETUP_KEY = "setup-test-key"


@pytest.fixture
def settings_factory(tmp_path: Path) -> Callable[..., Settings]:
    """Build Settings rooted in the test's tmp_path, with keyword overrides."""

    def make(**overrides) -> Settings:
        values = {
            "storage_dir": tmp_path / "database",
            "backup_dir": tmp_path / "backups",
            "master_setup_key": SETUP_KEY,
            "admin_key": ADMIN_KEY,
            "bcrypt_rounds": 4,
            "backup_on_startup": False,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return make


@pytest.fixture
def settings(settings_factory) -> Settings:
    return settings_factory()


@pytest.fixture
async def registry(settings: Settings) -> DocumentStoreRegistry:
    registry = DocumentStoreRegistry(settings)
    await registry.load_all()
    return registry
