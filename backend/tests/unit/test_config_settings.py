"""Unit tests for application settings configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from shopfloor.config import Settings


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized


def test_backup_defaults():
    settings = Settings(_env_file=None)
    assert settings.backup_prefix == "DB_v"
    assert settings.max_backups == 3
    assert settings.protected_collections == ("application",)
    assert settings.compaction_interval_seconds == 86400
    assert settings.refresh_mode == "restart"


def test_settings_are_frozen():
    settings = Settings(_env_file=None)
    with pytest.raises(ValidationError):
        settings.max_backups = 10


def test_max_backups_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, max_backups=0)


def test_empty_prefix_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, backup_prefix="")
