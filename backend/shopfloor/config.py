from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings
from functools import lru_cache

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Frozen once constructed: components receive the instance at
    construction time and never read configuration from module scope.
    """

    app_title: str = "Shopfloor API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["*"]

    # Live store & snapshots
    storage_dir: Path = Path("database")
    backup_dir: Path = Path("backups")
    backup_prefix: str = Field("DB_v", min_length=1)
    max_backups: int = Field(3, ge=1)
    store_extension: str = ".db"
    collections: tuple[str, ...] = (
        "fabricators",
        "pallets",
        "drawings",
        "jobs",
        "cart",
        "application",
        "logs",
    )
    resource_collections: tuple[str, ...] = (
        "fabricators",
        "pallets",
        "drawings",
        "jobs",
        "cart",
    )
    protected_collections: tuple[str, ...] = ("application",)
    users_collection: str = "application"
    logs_collection: str = "logs"
    backup_on_startup: bool = True
    inspect_record_limit: int = Field(1000, ge=1)
    # Periodic compaction of the live collection files; 0 disables it
    compaction_interval_seconds: float = Field(24 * 60 * 60, ge=0)

    # Restore / import refresh of the in-memory store cache
    refresh_mode: Literal["restart", "reload"] = "restart"
    restart_delay_seconds: float = Field(1.0, ge=0)
    shutdown_on_unexpected_error: bool = True

    # Access keys. An empty key denies every request for its scope
    master_setup_key: str = ""
    admin_key: str = ""
    bcrypt_rounds: int = Field(10, ge=4, le=31)

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_storage: str = "INFO"          # Document store adapters
    log_level_maintenance: str = "INFO"      # Backup engine / archive transfer
    log_level_http: str = "WARNING"          # httpx / httpcore (test clients)
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
        "frozen": True,
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
