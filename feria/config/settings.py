"""
Settings for the fair backend and its terminal, read from the environment
(and an optional ``.env`` file) by pydantic-settings.

Each concern has its own prefix: ``STORAGE_``, ``LEDGER_``, ``LIFECYCLE_``,
``API_``. Top-level keys (``ENVIRONMENT``, ``LOG_LEVEL``, ``LOG_JSON``) have
none.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where the SQLite store and the terminal's pending queue live."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "feria.db"

    pool_size: int = Field(default=5, ge=1)
    busy_timeout: int = 30000  # ms
    acquire_timeout: float = 10.0  # seconds

    # The queue may sit on a different volume than the database
    queue_dir: Path | None = None
    pending_queue_key: str = "pending_sales_orders"

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name

    @property
    def queue_path(self) -> Path:
        return (self.queue_dir or self.data_dir) / f"{self.pending_queue_key}.json"


class LedgerSettings(BaseSettings):
    """Terminal sale ledger."""

    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    start_online: bool = True
    temp_id_prefix: str = "temp-"
    # Stamped on sales when no authenticated operator is known
    default_operator: str = "offline_user"


class LifecycleSettings(BaseSettings):
    """Archive/activate batching."""

    model_config = SettingsConfigDict(env_prefix="LIFECYCLE_")

    # The document store accepts at most 400 writes per batch
    batch_size: int = Field(default=400, ge=1, le=400)


class APISettings(BaseSettings):
    """HTTP server."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """All settings; obtain through :func:`get_settings`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Feria TPV"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    # None picks JSON outside development
    log_json: bool | None = None

    storage: StorageSettings = Field(default_factory=StorageSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    lifecycle: LifecycleSettings = Field(default_factory=LifecycleSettings)
    api: APISettings = Field(default_factory=APISettings)

    @field_validator("storage", mode="before")
    @classmethod
    def create_storage_dirs(cls, v: Any) -> StorageSettings:
        storage = StorageSettings(**v) if isinstance(v, dict) else v or StorageSettings()
        for directory in {storage.data_dir, storage.queue_path.parent}:
            directory.mkdir(parents=True, exist_ok=True)
        return storage


_settings: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, created on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
