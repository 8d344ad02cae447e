"""Where the branch store lives and how connections to it behave."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_float
from .errors import ConfigurationError

APP_DIR_NAME: Final[str] = "branchmerge"
DEFAULT_DB_FILENAME: Final[str] = "branchmerge.db"
DEFAULT_BUSY_TIMEOUT_SECONDS: Final[float] = 5.0


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Local data directory holding the default SQLite branch store."""

    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def database_path(self, *, ensure: bool = True) -> Path:
        data_dir = self.resolve_data_dir()
        if ensure:
            data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    # how long a SQLite connection waits on a concurrent merge holding the write lock
    busy_timeout_seconds: float = DEFAULT_BUSY_TIMEOUT_SECONDS


def _platform_data_home() -> Path:
    if os.name == "nt":
        local_app_data = os.getenv("LOCALAPPDATA")
        return Path(local_app_data) if local_app_data else Path.home() / "AppData" / "Local"
    xdg_data_home = os.getenv("XDG_DATA_HOME")
    return Path(xdg_data_home) if xdg_data_home else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("BRANCHMERGE_DATA_DIR")
    if env_dir:
        return StorageConfig(data_dir=Path(env_dir))
    return StorageConfig(data_dir=(_platform_data_home() / APP_DIR_NAME).expanduser().resolve())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """Resolve the store URI (``DATABASE_URI`` wins over the data directory)."""

    busy_timeout = optional_env_float("BRANCHMERGE_SQLITE_BUSY_TIMEOUT_SECONDS")
    if busy_timeout is None:
        busy_timeout = DEFAULT_BUSY_TIMEOUT_SECONDS
    elif busy_timeout < 0:
        raise ConfigurationError("BRANCHMERGE_SQLITE_BUSY_TIMEOUT_SECONDS must not be negative")

    uri = os.getenv("DATABASE_URI") or (storage or get_storage_config()).database_uri()
    return DatabaseConfig(uri=uri, busy_timeout_seconds=busy_timeout)
