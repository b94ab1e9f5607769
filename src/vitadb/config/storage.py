"""Location of the catalog database."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

DEFAULT_DB_FILENAME: Final[str] = "vitadb.db"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def default_data_dir() -> Path:
    """``$VITADB_DATA_DIR``, else the per-user data directory of the platform."""

    override = optional_env_var("VITADB_DATA_DIR")
    if override is not None:
        return Path(override).expanduser().resolve()
    if os.name == "nt":
        root = optional_env_var("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
    else:
        root = optional_env_var("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return (Path(root) / "vitadb").expanduser().resolve()


def get_database_config(*, data_dir: Path | None = None) -> DatabaseConfig:
    """``$DATABASE_URI`` wins; otherwise a SQLite file inside the data directory."""

    uri = optional_env_var("DATABASE_URI")
    if uri is not None:
        return DatabaseConfig(uri=uri)
    directory = data_dir or default_data_dir()
    directory.mkdir(parents=True, exist_ok=True)
    return DatabaseConfig(uri=f"sqlite+pysqlite:///{directory / DEFAULT_DB_FILENAME}")
