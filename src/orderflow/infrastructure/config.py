"""Runtime settings, read from ``ORDERFLOW_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
DATA_DIR = Path(__file__).resolve().parents[3] / "data"

DEFAULT_DATABASE_URL = f"sqlite:///{DATA_DIR / 'orderflow.db'}"


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    log_level: str = "INFO"
    admin_role_id: int = 1
    sql_echo: bool = False

    @staticmethod
    def from_env() -> Settings:
        return Settings(
            database_url=os.environ.get("ORDERFLOW_DATABASE_URL", DEFAULT_DATABASE_URL),
            log_level=os.environ.get("ORDERFLOW_LOG_LEVEL", "INFO").upper(),
            admin_role_id=int(os.environ.get("ORDERFLOW_ADMIN_ROLE_ID", "1")),
            sql_echo=_env_flag("ORDERFLOW_SQL_ECHO"),
        )

    @property
    def uses_default_database(self) -> bool:
        return self.database_url == DEFAULT_DATABASE_URL
