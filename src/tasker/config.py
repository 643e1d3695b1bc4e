# src/tasker/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Only diagnostics are configurable. The task database location is fixed:
`tasks.db` in the current working directory.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKER"
APP_NAME = "tasker"
DB_PATH = Path("tasks.db")
DEFAULT_LOG_LEVEL = "WARNING"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_path(name: str) -> Path | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    app_name: str
    db_path: Path

    # ---- logging ----
    log_level: str
    log_file: Path | None

    @property
    def console_level(self) -> int:
        """Numeric level for log_level; unknown names fall back to WARNING."""
        level = logging.getLevelName(self.log_level.strip().upper())
        return level if isinstance(level, int) else logging.WARNING

    @staticmethod
    def from_env() -> Settings:
        return Settings(
            app_name=APP_NAME,
            db_path=DB_PATH,
            log_level=_env(_k("LOG_LEVEL"), DEFAULT_LOG_LEVEL),
            log_file=_env_path(_k("LOG_FILE")),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
