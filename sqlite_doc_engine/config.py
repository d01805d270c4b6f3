"""
Settings loader.
Reads DOCENGINE_* environment variables (a .env file in the working
directory is honored); validates values.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigError

JOURNAL_MODES = ("DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

DEFAULT_DB_PATH = "docengine.sqlite"


def _get(key: str, default: Optional[str] = None) -> Optional[str]:
    val = os.getenv(key)
    if val is None or val.strip() == "":
        return default
    return val.strip()


@dataclass(frozen=True)
class Settings:
    db_path: str = DEFAULT_DB_PATH
    journal_mode: str = "WAL"
    log_level: str = "WARNING"

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)


def get_settings(dotenv: bool = True) -> Settings:
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))
    journal_mode = (_get("DOCENGINE_JOURNAL_MODE", "WAL") or "WAL").upper()
    if journal_mode not in JOURNAL_MODES:
        raise ConfigError(
            f"DOCENGINE_JOURNAL_MODE must be one of {', '.join(JOURNAL_MODES)}, got {journal_mode!r}"
        )
    log_level = (_get("DOCENGINE_LOG_LEVEL", "WARNING") or "WARNING").upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(
            f"DOCENGINE_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}"
        )
    return Settings(
        db_path=_get("DOCENGINE_DB_PATH", DEFAULT_DB_PATH),  # type: ignore[arg-type]
        journal_mode=journal_mode,
        log_level=log_level,
    )
