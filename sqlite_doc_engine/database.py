from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .config import Settings, get_settings
from .errors import ConfigError
from .model import Model, check_collection_name
from .progress import ProgressCallback
from .schema import Schema
from .storage import SQLiteStorage

logger = logging.getLogger(__name__)


class Database:
    """
    Owns one SQLite handle and the models registered on it.

        db = Database("app.sqlite")
        User = db.model("User", Schema({"name": {"type": "text", "required": True}}))
        User.create({"name": "John"})
    """

    def __init__(
        self,
        path: Optional[str | Path] = None,
        *,
        settings: Optional[Settings] = None,
        storage: Optional[SQLiteStorage] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self._settings = settings or get_settings()
        if storage is None:
            storage = SQLiteStorage(
                path if path is not None else self._settings.db_path,
                journal_mode=self._settings.journal_mode,
            )
        self._storage = storage
        self.path = storage.path
        self._on_progress = on_progress
        self._models: Dict[str, Model] = {}

    @property
    def storage(self) -> SQLiteStorage:
        return self._storage

    def model(self, name: str, schema: Schema | Mapping[str, Any]) -> Model:
        """
        Register (or re-register) a collection. The backing table is created
        only if absent, so existing rows are kept.

        SQLite table names are case-insensitive, so a name that differs from
        an existing collection only by case is rejected.
        """
        check_collection_name(name)
        if schema is None:
            raise ConfigError("collection name and schema are required")
        for existing in self._storage.table_names():
            if existing.lower() == name.lower() and existing != name:
                raise ConfigError(f"collection {name!r} clashes with existing collection {existing!r}")
        m = Model(name, schema, self._storage, on_progress=self._on_progress)
        self._models[name] = m
        return m

    def __getitem__(self, name: str) -> Model:
        try:
            return self._models[name]
        except KeyError:
            raise KeyError(f"no model registered for collection {name!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def collections(self) -> List[str]:
        """Tables present in the database file, registered here or not."""
        return self._storage.table_names()

    def close(self) -> None:
        self._storage.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


_default_db: Optional[Database] = None


def get_default_database() -> Database:
    """Return (and lazily create) the module-level Database from settings."""
    global _default_db
    if _default_db is None:
        _default_db = Database()
        logger.info("default database at %s", _default_db.path)
    return _default_db


def reset_default_database() -> None:
    """Close and discard the default Database (useful in tests)."""
    global _default_db
    if _default_db is not None:
        _default_db.close()
        _default_db = None


def model(name: str, schema: Schema | Mapping[str, Any]) -> Model:
    return get_default_database().model(name, schema)
