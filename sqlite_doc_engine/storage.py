from __future__ import annotations
import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence

from .errors import StorageError

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"

# Two-column collection table; AUTOINCREMENT keeps ids from being reused
COLLECTION_DDL = """
CREATE TABLE IF NOT EXISTS "{name}" (
    id   INTEGER PRIMARY KEY AUTOINCREMENT,
    data TEXT NOT NULL
)"""


@contextmanager
def _translate_errors(what: str) -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as e:
        raise StorageError(f"{what}: {e}") from e


@dataclass(frozen=True)
class RunResult:
    last_insert_id: int
    changes: int


class Statement:
    """A prepared SQL text bound to a storage handle."""

    def __init__(self, storage: "SQLiteStorage", sql: str) -> None:
        self._storage = storage
        self.sql = sql

    def run(self, params: Sequence[Any] = ()) -> RunResult:
        conn = self._storage.connection()
        with _translate_errors("run failed"):
            try:
                cur = conn.execute(self.sql, tuple(params))
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise
        return RunResult(last_insert_id=cur.lastrowid or 0, changes=cur.rowcount)

    def all(self, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        conn = self._storage.connection()
        with _translate_errors("query failed"):
            rows = conn.execute(self.sql, tuple(params)).fetchall()
        return [dict(r) for r in rows]


class SQLiteStorage:
    """
    Thin SQLite handle: execute DDL, prepare statements, run/all them.
    Every sqlite3.Error leaves this class as StorageError.
    """

    def __init__(self, path: str | Path = MEMORY_PATH, journal_mode: Optional[str] = None) -> None:
        self.path = str(path)
        self.journal_mode = journal_mode
        self._conn: Optional[sqlite3.Connection] = None
        self._closed = False

    @classmethod
    def open(cls, path: str | Path, journal_mode: Optional[str] = None) -> "SQLiteStorage":
        storage = cls(path, journal_mode=journal_mode)
        storage.connection()
        return storage

    @property
    def is_memory(self) -> bool:
        return self.path == MEMORY_PATH

    @property
    def closed(self) -> bool:
        return self._closed

    def connection(self) -> sqlite3.Connection:
        if self._closed:
            raise StorageError(f"storage is closed: {self.path}")
        if self._conn is None:
            if not self.is_memory:
                Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            with _translate_errors(f"cannot open {self.path}"):
                conn = sqlite3.connect(self.path, check_same_thread=False)
                conn.row_factory = sqlite3.Row
                if self.journal_mode and not self.is_memory:
                    conn.execute(f"PRAGMA journal_mode = {self.journal_mode}")
            self._conn = conn
            logger.debug("opened sqlite storage at %s", self.path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        self._closed = True

    def __enter__(self) -> "SQLiteStorage":
        self.connection()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def execute(self, ddl: str) -> None:
        conn = self.connection()
        with _translate_errors("execute failed"):
            conn.executescript(ddl)
            conn.commit()

    def prepare(self, sql: str) -> Statement:
        return Statement(self, sql)

    def ensure_collection(self, name: str) -> None:
        self.execute(COLLECTION_DDL.format(name=name))

    def table_names(self) -> List[str]:
        rows = self.prepare(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        ).all()
        return [r["name"] for r in rows]
