from __future__ import annotations
import logging
import re
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .errors import ConfigError
from .progress import Progress, ProgressCallback
from .query import QueryConditions, describe, matches
from .record import DocRecord
from .schema import Schema
from .storage import SQLiteStorage
from .utils import canonical_json, parse_json_object

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def check_collection_name(name: Any) -> str:
    if not name or not isinstance(name, str):
        raise ConfigError("collection name and schema are required")
    if not _NAME_RE.match(name) or name.lower().startswith("sqlite_"):
        raise ConfigError(f"invalid collection name: {name!r}")
    return name


class Model:
    """
    A schema-bound collection stored as one table of (id, JSON data) rows.

    Every lookup is a full scan of the table in id order; there are no
    secondary indexes, so cost grows linearly with collection size.
    """

    def __init__(
        self,
        name: str,
        schema: Schema | Mapping[str, Any],
        storage: SQLiteStorage,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        name = check_collection_name(name)
        if schema is None:
            raise ConfigError("collection name and schema are required")
        self.name = name
        self.schema = schema if isinstance(schema, Schema) else Schema(schema)
        self._storage = storage
        self._progress = Progress(on_progress)
        storage.ensure_collection(name)
        self._insert = storage.prepare(f'INSERT INTO "{name}" (data) VALUES (?)')
        self._select_all = storage.prepare(f'SELECT id, data FROM "{name}" ORDER BY id')
        self._select_one = storage.prepare(f'SELECT id, data FROM "{name}" WHERE id = ?')
        self._update = storage.prepare(f'UPDATE "{name}" SET data = ? WHERE id = ?')
        self._delete = storage.prepare(f'DELETE FROM "{name}" WHERE id = ?')
        logger.info("collection %r ready", name)

    def __repr__(self) -> str:
        return f"Model({self.name!r})"

    # ----- row helpers -----

    def _load(self, data_text: str) -> Dict[str, Any]:
        return self.schema.decode(parse_json_object(data_text))

    def _scan(self) -> Iterator[Tuple[int, Dict[str, Any]]]:
        for row in self._select_all.all():
            yield row["id"], self._load(row["data"])

    def _write_row(self, rec_id: int, data: Mapping[str, Any]) -> int:
        res = self._update.run((canonical_json(dict(data)), rec_id))
        logger.debug("%s#%s written (%d row)", self.name, rec_id, res.changes)
        return res.changes

    def _delete_row(self, rec_id: int) -> int:
        res = self._delete.run((rec_id,))
        logger.debug("%s#%s deleted (%d row)", self.name, rec_id, res.changes)
        return res.changes

    # ----- CRUD -----

    def create(self, data: Mapping[str, Any]) -> DocRecord:
        doc = self.schema.apply_defaults(data)
        self.schema.validate(doc, True)
        text = canonical_json(doc)
        res = self._insert.run((text,))
        logger.debug("%s#%s created", self.name, res.last_insert_id)
        return DocRecord(self, res.last_insert_id, doc)

    def get(self, rec_id: int) -> Optional[DocRecord]:
        rows = self._select_one.all((rec_id,))
        if not rows:
            return None
        return DocRecord(self, rows[0]["id"], self._load(rows[0]["data"]))

    def find_one(self, conditions: Optional[QueryConditions] = None) -> Optional[DocRecord]:
        for rec_id, obj in self._scan():
            if matches(obj, conditions):
                return DocRecord(self, rec_id, obj)
        return None

    def find_all(self, conditions: Optional[QueryConditions] = None) -> List[DocRecord]:
        return [DocRecord(self, rec_id, obj) for rec_id, obj in self._scan() if matches(obj, conditions)]

    def find(self) -> List[DocRecord]:
        return [DocRecord(self, rec_id, obj) for rec_id, obj in self._scan()]

    def count(self, conditions: Optional[QueryConditions] = None) -> int:
        return sum(1 for _, obj in self._scan() if matches(obj, conditions))

    def update(self, conditions: Optional[QueryConditions], data: Mapping[str, Any]) -> int:
        """
        Shallow-merge data into every matching row, writing each by id.
        Rows are committed one by one; a storage error aborts the call and
        leaves earlier rows written.
        """
        self.schema.validate(data, False)
        rows = list(self._scan())
        total = len(rows)
        self._progress.begin("update", f"{self.name}: scanning {total} rows")
        n = 0
        for i, (rec_id, obj) in enumerate(rows, 1):
            if matches(obj, conditions):
                obj.update(data)
                self._write_row(rec_id, obj)
                n += 1
            self._progress.tick("update.scan", i, total)
        self._progress.finish("update", f"{self.name}: {n} updated")
        logger.info("%s: updated %d row(s) where %s", self.name, n, describe(conditions))
        return n

    def delete(self, conditions: Optional[QueryConditions]) -> int:
        rows = list(self._scan())
        total = len(rows)
        self._progress.begin("delete", f"{self.name}: scanning {total} rows")
        n = 0
        for i, (rec_id, obj) in enumerate(rows, 1):
            if matches(obj, conditions):
                self._delete_row(rec_id)
                n += 1
            self._progress.tick("delete.scan", i, total)
        self._progress.finish("delete", f"{self.name}: {n} deleted")
        logger.info("%s: deleted %d row(s) where %s", self.name, n, describe(conditions))
        return n
