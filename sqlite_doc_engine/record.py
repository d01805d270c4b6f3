from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Any, Dict

from .errors import RecordNotFoundError

if TYPE_CHECKING:
    from .model import Model

logger = logging.getLogger(__name__)


class DocRecord(dict):
    """
    Dict-like record bound to a collection row id.
    Field changes stay in memory until save().
    """
    __slots__ = ("_model", "_id", "_deleted")

    def __init__(self, model: "Model", rec_id: int, data: Dict[str, Any]) -> None:
        super().__init__(data)
        self._model = model
        self._id = rec_id
        self._deleted = False

    @property
    def id(self) -> int:
        return self._id

    @property
    def deleted(self) -> bool:
        return self._deleted

    @property
    def collection(self) -> str:
        return self._model.name

    def __repr__(self) -> str:
        return f"DocRecord({self._model.name}#{self._id}, {dict.__repr__(self)})"

    def to_dict(self) -> Dict[str, Any]:
        return dict(self)

    def save(self) -> None:
        """Overwrite the stored row with the current fields. No validation."""
        if self._deleted:
            logger.warning("save() on deleted record %s#%s ignored", self._model.name, self._id)
        # UPDATE by id: an absent row makes this a no-op
        self._model._write_row(self._id, self)

    def delete(self) -> None:
        self._model._delete_row(self._id)
        self._deleted = True

    def reload(self) -> None:
        fresh = self._model.get(self._id)
        if fresh is None:
            raise RecordNotFoundError(f"{self._model.name}#{self._id} no longer exists")
        super().clear()
        super().update(fresh)
        self._deleted = False
