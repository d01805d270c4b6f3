from __future__ import annotations
import json
from datetime import datetime
from typing import Any, Dict

from .errors import SerializationError


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, tuple):
        return list(value)
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def canonical_json(obj: Any) -> str:
    """
    Deterministic JSON text for a record: sorted keys, compact separators,
    datetimes as ISO-8601 strings.
    """
    try:
        return json.dumps(
            obj,
            ensure_ascii=False,
            sort_keys=True,
            separators=(",", ":"),
            default=_json_default,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise SerializationError(str(e)) from e


def parse_json_object(text: str) -> Dict[str, Any]:
    try:
        obj = json.loads(text)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"stored data is not valid JSON: {e}") from e
    if not isinstance(obj, dict):
        raise SerializationError("stored data is not a JSON object")
    return obj


def parse_iso(value: str) -> datetime:
    # fromisoformat() only learned the trailing "Z" in 3.11
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)
