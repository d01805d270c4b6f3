from __future__ import annotations
from typing import Any, Callable, Dict, Mapping, Optional, Union

Predicate = Callable[[Any], bool]
QueryConditions = Mapping[str, Union[Any, Predicate]]


def strict_equals(a: Any, b: Any) -> bool:
    """
    Equality without cross-type coercion: a bool never equals a number,
    ints and floats compare numerically, containers compare element-wise.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return len(a) == len(b) and all(strict_equals(x, y) for x, y in zip(a, b))
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        if a.keys() != b.keys():
            return False
        return all(strict_equals(a[k], b[k]) for k in a)
    if type(a) is not type(b) and not (isinstance(a, type(b)) or isinstance(b, type(a))):
        return False
    return a == b


def matches(record: Mapping[str, Any], conditions: Optional[QueryConditions]) -> bool:
    """
    AND over every condition key. A callable condition is called with the
    field value; anything else must be strictly equal.

    Absent fields read as None, and predicates receive that None too, so a
    predicate over an optional field must handle it (``lambda v: v is not
    None and v > 18``). Whatever a predicate raises propagates to the caller.
    """
    if not conditions:
        return True
    for key, cond in conditions.items():
        value = record.get(key)
        if callable(cond):
            if not cond(value):
                return False
        elif not strict_equals(cond, value):
            return False
    return True


def describe(conditions: Optional[QueryConditions]) -> Dict[str, str]:
    """Loggable view of a conditions mapping (predicates shown by name)."""
    out: Dict[str, str] = {}
    for key, cond in (conditions or {}).items():
        if callable(cond):
            out[key] = f"<{getattr(cond, '__name__', 'predicate')}>"
        else:
            out[key] = repr(cond)
    return out
