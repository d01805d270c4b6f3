from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .errors import MissingFieldError, SchemaDefinitionError, TypeMismatchError
from .utils import parse_iso


class FieldType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    LIST = "list"
    OBJECT = "object"


_TAG_ALIASES: Dict[str, FieldType] = {
    "text": FieldType.TEXT,
    "str": FieldType.TEXT,
    "string": FieldType.TEXT,
    "number": FieldType.NUMBER,
    "int": FieldType.NUMBER,
    "float": FieldType.NUMBER,
    "boolean": FieldType.BOOLEAN,
    "bool": FieldType.BOOLEAN,
    "timestamp": FieldType.TIMESTAMP,
    "datetime": FieldType.TIMESTAMP,
    "date": FieldType.TIMESTAMP,
    "list": FieldType.LIST,
    "array": FieldType.LIST,
    "object": FieldType.OBJECT,
    "dict": FieldType.OBJECT,
}

_PY_TYPES: Dict[type, FieldType] = {
    str: FieldType.TEXT,
    int: FieldType.NUMBER,
    float: FieldType.NUMBER,
    bool: FieldType.BOOLEAN,
    datetime: FieldType.TIMESTAMP,
    list: FieldType.LIST,
    tuple: FieldType.LIST,
    dict: FieldType.OBJECT,
}

_SPEC_KEYS = {"type", "required", "unique", "default", "fields", "items"}

_MISSING: Any = object()

ValidateHook = Callable[[Mapping[str, Any], bool], None]


def resolve_type(tag: Any) -> FieldType:
    if isinstance(tag, FieldType):
        return tag
    if isinstance(tag, str):
        ft = _TAG_ALIASES.get(tag.lower())
        if ft is None:
            raise SchemaDefinitionError(f"unknown type tag: {tag!r}")
        return ft
    if isinstance(tag, type) and tag in _PY_TYPES:
        return _PY_TYPES[tag]
    if isinstance(tag, Schema):
        return FieldType.OBJECT
    raise SchemaDefinitionError(f"unsupported field type: {tag!r}")


def _to_datetime(value: Any) -> Any:
    # strings that are not ISO timestamps are left as stored
    if not isinstance(value, str):
        return value
    try:
        return parse_iso(value)
    except ValueError:
        return value


def type_matches(ft: FieldType, value: Any) -> bool:
    if ft is FieldType.TEXT:
        return isinstance(value, str)
    if ft is FieldType.NUMBER:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if ft is FieldType.BOOLEAN:
        return isinstance(value, bool)
    if ft is FieldType.TIMESTAMP:
        return isinstance(value, datetime)
    if ft is FieldType.LIST:
        return isinstance(value, (list, tuple))
    return isinstance(value, Mapping)


@dataclass(frozen=True)
class FieldSpec:
    type: FieldType
    required: bool = False
    # Declared only; uniqueness is not enforced.
    unique: bool = False
    default: Any = _MISSING
    fields: Optional["Schema"] = None
    items: Optional[FieldType] = None

    @property
    def has_default(self) -> bool:
        return self.default is not _MISSING

    def default_value(self) -> Any:
        return self.default() if callable(self.default) else self.default

    @classmethod
    def from_declaration(cls, name: str, decl: Any) -> "FieldSpec":
        if isinstance(decl, FieldSpec):
            return decl
        if isinstance(decl, Schema):
            return cls(type=FieldType.OBJECT, fields=decl)
        if not isinstance(decl, Mapping):
            # shorthand: "age": int
            return cls(type=resolve_type(decl))
        unknown = set(decl) - _SPEC_KEYS
        if unknown:
            raise SchemaDefinitionError(f"field {name!r}: unknown options {sorted(unknown)}")
        if "type" not in decl:
            if "fields" in decl:
                decl = dict(decl, type=FieldType.OBJECT)
            else:
                raise SchemaDefinitionError(f"field {name!r}: missing 'type'")
        raw_type = decl["type"]
        if isinstance(raw_type, Mapping):
            # nested definition given as the type itself: {"type": {"city": {...}}}
            if "fields" in decl:
                raise SchemaDefinitionError(f"field {name!r}: nested type given twice ('type' and 'fields')")
            raw_type = Schema(raw_type)
        ft = resolve_type(raw_type)
        nested: Optional[Schema] = None
        if ft is FieldType.OBJECT:
            sub = raw_type if isinstance(raw_type, Schema) else decl.get("fields")
            if sub is not None:
                nested = sub if isinstance(sub, Schema) else Schema(sub)
        elif "fields" in decl:
            raise SchemaDefinitionError(f"field {name!r}: 'fields' is only valid for object fields")
        items: Optional[FieldType] = None
        if "items" in decl:
            if ft is not FieldType.LIST:
                raise SchemaDefinitionError(f"field {name!r}: 'items' is only valid for list fields")
            raw_items = decl["items"]
            if isinstance(raw_items, Mapping):
                raw_items = raw_items.get("type")
            items = resolve_type(raw_items)
            if items in (FieldType.LIST, FieldType.OBJECT):
                raise SchemaDefinitionError(f"field {name!r}: list items must be scalar")
        return cls(
            type=ft,
            required=bool(decl.get("required", False)),
            unique=bool(decl.get("unique", False)),
            default=decl.get("default", _MISSING),
            fields=nested,
            items=items,
        )


class Schema:
    """
    Field-type declaration for a collection.

    The field map is resolved once and exposed read-only. Validation hooks
    can be registered with on_before_validate / on_after_validate.
    """

    def __init__(self, definition: Mapping[str, Any]) -> None:
        if isinstance(definition, Schema):
            definition = definition.fields
        if not isinstance(definition, Mapping):
            raise SchemaDefinitionError("schema definition must be a mapping of field name to spec")
        fields: Dict[str, FieldSpec] = {}
        for name, decl in definition.items():
            if not isinstance(name, str) or not name:
                raise SchemaDefinitionError(f"invalid field name: {name!r}")
            fields[name] = FieldSpec.from_declaration(name, decl)
        self._fields: Mapping[str, FieldSpec] = MappingProxyType(fields)
        self._before: List[ValidateHook] = []
        self._after: List[ValidateHook] = []

    @property
    def fields(self) -> Mapping[str, FieldSpec]:
        return self._fields

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}: {v.type.value}" for k, v in self._fields.items())
        return f"Schema({{{inner}}})"

    def on_before_validate(self, hook: ValidateHook) -> ValidateHook:
        self._before.append(hook)
        return hook

    def on_after_validate(self, hook: ValidateHook) -> ValidateHook:
        self._after.append(hook)
        return hook

    def validate(self, candidate: Mapping[str, Any], is_create: bool) -> None:
        for hook in self._before:
            hook(candidate, is_create)
        self._validate(candidate, is_create, "")
        for hook in self._after:
            hook(candidate, is_create)

    def _validate(self, candidate: Mapping[str, Any], is_create: bool, prefix: str) -> None:
        for name, spec in self._fields.items():
            path = prefix + name
            if name not in candidate:
                if spec.required and is_create:
                    raise MissingFieldError(path)
                continue
            value = candidate[name]
            if value is None:
                continue
            if not type_matches(spec.type, value):
                raise TypeMismatchError(path, spec.type.value, type(value).__name__)
            if spec.type is FieldType.LIST and spec.items is not None:
                for i, item in enumerate(value):
                    if item is not None and not type_matches(spec.items, item):
                        raise TypeMismatchError(f"{path}[{i}]", spec.items.value, type(item).__name__)
            elif spec.type is FieldType.OBJECT and spec.fields is not None:
                spec.fields._validate(value, is_create, path + ".")

    def apply_defaults(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Return a copy of data with declared defaults filled in for absent fields."""
        out = dict(data)
        for name, spec in self._fields.items():
            if name not in out:
                if spec.has_default:
                    out[name] = spec.default_value()
            elif spec.fields is not None and isinstance(out[name], Mapping):
                out[name] = spec.fields.apply_defaults(out[name])
        return out

    def decode(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Turn stored ISO strings back into datetimes for timestamp fields (in place)."""
        for name, spec in self._fields.items():
            value = data.get(name)
            if value is None:
                continue
            if spec.type is FieldType.TIMESTAMP:
                data[name] = _to_datetime(value)
            elif spec.type is FieldType.LIST and spec.items is FieldType.TIMESTAMP and isinstance(value, list):
                data[name] = [_to_datetime(v) for v in value]
            elif spec.fields is not None and isinstance(value, dict):
                spec.fields.decode(value)
        return data
