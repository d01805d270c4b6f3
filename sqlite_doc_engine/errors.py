from __future__ import annotations
from typing import Optional


class DocEngineError(Exception):
    """Base class for every error raised by sqlite_doc_engine."""


class ConfigError(DocEngineError):
    pass


class SchemaDefinitionError(ConfigError):
    pass


class ValidationError(DocEngineError):
    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class MissingFieldError(ValidationError):
    def __init__(self, field: str) -> None:
        super().__init__(f"missing required field: {field}", field)


class TypeMismatchError(ValidationError):
    def __init__(self, field: str, expected: str, actual: str) -> None:
        super().__init__(f"field {field!r} expects {expected}, got {actual}", field)
        self.expected = expected
        self.actual = actual


class SerializationError(DocEngineError):
    pass


class StorageError(DocEngineError):
    pass


class RecordNotFoundError(DocEngineError):
    pass
