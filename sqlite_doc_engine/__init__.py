from .config import Settings, get_settings
from .database import Database, get_default_database, model, reset_default_database
from .errors import (
    ConfigError,
    DocEngineError,
    MissingFieldError,
    RecordNotFoundError,
    SchemaDefinitionError,
    SerializationError,
    StorageError,
    TypeMismatchError,
    ValidationError,
)
from .log import configure_logging
from .model import Model
from .progress import Progress
from .query import matches
from .record import DocRecord
from .schema import FieldSpec, FieldType, Schema
from .storage import RunResult, SQLiteStorage, Statement

__all__ = [
    "ConfigError",
    "Database",
    "DocEngineError",
    "DocRecord",
    "FieldSpec",
    "FieldType",
    "MissingFieldError",
    "Model",
    "Progress",
    "RecordNotFoundError",
    "RunResult",
    "SQLiteStorage",
    "Schema",
    "SchemaDefinitionError",
    "SerializationError",
    "Settings",
    "Statement",
    "StorageError",
    "TypeMismatchError",
    "ValidationError",
    "configure_logging",
    "get_default_database",
    "get_settings",
    "matches",
    "model",
    "reset_default_database",
]
