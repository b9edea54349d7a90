from __future__ import annotations

from .adapter import CommitResult, LoadResult, PersistenceAdapter
from .config import StoreConfig
from .errors import (
    InvalidPathError,
    PayloadParseError,
    PersistenceError,
    SchemaLoadError,
    SettingsStoreError,
    UnsupportedValueError,
)
from .merge import ValueKind, kind_of, merge
from .output import ExportPayload
from .schema import ValidationReport, Violation
from .store import SettingsStore

__all__ = [
    "SettingsStore",
    "StoreConfig",
    "PersistenceAdapter",
    "LoadResult",
    "CommitResult",
    "ExportPayload",
    "ValidationReport",
    "Violation",
    "ValueKind",
    "kind_of",
    "merge",
    "SettingsStoreError",
    "InvalidPathError",
    "UnsupportedValueError",
    "SchemaLoadError",
    "PayloadParseError",
    "PersistenceError",
]
