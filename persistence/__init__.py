from __future__ import annotations

from .disk_store import DiskKeyValueBackend
from .interfaces import KeyValueBackend
from .memory_store import InMemoryBackend
from .registry import GLOBAL_BACKENDS, BackendRegistry, default_registry

__all__ = [
    "KeyValueBackend",
    "InMemoryBackend",
    "DiskKeyValueBackend",
    "BackendRegistry",
    "GLOBAL_BACKENDS",
    "default_registry",
]
