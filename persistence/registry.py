from __future__ import annotations

import threading
from typing import Callable

from .disk_store import DiskKeyValueBackend
from .interfaces import KeyValueBackend
from .memory_store import InMemoryBackend
from . import paths


BackendFactory = Callable[[], KeyValueBackend]


def _disk_backend() -> KeyValueBackend:
    return DiskKeyValueBackend(paths.store_dir(paths.data_dir()))


class BackendRegistry:
    """
    Maps backend names to lazily created, shared backend instances.

    Every store bound to the same name talks to the same instance, so a
    document committed by one store is what a later store loads.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._factories: dict[str, BackendFactory] = {}
        self._aliases: dict[str, str] = {}
        self._instances: dict[str, KeyValueBackend] = {}

    def register(self, name: str, factory: BackendFactory) -> None:
        with self._guard:
            self._factories[name] = factory
            self._instances.pop(name, None)

    def register_instance(self, name: str, backend: KeyValueBackend) -> None:
        with self._guard:
            self._factories[name] = lambda: backend
            self._instances[name] = backend

    def alias(self, name: str, target: str) -> None:
        with self._guard:
            self._aliases[name] = target

    def names(self) -> list[str]:
        with self._guard:
            return sorted(set(self._factories) | set(self._aliases))

    def resolve(self, name: str | None) -> KeyValueBackend | None:
        if not name:
            return None
        with self._guard:
            canonical = self._aliases.get(name, name)
            backend = self._instances.get(canonical)
            if backend is not None:
                return backend
            factory = self._factories.get(canonical)
            if factory is None:
                return None
            backend = factory()
            self._instances[canonical] = backend
            return backend

    def reset(self) -> None:
        """Drop created instances; factories are kept."""
        with self._guard:
            self._instances.clear()


def default_registry() -> BackendRegistry:
    registry = BackendRegistry()
    registry.register("memory", InMemoryBackend)
    registry.register("disk", _disk_backend)
    # Legacy name of the host option table.
    registry.alias("options", "disk")
    return registry


GLOBAL_BACKENDS = default_registry()
