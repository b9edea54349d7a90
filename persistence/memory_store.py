from __future__ import annotations

import copy
from typing import Any

from .interfaces import KeyValueBackend
from .locks import NamedLockRegistry


class InMemoryBackend(KeyValueBackend):
    """
    Process-local backend. Values are copied on read and write so callers
    never share containers with the backend.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._locks = NamedLockRegistry()
        self._values: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self.writes = 0

    def read(self, key: str) -> Any | None:
        with self._locks.lock_for(key):
            return copy.deepcopy(self._values.get(key))

    def write(self, key: str, value: Any) -> bool:
        with self._locks.lock_for(key):
            self._values[key] = copy.deepcopy(value)
            self.writes += 1
        return True

    def keys(self) -> list[str]:
        return sorted(self._values)
