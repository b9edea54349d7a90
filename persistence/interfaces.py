from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class KeyValueBackend(Protocol):
    """
    Minimal host-storage contract: a value persisted under a string key.
    """

    def read(self, key: str) -> Any | None:
        """Return the stored value, or None when the key is absent."""
        ...

    def write(self, key: str, value: Any) -> bool:
        """Persist `value` under `key`; report whether the write succeeded."""
        ...
