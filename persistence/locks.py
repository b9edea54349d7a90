from __future__ import annotations

import threading
from pathlib import Path


class NamedLockRegistry:
    """
    One lock per name, created on first use.

    Backends serialize I/O per storage key instead of behind a single lock;
    the disk backend names its locks by resolved file path.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, name: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(name, threading.Lock())

    def lock_for_path(self, path: Path) -> threading.Lock:
        return self.lock_for(str(path.resolve()))


GLOBAL_PATH_LOCKS = NamedLockRegistry()
