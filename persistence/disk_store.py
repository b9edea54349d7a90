from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import quote

from json_store import atomic_write_json, atomic_write_text, read_text

from .interfaces import KeyValueBackend
from .locks import GLOBAL_PATH_LOCKS

logger = logging.getLogger(__name__)


class DiskKeyValueBackend(KeyValueBackend):
    """
    Stores one value per key as a file under a base directory.

    - String values are written verbatim (the store hands over JSON text).
    - Mapping values are written as JSON.
    - Reads return the raw file text, or None when the key was never written.
    - Writes are atomic; I/O failures are logged and reported as False.
    """

    def __init__(self, base_dir: Path):
        self._base_dir = base_dir

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def path_for(self, key: str) -> Path:
        # Percent-encoding is injective, so distinct keys never share a file.
        # "%empty" cannot come out of quote(), which only emits uppercase hex.
        name = quote(key, safe="") or "%empty"
        return self._base_dir / f"{name}.json"

    def read(self, key: str) -> Any | None:
        path = self.path_for(key)
        lock = GLOBAL_PATH_LOCKS.lock_for_path(path)
        with lock:
            try:
                return read_text(path)
            except OSError as e:
                logger.warning("DISK STORE READ: failed to read %s: %r", path, e)
                return None

    def write(self, key: str, value: Any) -> bool:
        path = self.path_for(key)
        lock = GLOBAL_PATH_LOCKS.lock_for_path(path)
        with lock:
            try:
                if isinstance(value, Mapping):
                    atomic_write_json(path, dict(value))
                else:
                    atomic_write_text(path, str(value))
            except (OSError, TypeError, ValueError) as e:
                logger.warning("DISK STORE WRITE: failed to write %s: %r", path, e)
                return False
        return True
