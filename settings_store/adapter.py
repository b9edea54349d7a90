from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from json_store import dump_json, parse_json
from persistence import GLOBAL_BACKENDS, BackendRegistry, KeyValueBackend

from .errors import PayloadParseError, PersistenceError
from .merge import normalize

logger = logging.getLogger(__name__)

NAMESPACE_SEPARATOR = ":"


@dataclass(frozen=True)
class LoadResult:
    ok: bool
    document: dict[str, Any] = field(default_factory=dict)
    found: bool = False
    reason: Exception | None = None


@dataclass(frozen=True)
class CommitResult:
    ok: bool
    reason: Exception | None = None


def storage_key(key: str, namespace: str = "") -> str:
    if not namespace:
        return key
    return f"{namespace}{NAMESPACE_SEPARATOR}{key}"


def serialize(document: Mapping[str, Any]) -> str:
    # An empty document is still an object: "{}", never "[]".
    return dump_json(dict(document))


def decode_payload(raw: Any) -> LoadResult:
    """
    Turn whatever the backend returned into a document.

    Native mappings (legacy storage that kept the structure itself) are
    adopted as-is; everything else must be JSON text encoding an object.
    """
    if raw is None:
        return LoadResult(ok=True)
    if isinstance(raw, Mapping):
        try:
            return LoadResult(ok=True, document=normalize(raw), found=True)
        except (TypeError, RecursionError) as e:
            return LoadResult(ok=False, found=True, reason=PayloadParseError(repr(e)))
    if not isinstance(raw, (str, bytes)):
        return LoadResult(
            ok=False,
            found=True,
            reason=PayloadParseError(f"unexpected payload type {type(raw).__name__}"),
        )

    parsed = parse_json(raw)
    if not parsed.ok:
        if parsed.reason is None:
            # Empty payload: nothing was ever stored.
            return LoadResult(ok=True, found=True)
        return LoadResult(ok=False, found=True, reason=PayloadParseError(repr(parsed.reason)))
    if not isinstance(parsed.value, dict):
        return LoadResult(
            ok=False,
            found=True,
            reason=PayloadParseError(f"payload decodes to {type(parsed.value).__name__}, not an object"),
        )
    return LoadResult(ok=True, document=parsed.value, found=True)


class PersistenceAdapter:
    """
    Binds a store to one key on one backend.

    The backend is either injected directly or resolved by name from a
    registry. When neither yields a backend, `load` returns an empty
    document and `commit` does nothing, so the store is purely in-memory.
    """

    def __init__(
        self,
        backend: KeyValueBackend | str | None,
        key: str,
        *,
        namespace: str = "",
        registry: BackendRegistry | None = None,
    ):
        self._registry = registry if registry is not None else GLOBAL_BACKENDS
        self.name: str | None
        if isinstance(backend, str) or backend is None:
            self.name = backend or None
            try:
                self._backend = self._registry.resolve(backend)
            except Exception as e:
                logger.warning("PERSISTENCE: cannot create backend %r: %r", backend, e)
                self._backend = None
            if backend and self._backend is None:
                logger.warning("PERSISTENCE: unknown backend %r; store stays in-memory", backend)
        elif isinstance(backend, KeyValueBackend):
            self.name = type(backend).__name__
            self._backend = backend
        else:
            logger.warning("PERSISTENCE: %r is not a backend; store stays in-memory", backend)
            self.name = None
            self._backend = None
        self.key = storage_key(key, namespace)

    @property
    def enabled(self) -> bool:
        return self._backend is not None

    def load(self) -> LoadResult:
        if self._backend is None:
            return LoadResult(ok=True)
        try:
            raw = self._backend.read(self.key)
        except Exception as e:
            logger.warning("PERSISTENCE LOAD: backend read of %r failed: %r", self.key, e)
            return LoadResult(ok=False, reason=PersistenceError(repr(e)))

        try:
            result = decode_payload(raw)
        except Exception as e:
            result = LoadResult(ok=False, found=True, reason=PayloadParseError(repr(e)))
        if not result.ok:
            logger.warning("PERSISTENCE LOAD: ignoring stored payload for %r: %s", self.key, result.reason)
        return result

    def commit(self, document: Mapping[str, Any]) -> CommitResult:
        if self._backend is None:
            return CommitResult(ok=True)
        try:
            payload = serialize(document)
        except (TypeError, ValueError) as e:
            logger.warning("PERSISTENCE COMMIT: cannot serialize document for %r: %r", self.key, e)
            return CommitResult(ok=False, reason=PersistenceError(repr(e)))
        try:
            written = self._backend.write(self.key, payload)
        except Exception as e:
            logger.warning("PERSISTENCE COMMIT: backend write of %r failed: %r", self.key, e)
            return CommitResult(ok=False, reason=PersistenceError(repr(e)))
        if not written:
            logger.warning("PERSISTENCE COMMIT: backend refused write of %r", self.key)
            return CommitResult(ok=False, reason=PersistenceError("backend reported failure"))
        return CommitResult(ok=True)
