from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from persistence import BackendRegistry

from . import paths
from .adapter import CommitResult, LoadResult, PersistenceAdapter
from .config import StoreConfig
from .errors import SettingsStoreError, UnsupportedValueError
from .merge import ABSENT, merge, normalize
from .output import ExportPayload, OutputFormat, build_export, coerce_format, render
from .schema import ValidationReport, Violation, load_schema, validate

logger = logging.getLogger(__name__)

_NOTHING: Any = object()


class SettingsStore:
    """
    A path-addressed settings document with merge-on-write, an optional
    schema gate and a pluggable persistence backend.

    Usage:
        store = SettingsStore({"store": "disk", "key": "my-plugin", "auto_commit": True})
        store.set("server.port", 8080).set("server.tags", ["a", "b"])
        store.get("server.port")          # 8080
        store.get("missing", "fallback")  # "fallback"

    No public method raises: failures are logged and surface through
    `is_valid`, `violations`, `last_load` and `last_commit`.
    """

    def __init__(
        self,
        config: Mapping[str, Any] | StoreConfig | None = None,
        *,
        registry: BackendRegistry | None = None,
        **options: Any,
    ):
        self.config = StoreConfig.from_options(config, **options)
        self.namespace = self.config.namespace
        self.key = self.config.key
        self.auto_commit = self.config.auto_commit
        self.debug = self.config.debug
        self.format: OutputFormat = self.config.format

        self.is_valid = True
        self.violations: list[Violation] = []
        self.last_commit: CommitResult | None = None

        self.schema: dict[str, Any] | None = None
        if self.config.schema_source is not None:
            self.set_schema(self.config.schema_source)

        self._adapter = PersistenceAdapter(
            self.config.store,
            self.key,
            namespace=self.namespace,
            registry=registry,
        )
        self._data: dict[str, Any] = {}
        self.last_load: LoadResult = self._load()

    def __repr__(self) -> str:
        return f"SettingsStore(namespace={self.namespace!r}, key={self.key!r}, store={self._adapter.name!r})"

    def _console(self, message: str, *args: Any) -> None:
        if self.debug:
            logger.debug("settings_store debug: " + message, *args)

    def _load(self) -> LoadResult:
        result = self._adapter.load()
        self._data = result.document if result.ok else {}
        self._console("loaded %r (found=%s, ok=%s)", self._adapter.key, result.found, result.ok)
        return result

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------
    def set_schema(self, source: Any) -> dict[str, Any] | None:
        """
        Load a schema; on failure the schema is left unset (fail-open) and
        the store counts as valid.
        """
        result = load_schema(source)
        self.schema = result.schema if result.ok else None
        if not result.ok:
            self._console("schema not loaded: %s", result.reason)
        if self.schema is None:
            self.is_valid = True
            self.violations = []
        return self.schema

    def validate(self) -> ValidationReport:
        report = validate(self._data, self.schema)
        self.is_valid = report.is_valid
        self.violations = list(report.violations)
        if report.is_valid:
            self._console("document validates against the schema")
        return report

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------
    def get(self, path: str | None = None, default: Any = None) -> Any:
        """
        With no path, the whole document in the configured output format.
        With a path, the stored value (copied) or `default` when absent.
        """
        if path is None or path == "":
            return render(self._data, self.format)
        try:
            found = paths.lookup(self._data, path)
        except SettingsStoreError as e:
            logger.warning("GET: %s", e)
            return default
        if not found.found:
            return default
        if self.config.falsy_as_missing and not found.value:
            return default
        return copy.deepcopy(found.value)

    def has(self, path: str) -> bool:
        try:
            return paths.lookup(self._data, path).found
        except SettingsStoreError:
            return False

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------
    def _merged(self, key: Any, value: Any) -> dict[str, Any]:
        """Compute the next document without touching the current one."""
        if not isinstance(key, str):
            values = normalize(key)
            if not isinstance(values, dict):
                raise UnsupportedValueError(f"cannot extend the document with {type(key).__name__}")
            return merge(self._data, values)

        new_value = normalize(value)
        existing = paths.lookup(self._data, key)
        combined = merge(existing.value if existing.found else ABSENT, new_value)
        document = copy.deepcopy(self._data)
        paths.set(document, key, combined)
        return document

    def set(self, key: Any = None, value: Any = _NOTHING, bypass_validation: bool = False) -> "SettingsStore":
        """
        Merge `value` into the document at dot-path `key`, or deep-extend the
        whole document when `key` is itself a mapping/structure.

        Afterwards the schema (if any) is re-checked, and a valid document is
        committed when auto-commit is on. Returns the store for chaining.
        """
        if isinstance(key, str) and value is _NOTHING:
            logger.warning("SET: no value given for %r; ignored", key)
            return self
        if key is None:
            logger.warning("SET: no key given; ignored")
            return self

        try:
            document = self._merged(key, value)
        except SettingsStoreError as e:
            logger.warning("SET: %r ignored: %s", key, e)
            return self

        self._data = document
        self._console("set %r", key if isinstance(key, str) else "<document>")

        if self.schema is not None and self.config.validate_on_write and not bypass_validation:
            self.validate()

        if self.is_valid and self.auto_commit:
            self.commit()

        return self

    def extend(self, values: Any) -> "SettingsStore":
        """Deep-extend the whole document; same as ``set(mapping)``."""
        return self.set(values)

    # ------------------------------------------------------------------
    # Persistence / output
    # ------------------------------------------------------------------
    def commit(self) -> "SettingsStore":
        self.last_commit = self._adapter.commit(self._data)
        self._console("commit %r ok=%s", self._adapter.key, self.last_commit.ok)
        return self

    @property
    def committed(self) -> bool:
        return self.last_commit is not None and self.last_commit.ok

    @property
    def persistent(self) -> bool:
        return self._adapter.enabled

    @property
    def storage_key(self) -> str:
        return self._adapter.key

    def export(
        self,
        format: str = "json",
        *,
        name: str = "settings",
        filename: str | None = None,
        charset: str = "utf-8",
    ) -> ExportPayload:
        return build_export(
            self._data,
            coerce_format(format, default="json"),
            name=name,
            filename=filename,
            charset=charset,
        )
