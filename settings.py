from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Storage
    data_dir: str
    backend: str
    store_key: str
    namespace: str

    # Validation
    schema: str

    # Write policy
    auto_commit: bool

    # Debug
    debug: bool

    # Export
    export_name: str


def get_settings() -> Settings:
    # Empty means "<project root>/data".
    data_dir = os.getenv("SETTINGS_STORE_DATA_DIR", "").strip()

    backend = os.getenv("SETTINGS_STORE_BACKEND", "disk").strip()
    store_key = os.getenv("SETTINGS_STORE_KEY", "settings").strip()
    namespace = os.getenv("SETTINGS_STORE_NAMESPACE", "").strip()

    # Path or file:// URI of a JSON schema; empty disables validation.
    schema = os.getenv("SETTINGS_STORE_SCHEMA", "").strip()

    auto_commit = _env_bool("SETTINGS_STORE_AUTO_COMMIT", False)
    debug = _env_bool("SETTINGS_STORE_DEBUG", False)

    export_name = os.getenv("SETTINGS_STORE_EXPORT_NAME", "settings").strip() or "settings"

    return Settings(
        data_dir=data_dir,
        backend=backend,
        store_key=store_key,
        namespace=namespace,
        schema=schema,
        auto_commit=auto_commit,
        debug=debug,
        export_name=export_name,
    )
