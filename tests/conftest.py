from __future__ import annotations

import importlib
import json
from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture(autouse=True)
def fresh_backends():
    """
    Named backends are process-wide singletons; give every test its own.
    """
    from persistence import GLOBAL_BACKENDS

    GLOBAL_BACKENDS.reset()
    yield GLOBAL_BACKENDS
    GLOBAL_BACKENDS.reset()


@pytest.fixture
def sandbox_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Redirect persistence paths to a temp project directory so tests never touch real ./data.
    """
    import persistence.paths as paths

    def _project_root() -> Path:
        return tmp_path

    def _data_dir() -> Path:
        p = tmp_path / "data"
        p.mkdir(parents=True, exist_ok=True)
        return p

    monkeypatch.setattr(paths, "project_root", _project_root)
    monkeypatch.setattr(paths, "data_dir", _data_dir)
    return tmp_path


@pytest.fixture
def port_schema() -> dict:
    return {
        "type": "object",
        "properties": {
            "port": {"type": "integer"},
            "server": {
                "type": "object",
                "properties": {
                    "host": {"type": "string"},
                    "port": {"type": "integer", "minimum": 1, "maximum": 65535},
                },
            },
        },
    }


@pytest.fixture
def schema_file(tmp_path: Path, port_schema: dict) -> Path:
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(port_schema), encoding="utf-8")
    return path


@pytest.fixture
def reload_endpoints(sandbox_project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Endpoints create the store singleton at import time; reload after sandboxing paths.
    """
    monkeypatch.setenv("SETTINGS_STORE_BACKEND", "disk")
    monkeypatch.setenv("SETTINGS_STORE_KEY", "app-settings")
    monkeypatch.delenv("SETTINGS_STORE_SCHEMA", raising=False)
    monkeypatch.delenv("SETTINGS_STORE_AUTO_COMMIT", raising=False)

    import endpoints.settings_endpoints as settings_endpoints

    importlib.reload(settings_endpoints)
