# settings_endpoints.py
from __future__ import annotations

import logging
from typing import Any, Literal

from fastapi import APIRouter, Body, HTTPException, Query
from fastapi.responses import Response

from settings import get_settings
from settings_store import InvalidPathError, SettingsStore
from settings_store.paths import parse_path

router = APIRouter(prefix="/settings", tags=["settings"])
logger = logging.getLogger(__name__)

# Centralized settings
SETTINGS = get_settings()

# -------------------------------------------------------------------
# Store singleton (built at import; tests reload this module)
# -------------------------------------------------------------------
STORE = SettingsStore(
    {
        "namespace": SETTINGS.namespace,
        "key": SETTINGS.store_key,
        "store": SETTINGS.backend or None,
        "schema": SETTINGS.schema or None,
        "auto_commit": SETTINGS.auto_commit,
        "debug": SETTINGS.debug,
    }
)


def _status(store: SettingsStore) -> dict[str, Any]:
    return {
        "valid": store.is_valid,
        "violations": [v.model_dump() for v in store.violations],
        "committed": store.committed,
    }


def download_headers(filename: str, content_type: str, *, cache: str = "public") -> dict[str, str]:
    """
    Headers for a browser file download of an exported document.
    """
    return {
        "Cache-Control": cache,
        "Content-Disposition": f"attachment; filename={filename}",
        "Content-Type": content_type,
        "Content-Description": "File Transfer",
        "Content-Transfer-Encoding": "binary",
    }


@router.get("")
def read_document() -> dict[str, Any]:
    return STORE.get()


@router.patch("")
def extend_document(values: dict[str, Any] = Body(...)) -> dict[str, Any]:
    STORE.set(values)
    return _status(STORE)


@router.post("/commit")
def commit_document() -> dict[str, Any]:
    STORE.commit()
    reason = STORE.last_commit.reason if STORE.last_commit else None
    if reason is not None:
        logger.warning("COMMIT: %s", reason)
    return {"committed": STORE.committed, "persistent": STORE.persistent}


@router.post("/validate")
def validate_document() -> dict[str, Any]:
    STORE.validate()
    return _status(STORE)


@router.get("/export")
def export_document(
    format: Literal["json", "object", "raw"] = Query("json"),
    name: str = Query("", max_length=128),
    cache: str = Query("public"),
) -> Response:
    payload = STORE.export(format, name=name or SETTINGS.export_name)
    return Response(
        content=payload.content,
        headers=download_headers(payload.filename, payload.content_type, cache=cache),
    )


@router.get("/values/{path:path}")
def read_value(path: str) -> dict[str, Any]:
    if not STORE.has(path):
        raise HTTPException(status_code=404, detail=f"no setting at {path!r}")
    return {"path": path, "value": STORE.get(path)}


@router.put("/values/{path:path}")
def write_value(path: str, value: Any = Body(...)) -> dict[str, Any]:
    try:
        parse_path(path)
    except InvalidPathError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    STORE.set(path, value)
    return {"path": path, "value": STORE.get(path), **_status(STORE)}
