from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from types import SimpleNamespace
from typing import Any, Literal

from json_store import dump_json

logger = logging.getLogger(__name__)

OutputFormat = Literal["raw", "json", "object"]

FORMAT_ALIASES: dict[str, OutputFormat] = {
    "raw": "raw",
    "array": "raw",
    "hash-map": "raw",
    "json": "json",
    "object": "object",
}


def coerce_format(fmt: str | None, default: OutputFormat = "raw") -> OutputFormat:
    if fmt is None:
        return default
    resolved = FORMAT_ALIASES.get(str(fmt).strip().lower())
    if resolved is None:
        logger.warning("OUTPUT: unknown format %r; using %r", fmt, default)
        return default
    return resolved


def to_object(document: Mapping[str, Any]) -> SimpleNamespace:
    """Deep-convert mappings to attribute-access namespaces."""
    return json.loads(dump_json(dict(document)), object_hook=lambda d: SimpleNamespace(**d))


def render(document: Mapping[str, Any], fmt: OutputFormat = "raw") -> Any:
    if fmt == "json":
        return dump_json(dict(document))
    if fmt == "object":
        return to_object(document)
    return copy.deepcopy(dict(document))


@dataclass(frozen=True)
class ExportPayload:
    """
    A document ready to hand to a transfer layer: the requested
    representation, its JSON bytes, and suggested download metadata.
    """

    data: Any
    content: bytes
    filename: str
    media_type: str = "application/json"
    charset: str = "utf-8"

    @property
    def content_type(self) -> str:
        return f"{self.media_type}; charset={self.charset}"


def build_export(
    document: Mapping[str, Any],
    fmt: OutputFormat = "json",
    *,
    name: str = "settings",
    filename: str | None = None,
    charset: str = "utf-8",
    today: date | None = None,
) -> ExportPayload:
    day = (today or date.today()).isoformat()
    return ExportPayload(
        data=render(document, fmt),
        content=dump_json(dict(document)).encode(charset),
        filename=filename or f"{name}-{day}.{fmt}",
        charset=charset,
    )
