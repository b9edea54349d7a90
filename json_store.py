from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of decoding JSON text.

    `ok` is False for empty input or invalid JSON; `reason` then carries the
    decoder error (or None when there was simply nothing to parse).
    """

    ok: bool
    value: Any = None
    reason: Exception | None = None


def parse_json(raw: str | bytes | None) -> ParseResult:
    if raw is None:
        return ParseResult(ok=False)
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            return ParseResult(ok=False, reason=e)
    if not raw.strip():
        return ParseResult(ok=False)
    try:
        return ParseResult(ok=True, value=json.loads(raw))
    except (ValueError, RecursionError) as e:
        return ParseResult(ok=False, reason=e)


def dump_json(payload: Any, *, indent: int | None = None, sort_keys: bool = False) -> str:
    """
    Serialize to JSON text. Compact separators unless an indent is requested.
    """
    if indent is None:
        return json.dumps(payload, separators=(",", ":"), sort_keys=sort_keys, ensure_ascii=False)
    return json.dumps(payload, indent=indent, sort_keys=sort_keys, ensure_ascii=False)


def read_text(path: Path) -> str | None:
    """
    Read a UTF-8 text file. Returns None when the file does not exist.
    """
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")


def atomic_write_text(path: Path, text: str) -> None:
    """
    Atomically write text to disk by writing to a temp file then replacing.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        f.write(text)
    tmp_path.replace(path)


def atomic_write_json(path: Path, payload: Any, *, indent: int = 2, sort_keys: bool = True) -> None:
    atomic_write_text(path, dump_json(payload, indent=indent, sort_keys=sort_keys) + "\n")
