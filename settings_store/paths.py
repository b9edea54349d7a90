"""
Dot-path addressing over nested mappings.

A path such as "server.port" is split on "." into segments; each segment
addresses one mapping level. Lookups report existence separately from the
stored value so that falsy values (0, "", False, None) are retrievable.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any

from .errors import InvalidPathError

SEPARATOR = "."


@dataclass(frozen=True)
class Lookup:
    found: bool
    value: Any = None


MISSING = Lookup(found=False)


def parse_path(path: str) -> tuple[str, ...]:
    if not isinstance(path, str):
        raise InvalidPathError(f"path must be a string, got {type(path).__name__}")
    segments = tuple(path.split(SEPARATOR))
    if not path or any(not s for s in segments):
        raise InvalidPathError(f"invalid path {path!r}")
    return segments


def lookup(document: Mapping[str, Any], path: str) -> Lookup:
    """
    Walk `path` through `document`.

    Stops with MISSING as soon as a segment is absent or an intermediate
    value is not a mapping.
    """
    current: Any = document
    for segment in parse_path(path):
        if not isinstance(current, Mapping) or segment not in current:
            return MISSING
        current = current[segment]
    return Lookup(found=True, value=current)


def get(document: Mapping[str, Any], path: str, default: Any = None) -> Any:
    found = lookup(document, path)
    return found.value if found.found else default


def set(document: MutableMapping[str, Any], path: str, value: Any) -> None:
    """
    Assign `value` at `path`, creating intermediate mappings as needed.

    An intermediate segment that holds a non-mapping value is replaced by an
    empty mapping.
    """
    segments = parse_path(path)
    current = document
    for segment in segments[:-1]:
        child = current.get(segment)
        if not isinstance(child, MutableMapping):
            child = {}
            current[segment] = child
        current = child
    current[segments[-1]] = value
