"""
Type-dispatched merge rules.

Every value held by a document is tagged with a `ValueKind`. Combining an
existing value with a new one is a pure function of the pair of tags:

    existing \\ new   SCALAR      DOCUMENT      SEQUENCE
    SCALAR           overwrite   overwrite     overwrite
    DOCUMENT         overwrite   deep-extend   overwrite
    SEQUENCE         overwrite   overwrite     union
    ABSENT           set         set           set

Deep-extend recurses through the same table for keys present on both sides,
so nested sequences are unioned and nested documents extended.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from types import SimpleNamespace
from typing import Any, Callable

from pydantic import BaseModel

from .errors import UnsupportedValueError

SCALAR_TYPES = (str, int, float, bool, type(None))


class ValueKind(enum.Enum):
    ABSENT = "absent"
    SCALAR = "scalar"
    DOCUMENT = "document"
    SEQUENCE = "sequence"


class _Absent:
    def __repr__(self) -> str:
        return "ABSENT"


ABSENT: Any = _Absent()


def kind_of(value: Any) -> ValueKind:
    if value is ABSENT:
        return ValueKind.ABSENT
    if isinstance(value, SCALAR_TYPES):
        return ValueKind.SCALAR
    if isinstance(value, Mapping):
        return ValueKind.DOCUMENT
    if isinstance(value, list):
        return ValueKind.SEQUENCE
    raise UnsupportedValueError(f"unsupported value type {type(value).__name__}")


def normalize(value: Any) -> Any:
    """
    Return a detached plain-data copy of `value`.

    Mappings become dicts with string keys, pydantic models and namespaces
    become dicts, tuples/lists/sets become lists. Anything else raises
    UnsupportedValueError.
    """
    if isinstance(value, SCALAR_TYPES):
        return value
    if isinstance(value, BaseModel):
        return normalize(value.model_dump(mode="json"))
    if isinstance(value, SimpleNamespace):
        return normalize(vars(value))
    if isinstance(value, Mapping):
        out: dict[str, Any] = {}
        for k, v in value.items():
            if not isinstance(k, str):
                raise UnsupportedValueError(f"mapping keys must be strings, got {k!r}")
            out[k] = normalize(v)
        return out
    if isinstance(value, (list, tuple, set, frozenset)):
        return [normalize(v) for v in value]
    raise UnsupportedValueError(f"unsupported value type {type(value).__name__}")


def _same(a: Any, b: Any) -> bool:
    # True == 1 in Python; keep booleans distinct from numbers.
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    return a == b


def union_sequences(existing: list[Any], new: list[Any]) -> list[Any]:
    """Concatenate then drop duplicates, keeping the first occurrence."""
    out: list[Any] = []
    for item in [*existing, *new]:
        if not any(_same(item, seen) for seen in out):
            out.append(item)
    return out


def deep_extend(existing: Mapping[str, Any], new: Mapping[str, Any]) -> dict[str, Any]:
    out = dict(existing)
    for key, value in new.items():
        out[key] = merge(out.get(key, ABSENT), value)
    return out


def _overwrite(existing: Any, new: Any) -> Any:
    return new


MergeRule = Callable[[Any, Any], Any]

MERGE_RULES: dict[tuple[ValueKind, ValueKind], MergeRule] = {
    (ValueKind.DOCUMENT, ValueKind.DOCUMENT): deep_extend,
    (ValueKind.SEQUENCE, ValueKind.SEQUENCE): union_sequences,
}


def merge(existing: Any, new: Any) -> Any:
    """
    Combine `existing` with `new`; both must already be normalized.
    `existing` may be ABSENT. Pairs not in MERGE_RULES overwrite.
    """
    rule = MERGE_RULES.get((kind_of(existing), kind_of(new)), _overwrite)
    return rule(existing, new)
