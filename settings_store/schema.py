"""
Schema validation gate.

Structural checking is delegated to `jsonschema`; this module only loads
schemas (fail-open) and turns validator output into `Violation` records.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

import jsonschema
from jsonschema.exceptions import SchemaError
from pydantic import BaseModel, Field

from json_store import parse_json, read_text

from .errors import SchemaLoadError

logger = logging.getLogger(__name__)


class Violation(BaseModel):
    property: str
    message: str

    def __str__(self) -> str:
        return f"[{self.property}] {self.message}"


class ValidationReport(BaseModel):
    is_valid: bool = True
    violations: list[Violation] = Field(default_factory=list)


@dataclass(frozen=True)
class SchemaLoadResult:
    ok: bool
    schema: dict[str, Any] | None = None
    reason: Exception | None = None


def _path_from_source(source: str | Path) -> Path:
    if isinstance(source, Path):
        return source
    try:
        parsed = urlparse(source)
    except ValueError as e:
        raise SchemaLoadError(f"malformed schema URI {source!r}: {e}") from e
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    # Single letters are Windows drive names, not URI schemes.
    if parsed.scheme and len(parsed.scheme) > 1:
        raise SchemaLoadError(f"unsupported schema URI scheme {parsed.scheme!r}")
    return Path(source)


def _read_source(source: Any) -> dict[str, Any]:
    if isinstance(source, type) and issubclass(source, BaseModel):
        return source.model_json_schema()
    if isinstance(source, Mapping):
        return dict(source)
    if isinstance(source, str) and source.lstrip().startswith("{"):
        text: str | None = source
    elif isinstance(source, (str, Path)):
        path = _path_from_source(source)
        try:
            text = read_text(path)
        except (OSError, ValueError) as e:
            # ValueError covers undecodable bytes and NUL characters in the path.
            raise SchemaLoadError(f"cannot read schema {path}: {e}") from e
        if text is None:
            raise SchemaLoadError(f"schema file not found: {path}")
    else:
        raise SchemaLoadError(f"unsupported schema source type {type(source).__name__}")

    parsed = parse_json(text)
    if not parsed.ok:
        raise SchemaLoadError(f"schema is not valid JSON: {parsed.reason!r}")
    if not isinstance(parsed.value, dict):
        raise SchemaLoadError("schema must be a JSON object")
    return parsed.value


def load_schema(source: Any) -> SchemaLoadResult:
    """
    Load a schema from an inline mapping, a pydantic model class, JSON text,
    a filesystem path or a file:// URI.

    Failures never raise: the result carries the reason and no schema, which
    callers treat as "no validation".
    """
    if source is None:
        return SchemaLoadResult(ok=True)
    try:
        schema = _read_source(source)
        jsonschema.validators.validator_for(schema).check_schema(schema)
    except SchemaLoadError as e:
        logger.warning("SCHEMA LOAD: %s", e)
        return SchemaLoadResult(ok=False, reason=e)
    except SchemaError as e:
        err = SchemaLoadError(f"malformed schema: {e.message}")
        logger.warning("SCHEMA LOAD: %s", err)
        return SchemaLoadResult(ok=False, reason=err)
    return SchemaLoadResult(ok=True, schema=schema)


def _property_of(error: jsonschema.ValidationError) -> str:
    return ".".join(str(p) for p in error.absolute_path)


def validate(document: Mapping[str, Any], schema: Mapping[str, Any] | None) -> ValidationReport:
    if schema is None:
        return ValidationReport()

    try:
        validator = jsonschema.validators.validator_for(schema)(schema)
        errors = sorted(
            validator.iter_errors(document),
            key=lambda e: [str(p) for p in e.absolute_path],
        )
    except Exception as e:
        # e.g. unresolvable $ref; treat as a failed check rather than crash.
        logger.warning("SCHEMA VALIDATE: validator failed: %r", e)
        return ValidationReport(
            is_valid=False,
            violations=[Violation(property="", message=f"validator failed: {e}")],
        )

    violations = [Violation(property=_property_of(e), message=e.message) for e in errors]
    if violations:
        logger.warning("SCHEMA VALIDATE: document does not validate. Violations:")
        for v in violations:
            logger.warning("SCHEMA VALIDATE: %s", v)
    return ValidationReport(is_valid=not violations, violations=violations)
