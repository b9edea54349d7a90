from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .output import OutputFormat, coerce_format

logger = logging.getLogger(__name__)


class StoreConfig(BaseModel):
    """
    Construction options of a SettingsStore.

    Accepts snake_case or camelCase names ("auto_commit" / "autoCommit").
    `store` is a backend name or an injected backend instance; `schema` is
    an inline mapping, a pydantic model class, or a path / file:// URI.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
        extra="ignore",
        frozen=True,
    )

    namespace: str = ""
    key: str = ""
    auto_commit: bool = False
    debug: bool = False
    store: Any = None
    schema_source: Any = None
    format: OutputFormat = "raw"
    validate_on_write: bool = True
    falsy_as_missing: bool = False

    @field_validator("format", mode="before")
    @classmethod
    def _coerce_format(cls, value: Any) -> Any:
        if isinstance(value, str):
            return coerce_format(value)
        return value

    @classmethod
    def _spellings(cls, name: str) -> set[str]:
        # Error locations use the alias; the caller may have used either form.
        for field_name, info in cls.model_fields.items():
            if name in (field_name, info.alias):
                return {field_name, info.alias or field_name}
        return {name}

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | "StoreConfig" | None = None, **overrides: Any) -> "StoreConfig":
        """
        Build a config, dropping (and logging) any option that fails
        validation so that its default applies instead.
        """
        if isinstance(options, StoreConfig):
            raw: dict[str, Any] = options.model_dump(by_alias=False)
        elif options is None or isinstance(options, Mapping):
            raw = dict(options or {})
        else:
            logger.warning("CONFIG: options must be a mapping, got %r; using defaults", options)
            raw = {}
        raw.update(overrides)
        # "schema" shadows a BaseModel attribute, so it travels as schema_source.
        if "schema" in raw:
            raw.setdefault("schema_source", raw.pop("schema"))

        for _ in range(len(raw) + 1):
            try:
                return cls.model_validate(raw)
            except ValidationError as e:
                bad = {k for err in e.errors() if err.get("loc") for k in cls._spellings(str(err["loc"][0]))}
                offending = bad & set(raw)
                if not offending:
                    break
                for name in offending:
                    logger.warning("CONFIG: dropping invalid option %r=%r", name, raw[name])
                    raw.pop(name)
        logger.warning("CONFIG: options could not be validated; using defaults")
        return cls()
