from __future__ import annotations


class SettingsStoreError(Exception):
    """Base class for every failure the settings store can report."""


class InvalidPathError(SettingsStoreError, ValueError):
    """Dot-path is empty or has an empty segment ("a..b", ".a", "a.")."""


class UnsupportedValueError(SettingsStoreError, TypeError):
    """Value is not a scalar, mapping or sequence."""


class SchemaLoadError(SettingsStoreError):
    """Schema resource could not be read, parsed or is not a valid schema."""


class PayloadParseError(SettingsStoreError):
    """Stored payload is not a JSON-encoded mapping."""


class PersistenceError(SettingsStoreError):
    """Backend read or write failed."""
