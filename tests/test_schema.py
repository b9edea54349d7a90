from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel

from settings_store.errors import SchemaLoadError
from settings_store.schema import load_schema, validate


def test_load_inline_schema(port_schema):
    result = load_schema(port_schema)
    assert result.ok
    assert result.schema == port_schema


def test_load_schema_from_path_and_file_uri(schema_file: Path, port_schema):
    assert load_schema(schema_file).schema == port_schema
    assert load_schema(str(schema_file)).schema == port_schema
    assert load_schema(schema_file.as_uri()).schema == port_schema


def test_load_schema_from_json_text():
    result = load_schema('{"type": "object"}')
    assert result.ok
    assert result.schema == {"type": "object"}


def test_load_schema_from_pydantic_model():
    class Server(BaseModel):
        host: str
        port: int

    result = load_schema(Server)
    assert result.ok
    assert result.schema["properties"]["port"]["type"] == "integer"


def test_missing_schema_file_fails_open(tmp_path: Path, caplog):
    with caplog.at_level(logging.WARNING):
        result = load_schema(tmp_path / "nope.json")
    assert not result.ok
    assert result.schema is None
    assert isinstance(result.reason, SchemaLoadError)
    assert "SCHEMA LOAD" in caplog.text


def test_malformed_schema_file_fails_open(tmp_path: Path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    result = load_schema(path)
    assert not result.ok
    assert result.schema is None


def test_structurally_invalid_schema_fails_open():
    result = load_schema({"type": 12})
    assert not result.ok
    assert isinstance(result.reason, SchemaLoadError)


def test_remote_uri_is_not_fetched():
    result = load_schema("https://example.com/schema.json")
    assert not result.ok


def test_none_means_no_schema():
    result = load_schema(None)
    assert result.ok
    assert result.schema is None


def test_validate_without_schema_is_valid():
    report = validate({"anything": "goes"}, None)
    assert report.is_valid
    assert report.violations == []


def test_validate_reports_property_and_message(port_schema, caplog):
    doc = {"port": "notanumber", "server": {"port": 0}}
    with caplog.at_level(logging.WARNING):
        report = validate(doc, port_schema)
    assert not report.is_valid
    props = [v.property for v in report.violations]
    assert props == ["port", "server.port"]
    assert all(v.message for v in report.violations)
    assert "[port]" in caplog.text


def test_validate_passes_valid_document(port_schema):
    report = validate({"port": 1, "server": {"host": "h", "port": 8080}}, port_schema)
    assert report.is_valid


def test_undecodable_schema_file_fails_open(tmp_path: Path):
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"type":"object","title":"\xff\xfe"}')
    result = load_schema(str(path))
    assert not result.ok
    assert isinstance(result.reason, SchemaLoadError)


def test_malformed_schema_uri_fails_open():
    result = load_schema("http://[bad")
    assert not result.ok
    assert isinstance(result.reason, SchemaLoadError)


def test_store_with_undecodable_schema_file_stays_valid(tmp_path: Path):
    from settings_store import SettingsStore

    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"type":"object","title":"\xff\xfe"}')
    store = SettingsStore(schema=str(path))
    assert store.schema is None
    assert store.set("port", "anything").is_valid is True
