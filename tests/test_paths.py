from __future__ import annotations

import pytest

from settings_store import paths
from settings_store.errors import InvalidPathError


def test_get_top_level_and_nested():
    doc = {"name": "demo", "server": {"host": "localhost", "port": 8080}}
    assert paths.get(doc, "name") == "demo"
    assert paths.get(doc, "server.port") == 8080
    assert paths.get(doc, "server") == {"host": "localhost", "port": 8080}


def test_get_returns_default_for_missing_or_non_mapping_intermediate():
    doc = {"server": {"host": "localhost"}, "flat": "x"}
    assert paths.get(doc, "nope", "fallback") == "fallback"
    assert paths.get(doc, "server.port", "fallback") == "fallback"
    assert paths.get(doc, "flat.child", "fallback") == "fallback"
    assert paths.get(doc, "a.b.c", "fallback") == "fallback"


def test_lookup_distinguishes_falsy_values_from_absent():
    doc = {"flag": False, "zero": 0, "empty": "", "none": None, "nested": {"off": False}}
    for path in ("flag", "zero", "empty", "none", "nested.off"):
        found = paths.lookup(doc, path)
        assert found.found is True
    assert paths.get(doc, "flag", "fallback") is False
    assert paths.get(doc, "zero", "fallback") == 0
    assert paths.get(doc, "nested.off", "fallback") is False
    assert paths.lookup(doc, "missing") is paths.MISSING


def test_set_creates_intermediate_mappings():
    doc: dict = {}
    paths.set(doc, "server.http.port", 80)
    assert doc == {"server": {"http": {"port": 80}}}


def test_set_replaces_non_mapping_intermediate():
    doc: dict = {"server": "legacy-string"}
    paths.set(doc, "server.port", 8080)
    assert doc == {"server": {"port": 8080}}


def test_set_without_separator_assigns_directly():
    doc: dict = {"a": 1}
    paths.set(doc, "b", 2)
    assert doc == {"a": 1, "b": 2}


@pytest.mark.parametrize("bad", ["", ".", "a..b", ".a", "a."])
def test_parse_path_rejects_empty_segments(bad):
    with pytest.raises(InvalidPathError):
        paths.parse_path(bad)


def test_parse_path_rejects_non_strings():
    with pytest.raises(InvalidPathError):
        paths.parse_path(3)  # type: ignore[arg-type]
