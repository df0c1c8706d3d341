from pathlib import Path

import pytest

from structural_schema.exceptions import ValidationError
from structural_schema.models.parsing.yaml_parser import YamlParser
from structural_schema.utils.source_location import SourceLocation, format_source, lookup_source


SCHEMA_YAML = """\
type: object
properties:
  spec:
    type: object
    properties:
      size:
        anyOf:
          - type: integer
          - type: string
"""


def test_source_map_records_pointers():
    [(data, source_map)] = YamlParser(cache_enabled=False).load_string_with_source(SCHEMA_YAML)

    assert data["properties"]["spec"]["type"] == "object"
    assert source_map["/type"] == {"line": 1, "column": 7}
    assert source_map["/properties/spec/properties/size/anyOf/1"]["line"] == 9
    assert source_map["/properties/spec/properties/size/anyOf/1/type"] == {"line": 9, "column": 19}


def test_empty_content_has_no_documents():
    parser = YamlParser(cache_enabled=False)

    assert parser.load_string_with_source("") == []
    assert parser.load_string_with_source("# only a comment\n---\n") == []


def test_every_document_gets_its_own_source_map():
    content = "type: object\n---\n---\nkind: Widget\nspec:\n  size: 1\n"

    documents = YamlParser(cache_enabled=False).load_string_with_source(content)

    assert [data for data, _ in documents] == [
        {"type": "object"},
        {"kind": "Widget", "spec": {"size": 1}},
    ]
    second_map = documents[1][1]
    assert second_map[""] == {"line": 4, "column": 1}
    assert second_map["/spec/size"] == {"line": 6, "column": 9}
    assert "/type" not in second_map


def test_recursive_alias_does_not_loop_forever():
    content = "type: object\nproperties: &props\n  child:\n    type: object\n    properties: *props\n"

    [(data, source_map)] = YamlParser(cache_enabled=False).load_string_with_source(content)

    assert data["properties"]["child"]["properties"] is data["properties"]
    assert source_map["/properties/child/type"] == {"line": 4, "column": 11}
    # the aliased mapping is recorded under its first path only
    assert "/properties/child/properties/child" not in source_map


def test_parse_errors_raise_validation_error():
    with pytest.raises(ValidationError, match="Failed to parse YAML"):
        YamlParser(cache_enabled=False).load_string_with_source("type: [object")


def test_missing_file_raises(tmp_path: Path):
    with pytest.raises(ValidationError, match="not found"):
        YamlParser(cache_enabled=False).load_with_source(tmp_path / "missing.yaml")


def test_directory_is_not_a_file(tmp_path: Path):
    with pytest.raises(ValidationError, match="not a file"):
        YamlParser(cache_enabled=False).load_with_source(tmp_path)


def test_cache_returns_first_load(write_file):
    path = write_file("schema.yaml", "type: object\n")
    parser = YamlParser(cache_enabled=True)

    [(first, _)] = parser.load_with_source(path)
    path.write_text("type: string\n", encoding="utf-8")
    [(second, _)] = parser.load_with_source(path)
    parser.clear_cache()
    [(third, _)] = parser.load_with_source(path)

    assert first == second == {"type": "object"}
    assert third == {"type": "string"}


def test_lookup_falls_back_to_parent_position():
    source_map = {"": {"line": 1, "column": 1}, "/properties/a": {"line": 3, "column": 5}}

    loc = lookup_source(source_map, "/properties/a/type")

    assert loc == SourceLocation(yaml_path="/properties/a/type", line=3, column=5)
    assert lookup_source(source_map, "/other").line == 1
    assert lookup_source(None, "/x") == SourceLocation(yaml_path="/x")


def test_format_source():
    loc = SourceLocation(file_path=Path("crd.yaml"), yaml_path="/type", line=2, column=3)

    assert format_source(loc) == " (source= crd.yaml:2:3  yaml_path=/type)"
    assert format_source(SourceLocation()) == ""
    assert format_source(None) == ""
