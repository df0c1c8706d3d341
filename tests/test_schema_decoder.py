import pytest

from structural_schema.exceptions import SchemaDecodeError, ValidationError
from structural_schema.field import ErrorType
from structural_schema.models.parsing.schema_decoder import (
    check_document_shape,
    decode_structural,
    measure_depth,
    measure_document,
)
from structural_schema.models.structural import (
    Generic,
    NestedValueValidation,
    StructOrBool,
    Structural,
)
from structural_schema.validation import INT_OR_STRING_ANY_OF, validate_structural


def test_decode_plain_object():
    raw = {
        "type": "object",
        "description": "root",
        "properties": {
            "replicas": {"type": "integer", "minimum": 0, "default": 1},
            "tags": {"type": "array", "items": {"type": "string"}},
        },
    }

    s = decode_structural(raw)

    assert s.type == "object"
    assert s.generic.description == "root"
    assert s.value_validation is None
    assert set(s.properties) == {"replicas", "tags"}
    replicas = s.properties["replicas"]
    assert replicas.generic.default == 1
    assert replicas.value_validation.minimum == 0
    assert s.properties["tags"].items.type == "string"
    assert validate_structural(s) == []


def test_absent_and_empty_properties_are_distinguished():
    assert decode_structural({"type": "object"}).properties is None
    assert decode_structural({"type": "object", "properties": {}}).properties == {}


def test_decode_extensions():
    s = decode_structural(
        {
            "type": "object",
            "x-kubernetes-preserve-unknown-fields": True,
            "x-kubernetes-embedded-resource": True,
        }
    )

    assert s.x_preserve_unknown_fields
    assert s.x_embedded_resource
    assert not s.x_int_or_string


def test_decode_additional_properties_bool_and_schema():
    as_bool = decode_structural({"type": "object", "additionalProperties": False})
    as_schema = decode_structural({"type": "object", "additionalProperties": {"type": "string"}})

    assert as_bool.generic.additional_properties == StructOrBool(allows=False)
    assert as_schema.generic.additional_properties.structural == Structural(generic=Generic(type="string"))


def test_int_or_string_any_of_decodes_to_template():
    s = decode_structural(
        {
            "x-kubernetes-int-or-string": True,
            "anyOf": [{"type": "integer"}, {"type": "string"}],
        }
    )

    assert s.value_validation.any_of == INT_OR_STRING_ANY_OF
    assert validate_structural(s) == []


def test_generic_fields_in_junctors_become_forbidden_values():
    s = decode_structural(
        {
            "type": "object",
            "oneOf": [
                {
                    "title": "t",
                    "nullable": True,
                    "x-kubernetes-int-or-string": True,
                    "required": ["a"],
                    "properties": {"a": {"default": "x"}},
                }
            ],
        }
    )

    entry = s.value_validation.one_of[0]
    assert isinstance(entry, NestedValueValidation)
    assert entry.forbidden_generics.title == "t"
    assert entry.forbidden_generics.nullable is True
    assert entry.forbidden_extensions.x_int_or_string is True
    assert entry.value_validation.required == ("a",)
    assert entry.properties["a"].forbidden_generics.default == "x"

    errors = validate_structural(s)
    assert [(e.type, e.field) for e in errors] == [
        (ErrorType.FORBIDDEN, "oneOf[0].properties[a].default"),
        (ErrorType.FORBIDDEN, "oneOf[0].title"),
        (ErrorType.FORBIDDEN, "oneOf[0].nullable"),
        (ErrorType.FORBIDDEN, "oneOf[0].x-kubernetes-int-or-string"),
    ]


def test_unknown_keywords_are_ignored():
    s = decode_structural({"type": "object", "example": {"a": 1}, "externalDocs": {"url": "x"}})

    assert s == Structural(generic=Generic(type="object"))


def test_non_mapping_is_rejected():
    with pytest.raises(SchemaDecodeError) as exc_info:
        decode_structural(["type", "object"], base_pointer="/spec")

    assert exc_info.value.issues[0].yaml_path == "/spec"
    assert "must be a mapping" in exc_info.value.issues[0].message
    assert isinstance(exc_info.value, ValidationError)


def test_shape_errors_are_all_reported_with_pointers():
    raw = {
        "type": 3,
        "properties": {"a": {"nullable": "yes"}},
        "anyOf": {"type": "string"},
    }

    with pytest.raises(SchemaDecodeError) as exc_info:
        decode_structural(raw, base_pointer="/spec/validation/openAPIV3Schema")

    pointers = [issue.yaml_path for issue in exc_info.value.issues]
    assert pointers == sorted(pointers)
    assert set(pointers) == {
        "/spec/validation/openAPIV3Schema/anyOf",
        "/spec/validation/openAPIV3Schema/properties/a/nullable",
        "/spec/validation/openAPIV3Schema/type",
    }


def test_items_as_array_is_rejected():
    issues = check_document_shape({"type": "array", "items": [{"type": "string"}]})

    assert [issue.yaml_path for issue in issues] == ["/items"]


def test_check_document_shape_accepts_valid_document():
    assert check_document_shape({"type": "object", "properties": {"a": {"type": "string"}}}) == []


def test_ref_is_rejected_but_property_named_ref_is_not():
    with pytest.raises(SchemaDecodeError) as exc_info:
        decode_structural({"type": "object", "properties": {"a": {"$ref": "#/definitions/a"}}})

    assert [issue.yaml_path for issue in exc_info.value.issues] == ["/properties/a/$ref"]
    assert exc_info.value.issues[0].message == "$ref is not supported"

    s = decode_structural({"type": "object", "properties": {"$ref": {"type": "string"}}})
    assert s.properties["$ref"].type == "string"


def test_measure_depth():
    assert measure_depth("x") == 0
    assert measure_depth({}) == 1
    assert measure_depth({"a": [1, {"b": {}}]}) == 4


def test_deep_documents_are_rejected():
    raw = {"type": "string"}
    for _ in range(50):
        raw = {"type": "object", "properties": {"p": raw}}

    with pytest.raises(SchemaDecodeError, match="deeper than the maximum of 20 levels"):
        decode_structural(raw, max_depth=20)


def test_deep_documents_within_limit_are_decoded():
    raw = {"type": "string"}
    for _ in range(10):
        raw = {"type": "object", "properties": {"p": raw}}

    s = decode_structural(raw, max_depth=64)

    depth = 0
    while s.properties:
        s = s.properties["p"]
        depth += 1
    assert depth == 10
    assert s.type == "string"


def test_recursive_alias_is_rejected():
    # properties: &props {child: {type: object, properties: *props}}
    props = {}
    props["child"] = {"type": "object", "properties": props}
    raw = {"type": "object", "properties": props}

    with pytest.raises(SchemaDecodeError) as exc_info:
        decode_structural(raw, base_pointer="/spec/validation/openAPIV3Schema")

    [issue] = exc_info.value.issues
    assert issue.message == "schema contains a recursive alias"
    assert issue.yaml_path == "/spec/validation/openAPIV3Schema/properties/child/properties"


def test_self_containing_list_is_rejected():
    items = []
    items.append(items)

    with pytest.raises(SchemaDecodeError, match="recursive alias"):
        measure_document({"enum": items})


def test_shared_nodes_are_measured_once():
    # 40 levels of two references to the same mapping: 2**40 expanded paths
    raw = {"type": "string"}
    for _ in range(40):
        raw = {"allOf": [raw, raw]}

    size = measure_document(raw)

    assert size.depth == 81
    assert size.nodes == 2 ** 42 - 2
    assert measure_depth(raw) == 81


def test_alias_fan_out_is_rejected_before_decoding():
    leaf = {"type": "string", "description": "x"}
    level = leaf
    for _ in range(12):
        level = {"anyOf": [level] * 10}
    raw = {"type": "object", "properties": {"a": level}}

    with pytest.raises(SchemaDecodeError, match="maximum is 1000000"):
        decode_structural(raw, max_depth=128, max_nodes=1_000_000)


def test_node_limit_counts_scalars():
    raw = {"type": "object", "properties": {"a": {"type": "string"}}}

    assert measure_document(raw).nodes == 5
    with pytest.raises(SchemaDecodeError, match="expands to 5 nodes, maximum is 4"):
        decode_structural(raw, max_nodes=4)
    assert decode_structural(raw, max_nodes=5).properties["a"].type == "string"


def test_depth_walk_stops_at_the_limit():
    raw = {"type": "string"}
    for _ in range(500):
        raw = {"items": raw}

    assert measure_document(raw, max_depth=10).depth == 11
    assert measure_depth(raw) == 501
