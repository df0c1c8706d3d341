# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Decoding of raw OpenAPI v3 schema documents into structural schema trees.

The raw document is first checked for nesting depth and against the bundled
JSON Schema (single source of truth for the accepted shape); only then is it
converted. Generic fields and vendor extensions found below logical junctors
are kept as "forbidden" values so that the validator can report them.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set, Tuple

import jsonschema

from ...config import validator_config
from ...exceptions import SchemaDecodeError, SchemaIssue
from ...field.path import jp_escape
from ..json_schema_loader import load_schema
from ..structural import (
    Extensions,
    Generic,
    NestedValueValidation,
    StructOrBool,
    Structural,
    ValueValidation,
)

logger = logging.getLogger(__name__)

OPENAPI_SCHEMA_NAME = "openapi_v3_schema"

_GENERIC_KEYS = ("type", "additionalProperties", "title", "description", "nullable", "default")
_EXTENSION_KEYS = (
    "x-kubernetes-preserve-unknown-fields",
    "x-kubernetes-embedded-resource",
    "x-kubernetes-int-or-string",
)
_STRUCTURE_KEYS = ("properties", "items")

# raw key -> ValueValidation attribute
_SCALAR_VALIDATIONS = {
    "format": "format",
    "maximum": "maximum",
    "exclusiveMaximum": "exclusive_maximum",
    "minimum": "minimum",
    "exclusiveMinimum": "exclusive_minimum",
    "maxLength": "max_length",
    "minLength": "min_length",
    "pattern": "pattern",
    "maxItems": "max_items",
    "minItems": "min_items",
    "uniqueItems": "unique_items",
    "multipleOf": "multiple_of",
    "maxProperties": "max_properties",
    "minProperties": "min_properties",
}
_JUNCTOR_KEYS = ("allOf", "oneOf", "anyOf", "not")
_VALUE_VALIDATION_KEYS = tuple(_SCALAR_VALIDATIONS) + ("enum", "required") + _JUNCTOR_KEYS

_KNOWN_KEYS = frozenset(_GENERIC_KEYS + _EXTENSION_KEYS + _STRUCTURE_KEYS + _VALUE_VALIDATION_KEYS)

_validator = None


def _get_validator():
    global _validator
    if _validator is None:
        schema = load_schema(OPENAPI_SCHEMA_NAME)
        validator_cls = jsonschema.validators.validator_for(schema)
        validator_cls.check_schema(schema)
        _validator = validator_cls(schema)
    return _validator


def _join_pointer(base: str, *tokens: Any) -> str:
    return base + "".join(f"/{jp_escape(str(t))}" for t in tokens)


@dataclass(frozen=True)
class DocumentSize:
    """Size of a raw document as seen by a recursive walk.

    ``nodes`` counts every mapping, list and scalar, with aliased containers
    counted once per reference.
    """
    depth: int
    nodes: int


def _children(value: Any) -> List[Tuple[Any, Any]]:
    if isinstance(value, dict):
        return list(value.items())
    return list(enumerate(value))


def measure_document(raw: Any, base_pointer: str = "", max_depth: Optional[int] = None) -> DocumentSize:
    """Measure nesting depth and expanded size of ``raw`` without recursion.

    Containers shared through YAML aliases are measured once, so alias fan-out
    costs time linear in the number of distinct containers. A container that
    contains itself raises :class:`SchemaDecodeError`. When ``max_depth`` is
    given the walk stops at the first container below it and the returned
    ``depth`` is ``max_depth + 1`` (``nodes`` is then not meaningful).
    """
    if not isinstance(raw, (dict, list)):
        return DocumentSize(depth=0, nodes=1)

    measured: Dict[int, DocumentSize] = {}
    on_path: Set[int] = set()
    stack = [(raw, base_pointer, 1, False)]
    while stack:
        value, pointer, depth, finished = stack.pop()
        key = id(value)

        if finished:
            on_path.discard(key)
            deepest, nodes = 0, 1
            for _, child in _children(value):
                if isinstance(child, (dict, list)):
                    size = measured[id(child)]
                    deepest = max(deepest, size.depth)
                    nodes += size.nodes
                else:
                    nodes += 1
            measured[key] = DocumentSize(depth=deepest + 1, nodes=nodes)
            continue

        if key in measured:
            continue
        if key in on_path:
            raise SchemaDecodeError(
                "Cannot decode schema",
                [SchemaIssue("schema contains a recursive alias", pointer or "/")],
            )
        if max_depth is not None and depth > max_depth:
            return DocumentSize(depth=depth, nodes=0)

        on_path.add(key)
        stack.append((value, pointer, depth, True))
        for token, child in _children(value):
            if isinstance(child, (dict, list)) and id(child) not in measured:
                stack.append((child, _join_pointer(pointer, token), depth + 1, False))

    return measured[id(raw)]


def measure_depth(raw: Any) -> int:
    """Return the nesting depth of mappings and lists in ``raw``.

    Scalars have depth 0, ``{}`` and ``[]`` have depth 1.
    """
    return measure_document(raw).depth


def check_document_shape(raw: Any, base_pointer: str = "") -> List[SchemaIssue]:
    """Validate the raw document against the bundled JSON Schema.

    Returns:
        Every shape violation, ordered by location.
    """
    issues = []
    for error in _get_validator().iter_errors(raw):
        pointer = _join_pointer(base_pointer, *error.absolute_path)
        issues.append(SchemaIssue(message=error.message, yaml_path=pointer or "/"))
    return sorted(issues, key=lambda issue: issue.yaml_path)


def decode_structural(
    raw: Any,
    *,
    max_depth: Optional[int] = None,
    max_nodes: Optional[int] = None,
    base_pointer: str = "",
) -> Structural:
    """Convert a decoded schema mapping into a :class:`Structural` tree.

    Args:
        raw: Decoded document, e.g. the ``openAPIV3Schema`` of a CRD version
        max_depth: Maximum nesting of ``raw``; defaults to the global config
        max_nodes: Maximum expanded size of ``raw``; defaults to the global config
        base_pointer: JSON pointer of ``raw`` inside its file, used in issues

    Raises:
        SchemaDecodeError: If the document is not a mapping, is recursive,
            nested too deeply or too large, has an invalid shape or uses ``$ref``
    """
    if not isinstance(raw, dict):
        raise SchemaDecodeError(
            "Cannot decode schema",
            [SchemaIssue(f"schema must be a mapping, got {type(raw).__name__}", base_pointer or "/")],
        )

    if max_depth is None:
        max_depth = validator_config.max_depth
    if max_nodes is None:
        max_nodes = validator_config.max_nodes
    size = measure_document(raw, base_pointer, max_depth)
    if size.depth > max_depth:
        raise SchemaDecodeError(
            "Cannot decode schema",
            [SchemaIssue(f"schema is nested deeper than the maximum of {max_depth} levels", base_pointer or "/")],
        )
    if size.nodes > max_nodes:
        raise SchemaDecodeError(
            "Cannot decode schema",
            [SchemaIssue(f"schema expands to {size.nodes} nodes, maximum is {max_nodes}", base_pointer or "/")],
        )

    issues = check_document_shape(raw, base_pointer)
    if issues:
        raise SchemaDecodeError("Schema document has an invalid shape", issues)

    issues = []
    structural = _decode_structural(raw, base_pointer, issues)
    if issues:
        raise SchemaDecodeError("Cannot decode schema", issues)

    logger.debug(f"Decoded schema at '{base_pointer or '/'}' ({size.depth} levels, {size.nodes} nodes)")
    return structural


def _check_keywords(raw: Dict[str, Any], pointer: str, issues: List[SchemaIssue]) -> None:
    if "$ref" in raw:
        issues.append(SchemaIssue("$ref is not supported", _join_pointer(pointer, "$ref")))
    unknown = sorted(k for k in raw if k not in _KNOWN_KEYS and k != "$ref")
    if unknown:
        logger.debug(f"Ignoring keywords {unknown} at '{pointer or '/'}'")


def _decode_structural(raw: Dict[str, Any], pointer: str, issues: List[SchemaIssue]) -> Structural:
    _check_keywords(raw, pointer, issues)

    properties = None
    if "properties" in raw:
        properties = {
            name: _decode_structural(value, _join_pointer(pointer, "properties", name), issues)
            for name, value in raw["properties"].items()
        }

    items = None
    if "items" in raw:
        items = _decode_structural(raw["items"], _join_pointer(pointer, "items"), issues)

    value_validation = None
    if any(key in raw for key in _VALUE_VALIDATION_KEYS):
        value_validation = _decode_value_validation(raw, pointer, issues)

    return Structural(
        generic=_decode_generic(raw, pointer, issues),
        extensions=_decode_extensions(raw),
        properties=properties,
        items=items,
        value_validation=value_validation,
    )


def _decode_generic(raw: Dict[str, Any], pointer: str, issues: List[SchemaIssue]) -> Generic:
    additional_properties = None
    raw_additional = raw.get("additionalProperties")
    if isinstance(raw_additional, bool):
        additional_properties = StructOrBool(allows=raw_additional)
    elif isinstance(raw_additional, dict):
        additional_properties = StructOrBool(
            structural=_decode_structural(raw_additional, _join_pointer(pointer, "additionalProperties"), issues),
            allows=True,
        )

    return Generic(
        type=raw.get("type", ""),
        additional_properties=additional_properties,
        title=raw.get("title", ""),
        description=raw.get("description", ""),
        nullable=raw.get("nullable", False),
        default=raw.get("default"),
    )


def _decode_extensions(raw: Dict[str, Any]) -> Extensions:
    return Extensions(
        x_preserve_unknown_fields=raw.get("x-kubernetes-preserve-unknown-fields", False),
        x_embedded_resource=raw.get("x-kubernetes-embedded-resource", False),
        x_int_or_string=raw.get("x-kubernetes-int-or-string", False),
    )


def _decode_value_validation(raw: Dict[str, Any], pointer: str, issues: List[SchemaIssue]) -> ValueValidation:
    scalars = {attr: raw[key] for key, attr in _SCALAR_VALIDATIONS.items() if key in raw}

    def _junctor(key: str):
        return tuple(
            _decode_nested(entry, _join_pointer(pointer, key, i), issues)
            for i, entry in enumerate(raw.get(key, ()))
        )

    not_ = None
    if "not" in raw:
        not_ = _decode_nested(raw["not"], _join_pointer(pointer, "not"), issues)

    return ValueValidation(
        enum=tuple(raw.get("enum", ())),
        required=tuple(raw.get("required", ())),
        all_of=_junctor("allOf"),
        one_of=_junctor("oneOf"),
        any_of=_junctor("anyOf"),
        not_=not_,
        **scalars,
    )


def _decode_nested(raw: Dict[str, Any], pointer: str, issues: List[SchemaIssue]) -> NestedValueValidation:
    _check_keywords(raw, pointer, issues)

    properties = None
    if "properties" in raw:
        properties = {
            name: _decode_nested(value, _join_pointer(pointer, "properties", name), issues)
            for name, value in raw["properties"].items()
        }

    items = None
    if "items" in raw:
        items = _decode_nested(raw["items"], _join_pointer(pointer, "items"), issues)

    return NestedValueValidation(
        value_validation=_decode_value_validation(raw, pointer, issues),
        items=items,
        properties=properties,
        forbidden_generics=_decode_generic(raw, pointer, issues),
        forbidden_extensions=_decode_extensions(raw),
    )
