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

"""Structural schema validation.

A schema is structural when:

* both ``forbidden_generics`` and ``forbidden_extensions`` below logical
  junctors only hold zero values, with the two exceptions for int-or-string;
* every schema with ``x-kubernetes-embedded-resource: true`` has
  ``type: object`` and, unless ``x-kubernetes-preserve-unknown-fields: true``
  is set, declares ``properties``;
* ``x-kubernetes-int-or-string: true`` is not combined with the other two
  extensions, and under it the junctors are either empty of ``type`` or have
  one of these shapes::

      1) anyOf:
         - type: integer
         - type: string
      2) allOf:
         - anyOf:
           - type: integer
           - type: string
         - ... zero or more

* ``additionalProperties`` is not used at the root.

Checking that every field referenced inside a junctor also exists outside of
it (completeness) is not done here. Such checks can be passed to
:func:`validate_structural` through ``additional_checks``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence

from .field import ErrorList, FieldPath, forbidden, invalid, required
from .models.structural import (
    Extensions,
    Generic,
    NestedValueValidation,
    Structural,
    ValueValidation,
)

logger = logging.getLogger(__name__)


StructuralCheck = Callable[[Structural, FieldPath], Iterable]

INT_OR_STRING_ANY_OF = (
    NestedValueValidation(forbidden_generics=Generic(type="integer")),
    NestedValueValidation(forbidden_generics=Generic(type="string")),
)


class Level(Enum):
    ROOT = "root"
    ITEM = "item"
    FIELD = "field"


def validate_structural(
    s: Optional[Structural],
    fld_path: Optional[FieldPath] = None,
    additional_checks: Sequence[StructuralCheck] = (),
) -> ErrorList:
    """Check that ``s`` is a structural schema.

    Args:
        s: Root of the schema tree. ``None`` is valid and yields no errors.
        fld_path: Path the root is attributed to (defaults to the empty path).
        additional_checks: Callables ``(s, fld_path) -> iterable of FieldError``
            whose errors are appended after the invariant errors.

    Returns:
        All violations found in the tree; empty when the schema is structural.
    """
    if fld_path is None:
        fld_path = FieldPath()

    all_errs: ErrorList = []
    all_errs.extend(validate_structural_invariants(s, Level.ROOT, fld_path))
    for check in additional_checks:
        all_errs.extend(check(s, fld_path))

    logger.debug("structural validation of %r found %d error(s)", str(fld_path) or "<root>", len(all_errs))
    return all_errs


def _is_int_or_string_any_of(any_of) -> bool:
    return len(any_of) == 2 and tuple(any_of) == INT_OR_STRING_ANY_OF


def validate_structural_invariants(s: Optional[Structural], lvl: Level, fld_path: FieldPath) -> ErrorList:
    """Check the invariants of a structural schema node and its children."""
    if s is None:
        return []

    all_errs: ErrorList = []

    all_errs.extend(validate_structural_invariants(s.items, Level.ITEM, fld_path.child("items")))
    for name in sorted(s.properties or {}):
        all_errs.extend(
            validate_structural_invariants(
                s.properties[name], Level.FIELD, fld_path.child("properties").key(name)
            )
        )
    all_errs.extend(validate_generic(s.generic, lvl, fld_path))
    all_errs.extend(validate_extensions(s.extensions, fld_path))

    # detect the two int-or-string exceptions
    skip_any_of = False
    skip_first_all_of_any_of = False
    vv = s.value_validation
    if s.x_int_or_string and vv is not None:
        if _is_int_or_string_any_of(vv.any_of):
            skip_any_of = True
        elif len(vv.all_of) >= 1 and _is_int_or_string_any_of(vv.all_of[0].value_validation.any_of):
            skip_first_all_of_any_of = True

    all_errs.extend(validate_value_validation(vv, skip_any_of, skip_first_all_of_any_of, fld_path))

    if s.x_embedded_resource and s.type != "object":
        if not s.type:
            all_errs.append(
                required(fld_path.child("type"), "must be object if x-kubernetes-embedded-resource is true")
            )
        else:
            all_errs.append(
                invalid(fld_path.child("type"), s.type, "must be object if x-kubernetes-embedded-resource is true")
            )
    elif not s.type and not s.x_int_or_string and not s.x_preserve_unknown_fields:
        if lvl == Level.ROOT:
            all_errs.append(required(fld_path.child("type"), "must not be empty at the root"))
        elif lvl == Level.ITEM:
            all_errs.append(required(fld_path.child("type"), "must not be empty for specified array items"))
        elif lvl == Level.FIELD:
            all_errs.append(required(fld_path.child("type"), "must not be empty for specified object fields"))

    if lvl == Level.ROOT and s.type and s.type != "object":
        all_errs.append(invalid(fld_path.child("type"), s.type, "must be object at the root"))

    if s.x_embedded_resource and not s.x_preserve_unknown_fields and s.properties is None:
        all_errs.append(
            required(
                fld_path.child("properties"),
                "must not be empty if x-kubernetes-embedded-resource is true without "
                "x-kubernetes-preserve-unknown-fields",
            )
        )

    return all_errs


def validate_generic(g: Optional[Generic], lvl: Level, fld_path: FieldPath) -> ErrorList:
    """Check the generic fields of a structural schema node."""
    if g is None:
        return []

    all_errs: ErrorList = []

    if g.additional_properties is not None:
        if lvl == Level.ROOT:
            all_errs.append(forbidden(fld_path.child("additionalProperties"), "must not be used at the root"))
        if g.additional_properties.structural is not None:
            all_errs.extend(
                validate_structural_invariants(
                    g.additional_properties.structural,
                    Level.FIELD,
                    fld_path.child("additionalProperties"),
                )
            )

    return all_errs


def validate_extensions(x: Extensions, fld_path: FieldPath) -> ErrorList:
    """Check the vendor extensions of a structural schema node."""
    all_errs: ErrorList = []

    if x.x_int_or_string and x.x_preserve_unknown_fields:
        all_errs.append(
            invalid(
                fld_path.child("x-kubernetes-preserve-unknown-fields"),
                x.x_preserve_unknown_fields,
                "must be false if x-kubernetes-int-or-string is true",
            )
        )
    if x.x_int_or_string and x.x_embedded_resource:
        all_errs.append(
            invalid(
                fld_path.child("x-kubernetes-embedded-resource"),
                x.x_embedded_resource,
                "must be false if x-kubernetes-int-or-string is true",
            )
        )

    return all_errs


def validate_value_validation(
    v: Optional[ValueValidation],
    skip_any_of: bool,
    skip_first_all_of_any_of: bool,
    fld_path: FieldPath,
) -> ErrorList:
    """Check the logical junctors of a value validation."""
    if v is None:
        return []

    all_errs: ErrorList = []

    if not skip_any_of:
        for i, nested in enumerate(v.any_of):
            all_errs.extend(validate_nested_value_validation(nested, False, False, fld_path.child("anyOf").index(i)))

    for i, nested in enumerate(v.all_of):
        skip = skip_first_all_of_any_of and i == 0
        all_errs.extend(validate_nested_value_validation(nested, skip, False, fld_path.child("allOf").index(i)))

    for i, nested in enumerate(v.one_of):
        all_errs.extend(validate_nested_value_validation(nested, False, False, fld_path.child("oneOf").index(i)))

    all_errs.extend(validate_nested_value_validation(v.not_, False, False, fld_path.child("not")))

    return all_errs


def validate_nested_value_validation(
    v: Optional[NestedValueValidation],
    skip_any_of: bool,
    skip_all_of_any_of: bool,
    fld_path: FieldPath,
) -> ErrorList:
    """Check a schema fragment below a logical junctor.

    The skip flags apply to the junctors of this exact fragment only; nested
    ``items`` and ``properties`` are always fully checked.
    """
    if v is None:
        return []

    all_errs: ErrorList = []

    all_errs.extend(validate_value_validation(v.value_validation, skip_any_of, skip_all_of_any_of, fld_path))
    all_errs.extend(validate_nested_value_validation(v.items, False, False, fld_path.child("items")))
    for name in sorted(v.properties or {}):
        all_errs.extend(
            validate_nested_value_validation(
                v.properties[name], False, False, fld_path.child("properties").key(name)
            )
        )

    g = v.forbidden_generics
    if g.type:
        all_errs.append(forbidden(fld_path.child("type"), "must be empty to be structural"))
    if g.additional_properties is not None:
        all_errs.append(forbidden(fld_path.child("additionalProperties"), "must be undefined to be structural"))
    if g.default is not None:
        all_errs.append(forbidden(fld_path.child("default"), "must be undefined to be structural"))
    if g.title:
        all_errs.append(forbidden(fld_path.child("title"), "must be empty to be structural"))
    if g.description:
        all_errs.append(forbidden(fld_path.child("description"), "must be empty to be structural"))
    if g.nullable:
        all_errs.append(forbidden(fld_path.child("nullable"), "must be false to be structural"))

    x = v.forbidden_extensions
    if x.x_preserve_unknown_fields:
        all_errs.append(forbidden(fld_path.child("x-kubernetes-preserve-unknown-fields"), "must be false to be structural"))
    if x.x_embedded_resource:
        all_errs.append(forbidden(fld_path.child("x-kubernetes-embedded-resource"), "must be false to be structural"))
    if x.x_int_or_string:
        all_errs.append(forbidden(fld_path.child("x-kubernetes-int-or-string"), "must be false to be structural"))

    return all_errs
