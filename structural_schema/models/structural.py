from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class StructOrBool:
    """Value of ``additionalProperties``: either a schema or a plain boolean."""
    structural: Optional["Structural"] = None
    allows: bool = True


@dataclass(frozen=True)
class Generic:
    type: str = ""
    additional_properties: Optional[StructOrBool] = None
    title: str = ""
    description: str = ""
    nullable: bool = False

    # None means undefined
    default: Any = None


@dataclass(frozen=True)
class Extensions:
    x_preserve_unknown_fields: bool = False
    x_embedded_resource: bool = False
    x_int_or_string: bool = False


@dataclass(frozen=True)
class ValueValidation:
    format: str = ""
    maximum: Optional[float] = None
    exclusive_maximum: bool = False
    minimum: Optional[float] = None
    exclusive_minimum: bool = False
    max_length: Optional[int] = None
    min_length: Optional[int] = None
    pattern: str = ""
    max_items: Optional[int] = None
    min_items: Optional[int] = None
    unique_items: bool = False
    multiple_of: Optional[float] = None
    enum: Tuple[Any, ...] = ()
    max_properties: Optional[int] = None
    min_properties: Optional[int] = None
    required: Tuple[str, ...] = ()

    # Logical junctors
    all_of: Tuple["NestedValueValidation", ...] = ()
    one_of: Tuple["NestedValueValidation", ...] = ()
    any_of: Tuple["NestedValueValidation", ...] = ()
    not_: Optional["NestedValueValidation"] = None


@dataclass(frozen=True)
class NestedValueValidation:
    """Schema fragment below a logical junctor (anyOf, allOf, oneOf, not).

    Only value validations and structure (items, properties) are allowed here.
    Generic fields and vendor extensions are kept in ``forbidden_*`` so that
    their presence can be reported.
    """
    value_validation: ValueValidation = field(default_factory=ValueValidation)
    items: Optional["NestedValueValidation"] = None
    properties: Optional[Dict[str, "NestedValueValidation"]] = None

    forbidden_generics: Generic = field(default_factory=Generic)
    forbidden_extensions: Extensions = field(default_factory=Extensions)


@dataclass(frozen=True)
class Structural:
    """A node of a structural schema tree."""
    generic: Generic = field(default_factory=Generic)
    extensions: Extensions = field(default_factory=Extensions)

    # None means absent, an empty dict means "properties: {}"
    properties: Optional[Dict[str, "Structural"]] = None
    items: Optional["Structural"] = None
    value_validation: Optional[ValueValidation] = None

    @property
    def type(self) -> str:
        return self.generic.type

    @property
    def x_preserve_unknown_fields(self) -> bool:
        return self.extensions.x_preserve_unknown_fields

    @property
    def x_embedded_resource(self) -> bool:
        return self.extensions.x_embedded_resource

    @property
    def x_int_or_string(self) -> bool:
        return self.extensions.x_int_or_string
