"""Schema tree model and the loaders that build it."""

from .structural import (
    Extensions,
    Generic,
    NestedValueValidation,
    StructOrBool,
    Structural,
    ValueValidation,
)

__all__ = [
    "Extensions",
    "Generic",
    "NestedValueValidation",
    "StructOrBool",
    "Structural",
    "ValueValidation",
]
