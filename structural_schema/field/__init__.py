"""Field paths and field errors.

This package has no dependency on the schema model so it can be shared by the
validator, the decoder and the linter.
"""

from .path import FieldPath, jp_escape
from .errors import (
    ErrorList,
    ErrorType,
    FieldError,
    forbidden,
    invalid,
    required,
    to_aggregate,
)

__all__ = [
    "FieldPath",
    "jp_escape",
    "ErrorList",
    "ErrorType",
    "FieldError",
    "forbidden",
    "invalid",
    "required",
    "to_aggregate",
]
